import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

Seed = Union[int, str, None]

# libsndfile keeps the rate in a C int
MAX_SAMPLE_RATE = 0x7FFFFFFF

# Usable target range; below the floor the gain underflows to silence
LEVEL_MIN_DBFS = -200.0
LEVEL_MAX_DBFS = 0.0

_TRUE_STRINGS = ("true", "1", "yes", "on")
_FALSE_STRINGS = ("false", "0", "no", "off")


class NoiseRequestError(ValueError):
    """Request rejected before generation; no buffer is produced."""


class NoiseGenerationError(RuntimeError):
    """Pipeline produced a non-finite sample."""


class WavFormatError(ValueError):
    """Bytes are not a canonical mono 16-bit PCM WAV."""


class Distribution(str, Enum):
    GAUSSIAN = "gaussian"
    UNIFORM = "uniform"

    @classmethod
    def parse(cls, value) -> "Distribution":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise NoiseRequestError(
                f"distribution must be one of {[d.value for d in cls]}, got {value!r}"
            ) from None


def _coerce_sample_rate(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise NoiseRequestError(f"sample_rate must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise NoiseRequestError(f"sample_rate must be a positive finite number, got {value!r}")
    rate = int(value)
    if rate < 1:
        raise NoiseRequestError(f"sample_rate must be at least 1 Hz, got {value!r}")
    if rate > MAX_SAMPLE_RATE:
        raise NoiseRequestError(f"sample_rate {rate} does not fit a WAV header")
    return rate


def _coerce_sample_count(value) -> int:
    """Negative, non-finite or non-numeric counts degrade to an empty buffer."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return max(0, int(math.floor(value)))


def _coerce_flag(name: str, value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise NoiseRequestError(f"{name} must be a boolean, got {value!r}")


@dataclass
class NoiseRequest:
    """
    One generation call. Validated and normalized on construction:
    sample_rate is rejected when invalid, sample_count never is, and
    target_level_dbfs is clamped to [LEVEL_MIN_DBFS, LEVEL_MAX_DBFS].
    """
    sample_rate: int
    sample_count: int
    distribution: Distribution = Distribution.GAUSSIAN
    target_level_dbfs: float = -80.0
    zero_endpoints: bool = True
    remove_dc: bool = True
    soften_edges: bool = False
    seed: Seed = None

    def __post_init__(self):
        self.sample_rate = _coerce_sample_rate(self.sample_rate)
        self.sample_count = _coerce_sample_count(self.sample_count)
        self.distribution = Distribution.parse(self.distribution)
        try:
            level = float(self.target_level_dbfs)
        except (TypeError, ValueError):
            raise NoiseRequestError(
                f"target_level_dbfs must be a number, got {self.target_level_dbfs!r}"
            ) from None
        if not math.isfinite(level):
            raise NoiseRequestError(f"target_level_dbfs must be finite, got {level!r}")
        self.target_level_dbfs = min(max(level, LEVEL_MIN_DBFS), LEVEL_MAX_DBFS)
        seed = self.seed
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, (int, float, str))):
            raise NoiseRequestError(f"seed must be an integer or a string, got {seed!r}")
        if isinstance(seed, float) and not math.isfinite(seed):
            raise NoiseRequestError(f"seed must be finite, got {seed!r}")
        self.zero_endpoints = _coerce_flag("zero_endpoints", self.zero_endpoints)
        self.remove_dc = _coerce_flag("remove_dc", self.remove_dc)
        self.soften_edges = _coerce_flag("soften_edges", self.soften_edges)

    def to_dict(self) -> dict:
        return {
            "sample_rate": self.sample_rate,
            "sample_count": self.sample_count,
            "distribution": self.distribution.value,
            "target_level_dbfs": self.target_level_dbfs,
            "zero_endpoints": self.zero_endpoints,
            "remove_dc": self.remove_dc,
            "soften_edges": self.soften_edges,
            "seed": self.seed,
        }


@dataclass
class EncodedAudio:
    data: bytes
    sample_rate: int
    container: str  # "wav" or "raw"

    @property
    def sample_count(self) -> int:
        payload = len(self.data) - (44 if self.container == "wav" else 0)
        return max(0, payload) // 2

    @property
    def media_type(self) -> str:
        return "audio/wav" if self.container == "wav" else "application/octet-stream"

    @property
    def extension(self) -> str:
        return "wav" if self.container == "wav" else "pcm"
