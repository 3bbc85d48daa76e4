"""
Seeded uniform source for noise generation.

Core is mulberry32: a 32-bit additive counter passed through multiply /
xor-shift mixing. All arithmetic is done on Python ints masked to 32 bits,
so a given seed yields a bit-identical stream on every platform.
"""
import logging
import math
import os
import random
import re
import time
from typing import Optional

from edgenoise.core.types import NoiseRequestError, Seed

logger = logging.getLogger(__name__)

MASK32 = 0xFFFFFFFF
# Seeds that normalize to 0 start from here instead
DEFAULT_STATE = 123456789

_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x01000193
_INT_STRING = re.compile(r"^-?\d+$")


def fnv1a_32(text: str) -> int:
    """32-bit FNV-1a over the UTF-8 bytes of text."""
    h = _FNV_OFFSET
    for byte in text.encode("utf-8"):
        h ^= byte
        h = (h * _FNV_PRIME) & MASK32
    return h


def entropy_seed() -> int:
    """Fresh 32-bit seed from the OS; wall clock mixed with `random` if the OS has none."""
    try:
        return int.from_bytes(os.urandom(4), "little")
    except NotImplementedError:
        logger.warning("OS entropy unavailable, seeding from wall clock")
        return (time.time_ns() ^ random.getrandbits(32)) & MASK32


def normalize_seed(seed: Seed) -> int:
    """
    Reduce an int or str seed to the generator's 32-bit internal state.
    Integer-looking strings parse as integers, other strings are hashed.
    A result of 0 is remapped to DEFAULT_STATE.
    """
    if isinstance(seed, bool):
        raise NoiseRequestError("seed must be an integer or a string, not a bool")
    if isinstance(seed, float):
        if not math.isfinite(seed):
            raise NoiseRequestError(f"seed must be finite, got {seed!r}")
        seed = int(seed)
    if isinstance(seed, int):
        value = seed & MASK32
    elif isinstance(seed, str):
        text = seed.strip()
        value = int(text) & MASK32 if _INT_STRING.match(text) else fnv1a_32(seed)
    else:
        raise NoiseRequestError(f"seed must be an integer or a string, got {type(seed).__name__}")
    return value or DEFAULT_STATE


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK32


class SeededRandom:
    """
    Uniform draws in [0, 1). One instance per generation call; never shared.
    seed=None draws an entropy seed, available afterwards as seed_value.
    """

    def __init__(self, seed: Optional[Seed] = None):
        if seed is None:
            self.seed_value = entropy_seed() or DEFAULT_STATE
            self.deterministic = False
        else:
            self.seed_value = normalize_seed(seed)
            self.deterministic = True
        self._state = self.seed_value

    def next_uint32(self) -> int:
        self._state = (self._state + 0x6D2B79F5) & MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK32
        return (t ^ (t >> 14)) & MASK32

    def next(self) -> float:
        # Dividing a u32 by 2**32 can never reach 1.0
        return self.next_uint32() / 4294967296.0
