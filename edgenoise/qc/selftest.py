"""
Built-in self tests, runnable from the service and the CLI.
Each check reports a structured pass/fail result; nothing is raised.
"""
from dataclasses import asdict, dataclass
from typing import Callable, List

import torch

from edgenoise.core.params import linear_to_dbfs
from edgenoise.core.types import NoiseRequest
from edgenoise.dsp.postchain import rms
from edgenoise.export.pcm import encode_raw, encode_wav, parse_wav_header
from edgenoise.generator import generate_noise

ENDPOINT_TOL = 1e-7
RMS_TOL_DB = 0.5


class SelfTestFailure(AssertionError):
    pass


@dataclass
class SelfTestResult:
    name: str
    passed: bool
    message: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


def _expect(condition: bool, message: str) -> None:
    if not condition:
        raise SelfTestFailure(message)


def _endpoints_are_zero():
    n = 1000
    y = generate_noise(NoiseRequest(48000, n, target_level_dbfs=-60, soften_edges=True, seed=42))
    _expect(abs(float(y[0])) <= ENDPOINT_TOL, f"y[0]={float(y[0])}")
    _expect(abs(float(y[n - 1])) <= ENDPOINT_TOL, f"y[N-1]={float(y[n - 1])}")


def _rms_matches_target():
    target = -70.0
    y = generate_noise(NoiseRequest(48000, 48000, target_level_dbfs=target, seed=1))
    db = linear_to_dbfs(rms(y))
    _expect(abs(db - target) <= RMS_TOL_DB, f"got {db:.3f} dBFS")


def _same_seed_same_sequence():
    req = dict(sample_rate=48000, sample_count=257, target_level_dbfs=-70, soften_edges=True, seed="abc")
    y1 = generate_noise(NoiseRequest(**req))
    y2 = generate_noise(NoiseRequest(**req))
    diff = (y1 != y2).nonzero()
    _expect(diff.numel() == 0, f"diff at {diff[0].item() if diff.numel() else -1}")


def _wav_header_and_length():
    y = generate_noise(NoiseRequest(16000, 100, "uniform", -60, seed=7))
    wav = encode_wav(y, 16000)
    _expect(len(wav) == 244, f"size={len(wav)}")
    _expect(wav[0:4] == b"RIFF" and wav[8:12] == b"WAVE", "missing RIFF/WAVE magic")
    header = parse_wav_header(wav)
    _expect(header["chunk_size"] == 236, f"chunk_size={header['chunk_size']}")
    _expect(header["data_size"] == 200, f"data_size={header['data_size']}")
    _expect(header["sample_rate"] == 16000, f"sample_rate={header['sample_rate']}")


def _raw_pcm_length():
    n = 1234
    y = generate_noise(NoiseRequest(48000, n, target_level_dbfs=-60, seed=9))
    raw = encode_raw(y, 48000)
    _expect(len(raw) == n * 2, f"size={len(raw)}")


def _degenerate_lengths():
    empty = generate_noise(NoiseRequest(48000, 0, seed=3))
    _expect(empty.numel() == 0, f"N=0 gave {empty.numel()} samples")
    _expect(encode_raw(empty) == b"", "N=0 raw encoding not empty")
    single = generate_noise(NoiseRequest(48000, 1, seed=3))
    _expect(single.tolist() == [0.0], f"N=1 gave {single.tolist()}")
    negative = generate_noise(NoiseRequest(48000, -5, seed=3))
    _expect(negative.numel() == 0, "negative count did not degrade to empty")


def _no_clip_at_full_scale():
    y = generate_noise(NoiseRequest(48000, 4800, target_level_dbfs=0.0, seed=11))
    _expect(float(torch.max(torch.abs(y))) <= 1.0 + 1e-6, "peak above full scale")


SELF_TESTS: List[tuple] = [
    ("Endpoints are ~0", _endpoints_are_zero),
    ("RMS(dBFS) ~= target (+/-0.5 dB)", _rms_matches_target),
    ("Same seed -> same sequence", _same_seed_same_sequence),
    ("WAV header & length", _wav_header_and_length),
    ("RAW PCM byte length", _raw_pcm_length),
    ("Degenerate lengths (N=0, N=1, N<0)", _degenerate_lengths),
    ("No clip at 0 dBFS", _no_clip_at_full_scale),
]


def run_self_tests(tests: List[tuple] = None) -> List[SelfTestResult]:
    results = []
    for name, check in (tests if tests is not None else SELF_TESTS):
        results.append(_run_one(name, check))
    return results


def _run_one(name: str, check: Callable[[], None]) -> SelfTestResult:
    try:
        check()
    except Exception as e:  # reported as a result, not propagated
        return SelfTestResult(name, False, f"{type(e).__name__}: {e}")
    return SelfTestResult(name, True)
