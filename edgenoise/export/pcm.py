"""
16-bit signed mono PCM encoder with an optional canonical 44-byte RIFF/WAVE
header. Little-endian throughout; no dithering.
Samples are truncated to int16 here and handed to soundfile as-is, so the
container carries exactly those values.
"""
import io
import struct
from typing import Dict

import numpy as np
import soundfile as sf
import torch

from edgenoise.core.types import (
    MAX_SAMPLE_RATE,
    EncodedAudio,
    NoiseRequestError,
    WavFormatError,
)

PCM16_SCALE = 32767
WAV_HEADER_SIZE = 44

# RIFF | size | WAVE | "fmt " | 16 | fmt | ch | rate | byte rate | align | bits | data | size
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


def _to_numpy(samples) -> np.ndarray:
    if isinstance(samples, torch.Tensor):
        samples = samples.detach().cpu().numpy()
    return np.asarray(samples, dtype=np.float64).reshape(-1)


def float_to_pcm16(samples) -> np.ndarray:
    """Clamp to [-1, 1], scale by 32767, truncate toward zero. NaN -> 0."""
    data = _to_numpy(samples)
    data = np.nan_to_num(data, nan=0.0, posinf=1.0, neginf=-1.0)
    data = np.clip(data, -1.0, 1.0)
    return np.trunc(data * PCM16_SCALE).astype("<i2")


def _check_sample_rate(sample_rate) -> int:
    if isinstance(sample_rate, bool) or not isinstance(sample_rate, int):
        raise NoiseRequestError(f"sample_rate must be an integer, got {sample_rate!r}")
    if not 0 < sample_rate <= MAX_SAMPLE_RATE:
        raise NoiseRequestError(f"sample_rate out of range for WAV: {sample_rate}")
    return sample_rate


def _write(pcm: np.ndarray, sample_rate: int, format: str) -> bytes:
    buffer = io.BytesIO()
    sf.write(buffer, pcm, sample_rate, format=format, subtype="PCM_16", endian="LITTLE")
    return buffer.getvalue()


def encode_raw(samples, sample_rate: int = 48000) -> bytes:
    """Headerless PCM16LE, exactly 2 bytes per sample."""
    pcm = float_to_pcm16(samples)
    if pcm.size == 0:
        return b""
    return _write(pcm, _check_sample_rate(sample_rate), "RAW")


def encode_wav(samples, sample_rate: int) -> bytes:
    """Canonical mono PCM_16 WAV: 44-byte header then the raw samples."""
    return _write(float_to_pcm16(samples), _check_sample_rate(sample_rate), "WAV")


def encode(samples, sample_rate: int, wrap_in_container: bool = True) -> EncodedAudio:
    if wrap_in_container:
        return EncodedAudio(encode_wav(samples, sample_rate), sample_rate, "wav")
    _check_sample_rate(sample_rate)
    return EncodedAudio(encode_raw(samples, sample_rate), sample_rate, "raw")


def parse_wav_header(data: bytes) -> Dict[str, object]:
    """Read back and check the canonical 44-byte header layout."""
    if len(data) < WAV_HEADER_SIZE:
        raise WavFormatError(f"need {WAV_HEADER_SIZE} header bytes, got {len(data)}")
    fields = _HEADER.unpack_from(data, 0)
    (riff, chunk_size, wave, fmt, fmt_size, audio_format, channels,
     sample_rate, byte_rate, block_align, bits, data_id, data_size) = fields
    if riff != b"RIFF" or wave != b"WAVE":
        raise WavFormatError("missing RIFF/WAVE magic")
    if fmt != b"fmt " or data_id != b"data":
        raise WavFormatError("not a canonical fmt/data layout")
    return {
        "chunk_size": chunk_size,
        "fmt_size": fmt_size,
        "audio_format": audio_format,
        "num_channels": channels,
        "sample_rate": sample_rate,
        "byte_rate": byte_rate,
        "block_align": block_align,
        "bits_per_sample": bits,
        "data_size": data_size,
    }
