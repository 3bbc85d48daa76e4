"""
Endpoint-constrained padding noise: inaudible, never silent, first and last
sample exactly zero, normalized to an RMS target and encodable as PCM16/WAV.
"""
from edgenoise.core.types import (
    Distribution,
    EncodedAudio,
    NoiseGenerationError,
    NoiseRequest,
    NoiseRequestError,
    WavFormatError,
)
from edgenoise.export.pcm import encode, encode_raw, encode_wav
from edgenoise.generator import NoiseEngine, generate_noise

__version__ = "1.0.0"

__all__ = [
    "Distribution",
    "EncodedAudio",
    "NoiseEngine",
    "NoiseGenerationError",
    "NoiseRequest",
    "NoiseRequestError",
    "WavFormatError",
    "encode",
    "encode_raw",
    "encode_wav",
    "generate_noise",
]
