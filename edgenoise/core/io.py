from pathlib import Path
from typing import Union

import torch

from edgenoise.export.pcm import encode


class AudioIO:
    @staticmethod
    def to_bytes(waveform: torch.Tensor, sample_rate: int, format: str = "WAV") -> bytes:
        """Returns audio as bytes (for API responses). format: WAV or RAW."""
        fmt = format.upper()
        if fmt not in ("WAV", "RAW", "PCM"):
            raise ValueError(f"Unsupported format: {format}")
        return encode(waveform, sample_rate, wrap_in_container=(fmt == "WAV")).data

    @staticmethod
    def save(waveform: torch.Tensor, sample_rate: int, path: Union[str, Path], format: str = "WAV") -> Path:
        """Writes the encoded buffer to path; parent dirs are created."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(AudioIO.to_bytes(waveform, sample_rate, format))
        return path

    @staticmethod
    def save_wav(waveform: torch.Tensor, sample_rate: int, path: Union[str, Path]) -> Path:
        return AudioIO.save(waveform, sample_rate, path, "WAV")

    @staticmethod
    def save_pcm(waveform: torch.Tensor, sample_rate: int, path: Union[str, Path]) -> Path:
        return AudioIO.save(waveform, sample_rate, path, "RAW")
