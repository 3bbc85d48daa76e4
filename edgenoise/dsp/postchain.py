"""
Loudness post chain: DC removal, RMS normalization to a dBFS target,
clip safety, endpoint pinning. Deterministic; no randomness.
"""
import logging
import math

import torch

from edgenoise.core.params import db_to_linear

logger = logging.getLogger(__name__)

FULL_SCALE = 1.0


def rms(buffer: torch.Tensor) -> float:
    if buffer.numel() == 0:
        return 0.0
    return float(torch.sqrt(torch.mean(buffer * buffer)))


def peak(buffer: torch.Tensor) -> float:
    if buffer.numel() == 0:
        return 0.0
    return float(torch.max(torch.abs(buffer)))


class PostChain:
    """
    Shared post chain, all steps in place:
    DC removal -> RMS normalize -> clip safety -> endpoint pin.
    """

    @staticmethod
    def _dc_block(buffer: torch.Tensor) -> torch.Tensor:
        """Subtract the arithmetic mean."""
        if buffer.numel() > 0:
            buffer.sub_(buffer.mean())
        return buffer

    @staticmethod
    def _normalize_rms(buffer: torch.Tensor, target_level_dbfs: float) -> torch.Tensor:
        """Scale to the target RMS. Zero or non-finite RMS yields silence."""
        current = rms(buffer)
        if current > 0 and math.isfinite(current):
            buffer.mul_(db_to_linear(target_level_dbfs) / current)
        else:
            if buffer.numel() > 0:
                logger.debug("degenerate RMS (%r), emitting silence", current)
            buffer.zero_()
        return buffer

    @staticmethod
    def _clip_safety(buffer: torch.Tensor) -> torch.Tensor:
        """Rescale by 1/peak if any sample exceeds full scale."""
        p = peak(buffer)
        if p > FULL_SCALE:
            logger.warning("clip safety engaged: peak %.4f > %.1f, rescaling", p, FULL_SCALE)
            buffer.div_(p)
        return buffer

    @staticmethod
    def _pin_endpoints(buffer: torch.Tensor) -> torch.Tensor:
        n = buffer.shape[-1]
        if n >= 1:
            buffer[0] = 0.0
            buffer[-1] = 0.0
        return buffer

    @classmethod
    def process(
        cls,
        buffer: torch.Tensor,
        target_level_dbfs: float,
        remove_dc: bool = True,
        zero_endpoints: bool = True,
    ) -> torch.Tensor:
        if remove_dc:
            cls._dc_block(buffer)
        cls._normalize_rms(buffer, target_level_dbfs)
        cls._clip_safety(buffer)
        # Scaling keeps exact zeros, the clip division can still drift them
        if zero_endpoints:
            cls._pin_endpoints(buffer)
        return buffer
