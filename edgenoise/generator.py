"""
Endpoint-constrained noise engine.
Pipeline: seeded source -> distribution sampler -> endpoint detrend
-> optional edge softening -> loudness post chain.
"""
import logging
from typing import Optional

import torch

from edgenoise.core.types import NoiseGenerationError, NoiseRequest
from edgenoise.dsp.detrend import detrend_endpoints_, soften_edges_
from edgenoise.dsp.noise import Noise
from edgenoise.dsp.postchain import PostChain
from edgenoise.dsp.rng import SeededRandom

logger = logging.getLogger(__name__)


class NoiseEngine:
    """
    Renders one NoiseRequest into a fresh float64 buffer of exactly
    request.sample_count samples. Only last_seed (the internal seed of the
    most recent render) survives a call.
    """

    def __init__(self):
        self.last_seed: Optional[int] = None

    def render(self, request: NoiseRequest) -> torch.Tensor:
        rng = SeededRandom(request.seed)
        self.last_seed = rng.seed_value
        n = request.sample_count
        logger.debug(
            "render: n=%d sr=%d dist=%s target=%.2f dBFS seed=%s (state=%d)",
            n, request.sample_rate, request.distribution.value,
            request.target_level_dbfs, request.seed, rng.seed_value,
        )

        buffer = Noise.white(n, request.distribution, rng)

        if request.zero_endpoints:
            detrend_endpoints_(buffer)
        if request.soften_edges:
            soften_edges_(buffer)

        PostChain.process(
            buffer,
            request.target_level_dbfs,
            remove_dc=request.remove_dc,
            zero_endpoints=request.zero_endpoints,
        )

        if n and not bool(torch.isfinite(buffer).all()):
            raise NoiseGenerationError("non-finite sample in generated buffer")
        return buffer


def generate_noise(request: Optional[NoiseRequest] = None, **fields) -> torch.Tensor:
    """
    Convenience entry: generate_noise(req) or
    generate_noise(sample_rate=48000, sample_count=9600, seed=1).
    """
    if request is None:
        request = NoiseRequest(**fields)
    elif fields:
        raise TypeError("pass either a NoiseRequest or keyword fields, not both")
    return NoiseEngine().render(request)
