import math

import torch

from edgenoise.core.types import Distribution
from edgenoise.dsp.rng import SeededRandom


class GaussianSampler:
    """
    Standard normal samples via the polar (Marsaglia) Box-Muller method.

    Each accepted (u, v) pair yields two values: u*m is returned immediately
    and v*m is cached and returned by the very next call. Reproducibility is
    defined against this variant only; a trigonometric Box-Muller would
    produce a different stream from the same seed.
    """

    def __init__(self, rng: SeededRandom):
        self.rng = rng
        self._spare = None

    def sample(self) -> float:
        if self._spare is not None:
            value = self._spare
            self._spare = None
            return value
        while True:
            u = 2.0 * self.rng.next() - 1.0
            v = 2.0 * self.rng.next() - 1.0
            s = u * u + v * v
            if 0.0 < s < 1.0:
                break
        mul = math.sqrt(-2.0 * math.log(s) / s)
        self._spare = v * mul
        return u * mul


class UniformSampler:
    """Symmetric uniform samples in [-1, 1)."""

    def __init__(self, rng: SeededRandom):
        self.rng = rng

    def sample(self) -> float:
        return 2.0 * self.rng.next() - 1.0


def make_sampler(distribution, rng: SeededRandom):
    if Distribution.parse(distribution) is Distribution.GAUSSIAN:
        return GaussianSampler(rng)
    return UniformSampler(rng)


class Noise:
    @staticmethod
    def white(num_samples: int, distribution, rng: SeededRandom) -> torch.Tensor:
        """Raw white noise as a float64 tensor of exactly num_samples values."""
        sampler = make_sampler(distribution, rng)
        values = [sampler.sample() for _ in range(max(0, num_samples))]
        return torch.tensor(values, dtype=torch.float64)
