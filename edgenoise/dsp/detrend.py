"""
Endpoint detrending: remove the straight line through the first and last
raw samples so both land exactly on zero, without any window or fade.
"""
import torch

EDGE_DAMPING = 0.7


def detrend_endpoints_(buffer: torch.Tensor) -> torch.Tensor:
    """
    In place: y[i] = x[i] - (a + (b - a) * i / (N - 1)), a = x[0], b = x[N-1].
    Endpoints are assigned 0 afterwards rather than trusting cancellation.
    """
    n = buffer.shape[-1]
    if n < 2:
        if n == 1:
            buffer[0] = 0.0
        return buffer
    a = float(buffer[0])
    b = float(buffer[-1])
    t = torch.arange(n, dtype=buffer.dtype, device=buffer.device) / (n - 1)
    buffer.sub_(a + (b - a) * t)
    buffer[0] = 0.0
    buffer[-1] = 0.0
    return buffer


def soften_edges_(buffer: torch.Tensor, factor: float = EDGE_DAMPING) -> torch.Tensor:
    """Damp the samples next to each endpoint. No-op below 4 samples."""
    n = buffer.shape[-1]
    if n >= 4:
        buffer[1] *= factor
        buffer[-2] *= factor
    return buffer
