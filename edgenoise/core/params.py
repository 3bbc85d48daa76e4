"""
Level and length helpers shared by the post chain, QC and the params layer.
Level conversions are RMS-referenced dBFS (full scale = 1.0).
"""
import math

# Floor used when reporting the level of silence
SILENCE_DBFS = -400.0


def db_to_linear(db: float) -> float:
    """0 dBFS -> 1.0, -20 dBFS -> 0.1."""
    return 10.0 ** (db / 20.0)


def linear_to_dbfs(x: float) -> float:
    """Linear amplitude to dBFS; silence maps to SILENCE_DBFS instead of -inf."""
    x = abs(x)
    if x <= 0 or not math.isfinite(x):
        return SILENCE_DBFS
    return 20.0 * math.log10(x)


def duration_ms_to_samples(duration_ms: float, sample_rate: int) -> int:
    """Round a duration to the nearest whole sample count (never negative)."""
    try:
        ms = float(duration_ms)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(ms) or ms <= 0:
        return 0
    return int(round(sample_rate * ms / 1000.0))
