"""
Parameter clamping: keeps padding noise at or below full scale.
"""
import math

from edgenoise.core.types import LEVEL_MAX_DBFS, LEVEL_MIN_DBFS


def clamp_params(params: dict) -> dict:
    """
    Clamp params to usable ranges. Returns a new dict (does not mutate input).

    Clamps:
    - target_level_dbfs to [-200, 0]
    - duration_ms to >= 0
    Values that are not numbers are left for NoiseRequest to reject.
    """
    result = params.copy()

    level = result.get("target_level_dbfs")
    if isinstance(level, (int, float)) and not isinstance(level, bool) and math.isfinite(level):
        result["target_level_dbfs"] = min(max(float(level), LEVEL_MIN_DBFS), LEVEL_MAX_DBFS)

    duration = result.get("duration_ms")
    if isinstance(duration, (int, float)) and not isinstance(duration, bool) and math.isfinite(duration):
        result["duration_ms"] = max(float(duration), 0.0)

    return result
