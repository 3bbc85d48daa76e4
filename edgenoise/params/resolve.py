"""
Parameter resolution: merge NOISE_DEFAULTS with incoming params, clamp,
then build the NoiseRequest the engine consumes.
Incoming params override defaults; None values fall back to the default.
"""
from typing import Any, Dict

from edgenoise.core.params import duration_ms_to_samples
from edgenoise.core.types import NoiseRequest, NoiseRequestError
from edgenoise.params.canonical_defaults import MAX_SAMPLE_COUNT, NOISE_DEFAULTS
from edgenoise.params.clamp import clamp_params
from edgenoise.params.engine_params import to_engine_params


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Returns a new dict (does not mutate inputs)."""
    result = base.copy()
    for key, value in override.items():
        if value is None and key != "seed":
            continue
        result[key] = value
    return result


def resolve_params(params: dict) -> dict:
    """
    Resolve params by:
    1. Normalizing aliases (camelCase from browser callers)
    2. Merging onto NOISE_DEFAULTS (user params override defaults)
    3. Clamping to usable ranges

    Returns a fully resolved flat params dict.
    """
    engine_params = to_engine_params(params or {})
    merged = _merge(NOISE_DEFAULTS, engine_params)
    return clamp_params(merged)


def build_request(resolved: dict) -> NoiseRequest:
    """
    NoiseRequest from resolved params. sample_count wins when present,
    otherwise duration_ms is rounded to whole samples at the sample rate.
    Raises NoiseRequestError above MAX_SAMPLE_COUNT.
    """
    count = resolved.get("sample_count")
    seed = resolved.get("seed")
    if isinstance(seed, str) and not seed.strip():
        seed = None
    request = NoiseRequest(
        sample_rate=resolved["sample_rate"],
        sample_count=0 if count is None else count,
        distribution=resolved["distribution"],
        target_level_dbfs=resolved["target_level_dbfs"],
        zero_endpoints=resolved["zero_endpoints"],
        remove_dc=resolved["remove_dc"],
        soften_edges=resolved["soften_edges"],
        seed=seed,
    )
    if count is None:
        request.sample_count = duration_ms_to_samples(resolved.get("duration_ms"), request.sample_rate)
    if request.sample_count > MAX_SAMPLE_COUNT:
        raise NoiseRequestError(
            f"sample_count {request.sample_count} exceeds the limit of {MAX_SAMPLE_COUNT}"
        )
    return request
