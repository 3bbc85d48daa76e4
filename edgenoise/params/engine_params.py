"""
Engine params contract: only params that pass through here reach the generator.
Maps camelCase keys sent by browser/JSON callers to engine names and strips
everything else. In dev mode, log what was dropped.
"""
from typing import Any, Dict
import os
import logging

from edgenoise.params.canonical_defaults import NOISE_DEFAULTS

logger = logging.getLogger("edgenoise")

PARAM_ALIASES = {
    "sampleRate": "sample_rate",
    "sampleCount": "sample_count",
    "samples": "sample_count",
    "durationMs": "duration_ms",
    "ms": "duration_ms",
    "targetLevelDbfs": "target_level_dbfs",
    "targetRmsDbfs": "target_level_dbfs",
    "rmsDBFS": "target_level_dbfs",
    "level_dbfs": "target_level_dbfs",
    "zeroEndpoints": "zero_endpoints",
    "removeDc": "remove_dc",
    "dcRemoval": "remove_dc",
    "softenEdges": "soften_edges",
}

DEV = os.environ.get("ENV", "development").lower() in ("development", "dev", "test")


def to_engine_params(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize a raw request body to engine params.
    Engine names win over aliases when both are present.
    """
    out: Dict[str, Any] = {}
    dropped = []
    for key, value in (raw or {}).items():
        if key in NOISE_DEFAULTS:
            out[key] = value
        elif key in PARAM_ALIASES:
            out.setdefault(PARAM_ALIASES[key], value)
        else:
            dropped.append(key)
    if dropped and DEV:
        logger.warning("[Parameter Contract] Unknown fields stripped before engine: %s", dropped)
    return out
