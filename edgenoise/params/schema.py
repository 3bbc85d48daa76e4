"""
Parameter schema for UI/API visibility.
Defaults come from canonical_defaults.NOISE_DEFAULTS.
"""
from typing import Any, Dict, Literal

from edgenoise.core.types import LEVEL_MAX_DBFS, LEVEL_MIN_DBFS, MAX_SAMPLE_RATE
from edgenoise.params.canonical_defaults import MAX_SAMPLE_COUNT, NOISE_DEFAULTS

ParamType = Literal["float", "int", "bool", "enum", "seed"]
ParamGroup = Literal["length", "source", "level", "shaping"]

ParamSchemaEntry = Dict[str, Any]


def _make_param(
    param_type: ParamType,
    name: str,
    min_val,
    max_val,
    group: ParamGroup,
    description: str,
    **extra,
) -> ParamSchemaEntry:
    """Helper to create a schema entry."""
    entry = {
        "type": param_type,
        "default": NOISE_DEFAULTS[name],
        "min": min_val,
        "max": max_val,
        "group": group,
        "description": description,
    }
    entry.update(extra)
    return entry


PARAM_SCHEMA: Dict[str, ParamSchemaEntry] = {
    "sample_rate": _make_param(
        "int", "sample_rate", 1, MAX_SAMPLE_RATE, "length", "Sample rate (Hz)"
    ),
    "sample_count": _make_param(
        "int", "sample_count", 0, MAX_SAMPLE_COUNT, "length", "Exact output length; overrides duration_ms"
    ),
    "duration_ms": _make_param(
        "float", "duration_ms", 0.0, None, "length", "Length in ms, rounded to whole samples"
    ),
    "distribution": _make_param(
        "enum", "distribution", None, None, "source", "Raw noise distribution",
        choices=["gaussian", "uniform"],
    ),
    "seed": _make_param(
        "seed", "seed", None, None, "source", "Integer or string seed; empty = non-reproducible"
    ),
    "target_level_dbfs": _make_param(
        "float", "target_level_dbfs", LEVEL_MIN_DBFS, LEVEL_MAX_DBFS, "level", "Target RMS level (dBFS)"
    ),
    "remove_dc": _make_param(
        "bool", "remove_dc", False, True, "level", "Subtract the mean before normalizing"
    ),
    "zero_endpoints": _make_param(
        "bool", "zero_endpoints", False, True, "shaping", "Force first and last sample to 0 by detrending"
    ),
    "soften_edges": _make_param(
        "bool", "soften_edges", False, True, "shaping", "Damp samples 1 and N-2 by 0.7"
    ),
}
