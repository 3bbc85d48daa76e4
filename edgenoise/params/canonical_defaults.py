"""
Canonical generation defaults: single source for request initialization.
Used by resolve_params so callers that send partial params get the same
buffer the browser tool produced with its form defaults.
"""
from typing import Any, Dict

NOISE_DEFAULTS: Dict[str, Any] = {
    "sample_rate": 48000,
    # sample_count wins when set; otherwise duration_ms is converted
    "sample_count": None,
    "duration_ms": 200.0,
    "distribution": "gaussian",
    "target_level_dbfs": -80.0,
    "zero_endpoints": True,
    "remove_dc": True,
    "soften_edges": False,
    "seed": None,
}

# Largest buffer a single request may ask for (about 5.8 min at 48 kHz)
MAX_SAMPLE_COUNT = 2 ** 24
