"""
Params layer: defaults snapshot, alias mapping, clamps, request building.
Resolved defaults = resolve_params({}). Snapshots detect drift.
"""
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
from edgenoise.core.params import db_to_linear, duration_ms_to_samples, linear_to_dbfs, SILENCE_DBFS
from edgenoise.core.types import Distribution, NoiseRequestError
from edgenoise.params import PARAM_SCHEMA, build_request, clamp_params, resolve_params, to_engine_params
from edgenoise.params.canonical_defaults import MAX_SAMPLE_COUNT, NOISE_DEFAULTS


def test_defaults_snapshot():
    resolved = resolve_params({})
    assert resolved["sample_rate"] == 48000
    assert resolved["duration_ms"] == 200.0
    assert resolved["distribution"] == "gaussian"
    assert resolved["target_level_dbfs"] == -80.0
    assert resolved["zero_endpoints"] is True
    assert resolved["remove_dc"] is True
    assert resolved["soften_edges"] is False
    assert resolved["seed"] is None


def test_default_request_uses_duration():
    req = build_request(resolve_params({}))
    assert req.sample_count == 9600
    assert req.distribution is Distribution.GAUSSIAN
    assert req.seed is None


def test_sample_count_wins_over_duration():
    req = build_request(resolve_params({"sample_count": 123, "duration_ms": 1000}))
    assert req.sample_count == 123


def test_duration_rounds_to_nearest_sample():
    req = build_request(resolve_params({"sample_rate": 44100, "duration_ms": 10.01}))
    assert req.sample_count == 441


def test_camel_case_aliases():
    params = to_engine_params({
        "sampleRate": 16000,
        "sampleCount": 100,
        "targetRmsDbfs": -60,
        "dcRemoval": False,
        "softenEdges": True,
        "zeroEndpoints": True,
    })
    assert params == {
        "sample_rate": 16000,
        "sample_count": 100,
        "target_level_dbfs": -60,
        "remove_dc": False,
        "soften_edges": True,
        "zero_endpoints": True,
    }


def test_engine_name_beats_alias():
    assert to_engine_params({"sampleRate": 8000, "sample_rate": 16000})["sample_rate"] == 16000
    assert to_engine_params({"sample_rate": 16000, "sampleRate": 8000})["sample_rate"] == 16000


def test_unknown_keys_stripped():
    assert to_engine_params({"volume": 3, "seed": 1}) == {"seed": 1}


def test_clamp_level_and_duration():
    out = clamp_params({"target_level_dbfs": 12.0, "duration_ms": -5})
    assert out["target_level_dbfs"] == 0.0
    assert out["duration_ms"] == 0.0
    assert clamp_params({"target_level_dbfs": -900})["target_level_dbfs"] == -200.0


def test_clamp_does_not_mutate():
    params = {"target_level_dbfs": 3.0}
    clamp_params(params)
    assert params == {"target_level_dbfs": 3.0}


def test_none_values_fall_back_to_defaults():
    resolved = resolve_params({"sample_rate": None, "distribution": None})
    assert resolved["sample_rate"] == 48000
    assert resolved["distribution"] == "gaussian"


def test_empty_seed_string_means_unseeded():
    assert build_request(resolve_params({"seed": "  "})).seed is None


def test_invalid_rate_rejected_at_build():
    with pytest.raises(NoiseRequestError):
        build_request(resolve_params({"sample_rate": 0}))


def test_sample_count_limit():
    assert build_request(resolve_params({"sample_count": MAX_SAMPLE_COUNT})).sample_count == MAX_SAMPLE_COUNT
    with pytest.raises(NoiseRequestError):
        build_request(resolve_params({"sample_count": MAX_SAMPLE_COUNT + 1}))
    with pytest.raises(NoiseRequestError):
        build_request(resolve_params({"sampleCount": 1e300}))


def test_duration_over_limit_rejected():
    # 10 minutes at 48 kHz is 28.8M samples
    with pytest.raises(NoiseRequestError):
        build_request(resolve_params({"duration_ms": 600_000}))


def test_schema_caps_sample_count():
    assert PARAM_SCHEMA["sample_count"]["max"] == MAX_SAMPLE_COUNT


def test_schema_defaults_match_canonical():
    for name, entry in PARAM_SCHEMA.items():
        assert entry["default"] == NOISE_DEFAULTS[name]


# -----------------------------------------------------------------------------
# core.params helpers
# -----------------------------------------------------------------------------

def test_db_conversions():
    assert db_to_linear(0.0) == 1.0
    assert db_to_linear(-20.0) == pytest.approx(0.1)
    assert linear_to_dbfs(0.1) == pytest.approx(-20.0)
    assert linear_to_dbfs(0.0) == SILENCE_DBFS


def test_duration_conversion_edge_cases():
    assert duration_ms_to_samples(200, 48000) == 9600
    assert duration_ms_to_samples(-1, 48000) == 0
    assert duration_ms_to_samples(float("nan"), 48000) == 0
    assert duration_ms_to_samples("x", 48000) == 0
