"""
Parameter schema, defaults and resolution into a NoiseRequest.
Default values: single source is canonical_defaults.NOISE_DEFAULTS; use resolve_params({}) for resolved defaults.
"""
from edgenoise.params.schema import PARAM_SCHEMA
from edgenoise.params.resolve import resolve_params, build_request
from edgenoise.params.clamp import clamp_params
from edgenoise.params.engine_params import to_engine_params

__all__ = ["PARAM_SCHEMA", "resolve_params", "build_request", "clamp_params", "to_engine_params"]
