"""
Default QC thresholds for generated padding noise.
"""
QC_THRESHOLDS = {
    "peak_max": 1.0 + 1e-6,  # Full scale plus float slack
    "endpoint_abs_max": 1e-7,  # |first|, |last| when zero_endpoints is requested
    "rms_tolerance_db": 0.5,  # Measured vs target RMS level
    "zero_run_max": 8,  # Longest interior run of exact zeros before warning
    "dc_offset_max": 0.05,  # Relative to RMS; only warned when DC removal was requested
}
