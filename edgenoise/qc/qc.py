"""
Quality Control analysis for generated padding noise.
Detects the failure modes the buffer exists to avoid: clipping, non-zero
endpoints, missed loudness targets, non-finite values and flat-zero runs.
"""
import math
from typing import Dict, Optional

import torch

from edgenoise.core.params import linear_to_dbfs
from edgenoise.dsp.postchain import peak, rms
from edgenoise.qc.thresholds import QC_THRESHOLDS


def _longest_zero_run(audio: torch.Tensor) -> int:
    """Longest run of exact zeros, ignoring the pinned endpoints."""
    interior = audio[1:-1] if audio.numel() > 2 else audio[:0]
    longest = current = 0
    for is_zero in (interior == 0).tolist():
        current = current + 1 if is_zero else 0
        longest = max(longest, current)
    return longest


def analyze(
    audio: torch.Tensor,
    sample_rate: int,
    target_level_dbfs: Optional[float] = None,
    zero_endpoints: bool = True,
    remove_dc: bool = False,
) -> Dict:
    """
    Analyze a generated buffer.

    Args:
        audio: 1D buffer
        sample_rate: Sample rate in Hz
        target_level_dbfs: Requested RMS level; skipped when None
        zero_endpoints: Whether first/last must be exactly 0
        remove_dc: Whether DC removal was requested (enables the DC warning)

    Returns:
        Dict with metrics and pass/fail flags
    """
    audio = audio.reshape(-1).to(torch.float64)
    n = audio.numel()
    thresholds = QC_THRESHOLDS

    all_finite = bool(torch.isfinite(audio).all()) if n else True
    peak_lin = peak(audio) if all_finite else math.inf
    rms_lin = rms(audio) if all_finite else math.inf
    dc = float(audio.mean()) if n and all_finite else 0.0

    metrics = {
        "sample_count": n,
        "duration_ms": 1000.0 * n / sample_rate if sample_rate else 0.0,
        "peak": peak_lin,
        "peak_dbfs": linear_to_dbfs(peak_lin),
        "rms": rms_lin,
        "rms_dbfs": linear_to_dbfs(rms_lin),
        "dc_offset": dc,
        "first": float(audio[0]) if n else 0.0,
        "last": float(audio[-1]) if n else 0.0,
        "longest_zero_run": _longest_zero_run(audio),
        "all_finite": all_finite,
    }

    failures = []
    warnings = []

    if not all_finite:
        failures.append("Non-finite samples in buffer")

    if peak_lin > thresholds["peak_max"]:
        failures.append(f"Peak above full scale: {peak_lin:.6f} > {thresholds['peak_max']:.6f}")

    if zero_endpoints and n >= 2:
        tol = thresholds["endpoint_abs_max"]
        if abs(metrics["first"]) > tol or abs(metrics["last"]) > tol:
            failures.append(
                f"Endpoints not zero: first={metrics['first']:.3e}, last={metrics['last']:.3e}"
            )

    if n and rms_lin == 0.0:
        warnings.append("Buffer is pure silence")
    elif target_level_dbfs is not None and n and all_finite:
        delta = metrics["rms_dbfs"] - target_level_dbfs
        if abs(delta) > thresholds["rms_tolerance_db"]:
            failures.append(
                f"RMS off target: {metrics['rms_dbfs']:.2f} dBFS vs {target_level_dbfs:.2f} dBFS"
            )

    if rms_lin > 0 and metrics["longest_zero_run"] > thresholds["zero_run_max"]:
        warnings.append(f"Flat-zero run of {metrics['longest_zero_run']} samples")

    if remove_dc and rms_lin > 0 and abs(dc) > thresholds["dc_offset_max"] * rms_lin:
        warnings.append(f"DC offset high: {dc:.3e}")

    status = "PASS"
    if failures:
        status = "FAIL"
    elif warnings:
        status = "WARN"

    return {
        "status": status,
        "metrics": metrics,
        "failures": failures,
        "warnings": warnings,
    }
