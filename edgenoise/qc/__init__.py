"""
Quality Control module for evaluating generated padding noise.
"""
from edgenoise.qc.qc import analyze
from edgenoise.qc.thresholds import QC_THRESHOLDS
from edgenoise.qc.selftest import run_self_tests, SelfTestResult

__all__ = ["analyze", "QC_THRESHOLDS", "run_self_tests", "SelfTestResult"]
