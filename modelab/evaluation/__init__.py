"""Evaluation tooling for the mode layer.

Provides randomized roundtrip verification across modes and an external
throughput benchmark harness.

Research / education only. Do NOT use in production.
"""

from .roundtrip import RoundtripResult, RoundtripFailure, run_roundtrip_tests, run_all_modes
from .benchmark import BenchmarkConfig, BenchmarkSample, BenchmarkResult, run_benchmark

__all__ = [
    "RoundtripResult",
    "RoundtripFailure",
    "run_roundtrip_tests",
    "run_all_modes",
    "BenchmarkConfig",
    "BenchmarkSample",
    "BenchmarkResult",
    "run_benchmark",
]
