"""Throughput benchmark for the mode layer.

Timing wraps whole ``encrypt``/``decrypt`` calls from the outside; nothing
in the transform path is instrumented.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, asdict
from typing import Any, Callable, Dict, List, Optional

import numpy as np
from pydantic import BaseModel, Field, field_validator

from modelab.cipher.registry import PrimitiveRegistry
from modelab.modes.context import CipherMode, ModeContext
from modelab.utils.repro import utc_timestamp

logger = logging.getLogger(__name__)


class BenchmarkConfig(BaseModel):
    """What to measure in one benchmark run."""
    algorithm: str = Field(default="sm4")
    modes: List[CipherMode] = Field(default_factory=lambda: list(CipherMode))
    sizes: List[int] = Field(default_factory=lambda: [1024, 16384, 65536])
    repeats: int = Field(default=5, ge=1, le=1000)
    seed: int = Field(default=1337)

    @field_validator("modes", mode="before")
    @classmethod
    def _parse_modes(cls, v):
        return [CipherMode.parse(m) for m in v]

    @field_validator("sizes")
    @classmethod
    def _non_negative(cls, v: List[int]) -> List[int]:
        if any(n < 0 for n in v):
            raise ValueError("sizes must be non-negative")
        return v


@dataclass
class BenchmarkSample:
    """Timings for one (mode, size) pair."""
    mode: str
    size: int
    repeats: int
    encrypt_median_s: float
    encrypt_min_s: float
    decrypt_median_s: float
    decrypt_min_s: float
    encrypt_mb_per_s: float
    decrypt_mb_per_s: float


@dataclass
class BenchmarkResult:
    algorithm: str
    timestamp: str
    seed: int
    samples: List[BenchmarkSample] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def summary(self) -> str:
        lines = [f"Benchmark {self.algorithm.upper()} ({self.timestamp})"]
        for s in self.samples:
            lines.append(
                f"  {s.mode:<4} {s.size:>8} B  "
                f"enc {s.encrypt_mb_per_s:8.3f} MB/s  dec {s.decrypt_mb_per_s:8.3f} MB/s"
            )
        return "\n".join(lines)


def _time_calls(fn: Callable[[], bytes], repeats: int) -> np.ndarray:
    timings = np.empty(repeats, dtype=np.float64)
    for i in range(repeats):
        start = time.perf_counter()
        fn()
        timings[i] = time.perf_counter() - start
    return timings


def _throughput(size: int, seconds: float) -> float:
    if size == 0 or seconds <= 0.0:
        return 0.0
    return size / seconds / 1e6


def run_benchmark(
    config: BenchmarkConfig,
    *,
    registry: Optional[PrimitiveRegistry] = None,
    progress_callback: Optional[Callable[[str, int, int], None]] = None,
) -> BenchmarkResult:
    """Time encrypt and decrypt for every configured mode and size.

    Args:
        config: Benchmark configuration.
        registry: Optional primitive registry.
        progress_callback: Optional callback(label, current, total).

    Returns:
        BenchmarkResult with one sample per (mode, size).
    """
    reg = registry or PrimitiveRegistry()
    primitive_cls = reg.get(config.algorithm)
    rng = np.random.default_rng(config.seed)

    key = rng.bytes(min(getattr(primitive_cls, "key_sizes", None) or (16,)))
    iv = rng.bytes(16)
    primitive = primitive_cls(key)

    result = BenchmarkResult(
        algorithm=primitive_cls.name,
        timestamp=utc_timestamp(),
        seed=config.seed,
    )

    total = len(config.modes) * len(config.sizes)
    step = 0
    for mode in config.modes:
        ctx = ModeContext(primitive, mode)
        for size in config.sizes:
            label = f"{mode.value}/{size}"
            if progress_callback:
                progress_callback(label, step, total)
            logger.info("Benchmarking %s (%d/%d)", label, step + 1, total)

            payload = rng.bytes(size)
            ciphertext = ctx.encrypt(payload, iv)
            enc = _time_calls(lambda: ctx.encrypt(payload, iv), config.repeats)
            dec = _time_calls(lambda: ctx.decrypt(ciphertext, iv), config.repeats)

            enc_median = float(np.median(enc))
            dec_median = float(np.median(dec))
            result.samples.append(BenchmarkSample(
                mode=mode.value,
                size=size,
                repeats=config.repeats,
                encrypt_median_s=round(enc_median, 6),
                encrypt_min_s=round(float(np.min(enc)), 6),
                decrypt_median_s=round(dec_median, 6),
                decrypt_min_s=round(float(np.min(dec)), 6),
                encrypt_mb_per_s=round(_throughput(size, enc_median), 4),
                decrypt_mb_per_s=round(_throughput(size, dec_median), 4),
            ))
            step += 1

    return result
