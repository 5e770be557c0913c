from __future__ import annotations

import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator


class Settings(BaseModel):
    # Primitive used when a context is built without an explicit algorithm
    default_algorithm: str = Field(default="sm4")

    # Reproducibility
    global_seed: int = Field(default=1337)

    # Evaluation
    roundtrip_vectors: int = Field(default=200, ge=1)
    benchmark_sizes: List[int] = Field(default_factory=lambda: [1024, 16384, 65536])
    benchmark_repeats: int = Field(default=5, ge=1)

    # Paths
    runs_dir: str = Field(default="runs")

    @field_validator("default_algorithm")
    @classmethod
    def _lower_algorithm(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("benchmark_sizes")
    @classmethod
    def _positive_sizes(cls, v: List[int]) -> List[int]:
        if not v or any(n < 0 for n in v):
            raise ValueError("benchmark_sizes must be a non-empty list of non-negative sizes")
        return v


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    # Load .env if present
    load_dotenv()

    def _sizes(name: str, default: List[int]) -> List[int]:
        v = os.getenv(name)
        if v is None or not v.strip():
            return default
        return [int(part) for part in v.split(",") if part.strip()]

    return Settings(
        default_algorithm=os.getenv("MODELAB_ALGORITHM", "sm4"),
        global_seed=int(os.getenv("MODELAB_GLOBAL_SEED", "1337")),
        roundtrip_vectors=int(os.getenv("MODELAB_ROUNDTRIP_VECTORS", "200")),
        benchmark_sizes=_sizes("MODELAB_BENCH_SIZES", [1024, 16384, 65536]),
        benchmark_repeats=int(os.getenv("MODELAB_BENCH_REPEATS", "5")),
        runs_dir=os.getenv("MODELAB_RUNS_DIR", "runs"),
    )
