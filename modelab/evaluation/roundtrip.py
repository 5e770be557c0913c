"""Randomized roundtrip verification P = D(E(P, IV), IV) per mode.

Every vector draws a fresh key, IV and plaintext from a seeded RNG, then
checks that decryption inverts encryption and that the ciphertext has the
length the mode promises.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import random
import time
from dataclasses import dataclass, field, asdict
from typing import Any, Callable, Dict, List, Optional, Sequence

from modelab.cipher.registry import PrimitiveRegistry
from modelab.modes.context import CipherMode, ModeContext

DEFAULT_LENGTHS = (0, 1, 15, 16, 17, 100, 1000)


@dataclass
class RoundtripFailure:
    """Details of a single failed roundtrip test vector."""
    vector_index: int
    length: int
    plaintext_hex: str
    key_hex: str
    iv_hex: str
    ciphertext_hex: str
    decrypted_hex: str       # What decrypt returned (should equal plaintext)
    error: Optional[str]     # Exception message or length-invariant violation


@dataclass
class RoundtripResult:
    """Aggregate result of roundtrip testing for one mode."""
    mode: str
    algorithm: str
    lengths: List[int]
    total_vectors: int
    passed: int
    failed: int
    failures: List[RoundtripFailure] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    seed: int = 1337

    @property
    def success_rate(self) -> float:
        return self.passed / self.total_vectors if self.total_vectors > 0 else 0.0

    @property
    def is_perfect(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def summary(self) -> str:
        status = "PASS" if self.is_perfect else "FAIL"
        return (
            f"[{status}] {self.algorithm.upper()}-{self.mode}: "
            f"{self.passed}/{self.total_vectors} vectors passed "
            f"({self.elapsed_seconds:.2f}s)"
        )


def _rand_bytes(rng: random.Random, n: int) -> bytes:
    return bytes(rng.randrange(0, 256) for _ in range(n))


def run_roundtrip_tests(
    mode: CipherMode | str,
    *,
    algorithm: str = "sm4",
    lengths: Sequence[int] = DEFAULT_LENGTHS,
    num_vectors: int = 1,
    seed: int = 1337,
    max_failures_recorded: int = 10,
    registry: Optional[PrimitiveRegistry] = None,
) -> RoundtripResult:
    """Run ``num_vectors`` random (key, IV, plaintext) triples per length.

    Args:
        mode: Mode of operation to test.
        algorithm: Registered primitive name.
        lengths: Plaintext lengths to exercise.
        num_vectors: Random vectors per length.
        seed: Random seed for deterministic reproducibility.
        max_failures_recorded: Maximum number of failure details to keep.
        registry: Optional primitive registry; uses default if not provided.

    Returns:
        RoundtripResult with pass/fail counts and failure details.
    """
    reg = registry or PrimitiveRegistry()
    mode = CipherMode.parse(mode)
    primitive_cls = reg.get(algorithm)
    key_len = min(getattr(primitive_cls, "key_sizes", None) or (16,))

    rng = random.Random(seed)
    passed = 0
    failed = 0
    failures: List[RoundtripFailure] = []

    start = time.perf_counter()

    index = 0
    for length in lengths:
        for _ in range(num_vectors):
            key = _rand_bytes(rng, key_len)
            iv = _rand_bytes(rng, 16)
            pt = _rand_bytes(rng, length)
            ct: Optional[bytes] = None
            pt2: Optional[bytes] = None
            error: Optional[str] = None

            try:
                ctx = ModeContext(primitive_cls(key), mode)
                ct = ctx.encrypt(pt, iv)
                pt2 = ctx.decrypt(ct, iv)
                expected_len = mode.ciphertext_length(length)
                if len(ct) != expected_len:
                    error = f"ciphertext length {len(ct)} != expected {expected_len}"
            except Exception as exc:
                error = f"{type(exc).__name__}: {exc}"

            if error is None and pt2 == pt:
                passed += 1
            else:
                failed += 1
                if len(failures) < max_failures_recorded:
                    failures.append(RoundtripFailure(
                        vector_index=index,
                        length=length,
                        plaintext_hex=pt.hex(),
                        key_hex=key.hex(),
                        iv_hex=iv.hex(),
                        ciphertext_hex=ct.hex() if ct is not None else "<error>",
                        decrypted_hex=pt2.hex() if pt2 is not None else "<error>",
                        error=error,
                    ))
            index += 1

    elapsed = time.perf_counter() - start

    return RoundtripResult(
        mode=mode.value,
        algorithm=primitive_cls.name,
        lengths=list(lengths),
        total_vectors=index,
        passed=passed,
        failed=failed,
        failures=failures,
        elapsed_seconds=round(elapsed, 4),
        seed=seed,
    )


def run_all_modes(
    *,
    algorithm: str = "sm4",
    lengths: Sequence[int] = DEFAULT_LENGTHS,
    num_vectors: int = 1,
    seed: int = 1337,
    progress_callback: Optional[Callable[[str, int, int], None]] = None,
) -> List[RoundtripResult]:
    """Run roundtrip tests for every CipherMode.

    Args:
        algorithm: Registered primitive name.
        lengths: Plaintext lengths to exercise.
        num_vectors: Random vectors per length.
        seed: Random seed for reproducibility.
        progress_callback: Optional callback(mode_name, current_index, total).

    Returns:
        List of RoundtripResult sorted by mode name.
    """
    registry = PrimitiveRegistry()
    modes = list(CipherMode)
    results: List[RoundtripResult] = []

    for idx, mode in enumerate(modes):
        if progress_callback:
            progress_callback(mode.value, idx, len(modes))

        results.append(run_roundtrip_tests(
            mode,
            algorithm=algorithm,
            lengths=lengths,
            num_vectors=num_vectors,
            seed=seed,
            registry=registry,
        ))

    return sorted(results, key=lambda r: r.mode)
