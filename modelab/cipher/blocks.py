"""Block-level helpers shared by every mode of operation."""

from __future__ import annotations

from ..errors import InvalidIVLength

BLOCK_SIZE = 16


def xor_bytes(a: bytes, b: bytes) -> bytes:
    """XOR two byte strings of equal length."""
    if len(a) != len(b):
        raise ValueError("xor_bytes length mismatch")
    n = len(a)
    return (int.from_bytes(a, "big") ^ int.from_bytes(b, "big")).to_bytes(n, "big")


def increment_counter(counter: bytearray) -> None:
    """Add one to a 16-byte big-endian counter in place.

    The carry walks from the last byte towards the first and stops at the
    first byte that does not overflow. An all-0xFF counter wraps to zero.
    """
    for i in range(BLOCK_SIZE - 1, -1, -1):
        if counter[i] != 0xFF:
            counter[i] += 1
            return
        counter[i] = 0


def check_iv(iv) -> bytes:
    """Return ``iv`` as bytes, or raise InvalidIVLength."""
    iv = bytes(iv)
    if len(iv) != BLOCK_SIZE:
        raise InvalidIVLength(len(iv), BLOCK_SIZE)
    return iv
