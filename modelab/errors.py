"""Error types raised by the mode layer.

Every error derives from :class:`ModeError`, itself a ``ValueError``, so
callers can catch the whole family at once or a single kind.
"""
from __future__ import annotations


class ModeError(ValueError):
    """Base class for all mode-of-operation failures."""


class InvalidIVLength(ModeError):
    """The initialization vector is not exactly one block long."""

    def __init__(self, length: int, expected: int = 16):
        super().__init__(f"IV must be {expected} bytes, got {length}")
        self.length = length
        self.expected = expected


class InvalidCiphertextLength(ModeError):
    """CBC ciphertext is empty or not a whole number of blocks."""

    def __init__(self, length: int, block_size: int = 16):
        super().__init__(
            f"CBC ciphertext must be a non-zero multiple of {block_size} bytes, got {length}"
        )
        self.length = length


class InvalidPadding(ModeError):
    """CBC padding is malformed; the message never says which check failed."""

    def __init__(self):
        super().__init__("malformed CBC padding")


class InvalidKeyLength(ModeError):
    """The key size is not accepted by the block cipher primitive."""

    def __init__(self, algorithm: str, length: int, allowed):
        sizes = ", ".join(str(n) for n in sorted(allowed))
        super().__init__(f"{algorithm} key must be one of [{sizes}] bytes, got {length}")
        self.length = length


class UnsupportedOperation(ModeError):
    """The requested transform is not available for the selected mode."""
