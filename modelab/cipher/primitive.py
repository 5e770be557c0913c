"""Fixed-key 128-bit block cipher primitives.

The mode layer only ever calls ``encrypt_block`` and ``decrypt_block`` on a
single 16-byte block. The concrete primitives delegate the block transform
to the ``cryptography`` package running a one-block ECB operation, so the
key schedule and round function are never reimplemented here.
"""
from __future__ import annotations

from typing import FrozenSet

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..errors import InvalidKeyLength
from .blocks import BLOCK_SIZE


class BlockCipherPrimitive:
    name: str = "abstract"
    block_size: int = BLOCK_SIZE

    def encrypt_block(self, block: bytes) -> bytes:  # pragma: no cover
        raise NotImplementedError

    def decrypt_block(self, block: bytes) -> bytes:  # pragma: no cover
        raise NotImplementedError


class EcbPrimitive(BlockCipherPrimitive):
    """A primitive backed by a ``cryptography`` algorithm in ECB mode.

    A fresh encryptor/decryptor context is created for every block, so an
    instance holds nothing but the immutable key and can be shared between
    threads.
    """

    key_sizes: FrozenSet[int] = frozenset()

    def __init__(self, key: bytes):
        key = bytes(key)
        if len(key) not in self.key_sizes:
            raise InvalidKeyLength(self.name, len(key), self.key_sizes)
        self._cipher = Cipher(self._algorithm(key), modes.ECB())

    def _algorithm(self, key: bytes):  # pragma: no cover
        raise NotImplementedError

    def _check_block(self, block: bytes) -> bytes:
        block = bytes(block)
        if len(block) != self.block_size:
            raise ValueError(f"{self.name} block must be {self.block_size} bytes, got {len(block)}")
        return block

    def encrypt_block(self, block: bytes) -> bytes:
        enc = self._cipher.encryptor()
        return enc.update(self._check_block(block)) + enc.finalize()

    def decrypt_block(self, block: bytes) -> bytes:
        dec = self._cipher.decryptor()
        return dec.update(self._check_block(block)) + dec.finalize()

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class SM4Primitive(EcbPrimitive):
    """SM4 (GB/T 32907), 128-bit key and block."""

    name = "sm4"
    key_sizes = frozenset({16})

    def _algorithm(self, key: bytes):
        return algorithms.SM4(key)


class AESPrimitive(EcbPrimitive):
    """AES with a 128, 192 or 256-bit key."""

    name = "aes"
    key_sizes = frozenset({16, 24, 32})

    def _algorithm(self, key: bytes):
        return algorithms.AES(key)
