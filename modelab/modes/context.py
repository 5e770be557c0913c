from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Optional, Union

from ..cipher.primitive import BlockCipherPrimitive
from ..cipher.registry import PrimitiveRegistry
from ..config import load_settings
from ..errors import UnsupportedOperation
from .cbc import cbc_decrypt, cbc_encrypt
from .stream import (
    cfb_apply,
    cfb_decrypt,
    cfb_encrypt,
    ctr_apply,
    ctr_transform,
    ofb_apply,
    ofb_transform,
)

logger = logging.getLogger(__name__)


class CipherMode(str, Enum):
    CFB = "CFB"
    OFB = "OFB"
    CTR = "CTR"
    CBC = "CBC"

    @classmethod
    def parse(cls, value: Union["CipherMode", str]) -> "CipherMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown cipher mode: {value!r}") from None

    @property
    def preserves_length(self) -> bool:
        return self is not CipherMode.CBC

    @property
    def self_inverse(self) -> bool:
        return self in (CipherMode.OFB, CipherMode.CTR)

    def ciphertext_length(self, plaintext_length: int) -> int:
        if self.preserves_length:
            return plaintext_length
        return 16 * (plaintext_length // 16 + 1)


Transform = Callable[[BlockCipherPrimitive, bytes, bytes], bytes]

# OFB and CTR route both directions through the same function.
_ENCRYPT: Dict[CipherMode, Transform] = {
    CipherMode.CFB: cfb_encrypt,
    CipherMode.OFB: ofb_transform,
    CipherMode.CTR: ctr_transform,
    CipherMode.CBC: cbc_encrypt,
}

_DECRYPT: Dict[CipherMode, Transform] = {
    CipherMode.CFB: cfb_decrypt,
    CipherMode.OFB: ofb_transform,
    CipherMode.CTR: ctr_transform,
    CipherMode.CBC: cbc_decrypt,
}


class ModeContext:
    """A block cipher primitive bound to one mode of operation.

    The context keeps no state between calls: every ``encrypt``/``decrypt``
    builds its own chaining register from the IV it is given. One context
    can be reused for any number of messages and shared between threads.

    ``encrypt``/``decrypt`` return new ``bytes`` and are the primary API.
    ``encrypt_into``/``decrypt_into`` overwrite a caller-owned writable
    buffer instead and are only available for the length-preserving modes.
    """

    __slots__ = ("_primitive", "_mode")

    def __init__(self, primitive: BlockCipherPrimitive, mode: Union[CipherMode, str]):
        self._primitive = primitive
        self._mode = CipherMode.parse(mode)

    @property
    def mode(self) -> CipherMode:
        return self._mode

    @property
    def primitive(self) -> BlockCipherPrimitive:
        return self._primitive

    @property
    def algorithm(self) -> str:
        return self._primitive.name

    def encrypt(self, plaintext: bytes, iv: bytes) -> bytes:
        return _ENCRYPT[self._mode](self._primitive, plaintext, iv)

    def decrypt(self, ciphertext: bytes, iv: bytes) -> bytes:
        return _DECRYPT[self._mode](self._primitive, ciphertext, iv)

    def encrypt_into(self, buffer, iv: bytes, length: Optional[int] = None) -> None:
        """Encrypt the first ``length`` bytes of ``buffer`` in place."""
        self._apply_in_place(buffer, iv, length, decrypt=False)

    def decrypt_into(self, buffer, iv: bytes, length: Optional[int] = None) -> None:
        """Decrypt the first ``length`` bytes of ``buffer`` in place."""
        self._apply_in_place(buffer, iv, length, decrypt=True)

    def _apply_in_place(self, buffer, iv: bytes, length: Optional[int], *, decrypt: bool) -> None:
        if not self._mode.preserves_length:
            raise UnsupportedOperation(f"{self._mode.value} cannot transform a buffer in place")

        view = memoryview(buffer).cast("B")
        if view.readonly:
            raise TypeError("in-place transform requires a writable buffer")
        if length is None:
            length = len(view)
        if not 0 <= length <= len(view):
            raise ValueError(f"length must be within [0, {len(view)}], got {length}")
        view = view[:length]

        if self._mode is CipherMode.CFB:
            cfb_apply(self._primitive, view, iv, decrypt=decrypt)
        elif self._mode is CipherMode.OFB:
            ofb_apply(self._primitive, view, iv)
        else:
            ctr_apply(self._primitive, view, iv)

    def __repr__(self) -> str:
        return f"ModeContext(algorithm={self.algorithm!r}, mode={self._mode.value})"


def new_context(
    key: bytes,
    mode: Union[CipherMode, str],
    algorithm: Optional[str] = None,
    *,
    registry: Optional[PrimitiveRegistry] = None,
) -> ModeContext:
    """Build a ModeContext from a raw key.

    ``algorithm`` defaults to ``Settings.default_algorithm`` (SM4). Key size
    errors come from the primitive as ``InvalidKeyLength``.
    """
    reg = registry or PrimitiveRegistry()
    name = algorithm or load_settings().default_algorithm
    mode = CipherMode.parse(mode)
    primitive = reg.create(name, key)
    logger.debug("Created %s context for %s", mode.value, primitive.name)
    return ModeContext(primitive, mode)
