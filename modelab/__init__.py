"""modelab: CFB, OFB, CTR and CBC modes over a fixed-key 128-bit block cipher.

Research / education only. No integrity protection: pair with a MAC or use
an AEAD construction for anything that matters.
"""

from .errors import (
    InvalidCiphertextLength,
    InvalidIVLength,
    InvalidKeyLength,
    InvalidPadding,
    ModeError,
    UnsupportedOperation,
)
from .modes import CipherMode, ModeContext, new_context

__version__ = "0.1.0"

__all__ = [
    "CipherMode",
    "ModeContext",
    "new_context",
    "ModeError",
    "InvalidIVLength",
    "InvalidCiphertextLength",
    "InvalidPadding",
    "InvalidKeyLength",
    "UnsupportedOperation",
]
