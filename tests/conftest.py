import sys
from pathlib import Path

import pytest
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

try:
    from cryptography.hazmat.decrepit.ciphers.modes import CFB, OFB
except ImportError:  # cryptography < 47
    CFB, OFB = modes.CFB, modes.OFB

# Ensure project root is on path for modelab imports
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from modelab.cipher.primitive import AESPrimitive, SM4Primitive
from modelab.modes.context import CipherMode


def _sm4_supported() -> bool:
    try:
        SM4Primitive(bytes(16)).encrypt_block(bytes(16))
    except UnsupportedAlgorithm:
        return False
    return True


SM4_SUPPORTED = _sm4_supported()

_ALGORITHMS = {"sm4": algorithms.SM4, "aes": algorithms.AES}
_MODES = {
    CipherMode.CBC: modes.CBC,
    CipherMode.CFB: CFB,
    CipherMode.OFB: OFB,
    CipherMode.CTR: modes.CTR,
}


@pytest.fixture(params=["sm4", "aes"])
def primitive(request):
    """A block cipher primitive under a fixed 16-byte key."""
    if request.param == "sm4" and not SM4_SUPPORTED:
        pytest.skip("linked OpenSSL has no SM4")
    cls = SM4Primitive if request.param == "sm4" else AESPrimitive
    return cls(bytes.fromhex("000102030405060708090a0b0c0d0e0f"))


@pytest.fixture
def sm4_required():
    if not SM4_SUPPORTED:
        pytest.skip("linked OpenSSL has no SM4")


@pytest.fixture
def iv():
    return bytes.fromhex("fedcba0987654321fedcba0987654321")


@pytest.fixture
def reference_encrypt():
    """Encrypt with cryptography's own mode implementations."""

    def _encrypt(algorithm: str, key: bytes, mode: CipherMode, iv: bytes, data: bytes) -> bytes:
        if mode is CipherMode.CBC:
            padder = padding.PKCS7(128).padder()
            data = padder.update(data) + padder.finalize()
        enc = Cipher(_ALGORITHMS[algorithm](key), _MODES[mode](iv)).encryptor()
        return enc.update(data) + enc.finalize()

    return _encrypt
