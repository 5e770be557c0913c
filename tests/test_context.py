from concurrent.futures import ThreadPoolExecutor

import pytest

from modelab import (
    CipherMode,
    InvalidIVLength,
    InvalidKeyLength,
    ModeContext,
    UnsupportedOperation,
    new_context,
)
from modelab.cipher.primitive import AESPrimitive, BlockCipherPrimitive, SM4Primitive
from modelab.cipher.registry import PrimitiveRegistry
from modelab.config import load_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    monkeypatch.delenv("MODELAB_ALGORITHM", raising=False)
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


def test_mode_parse():
    assert CipherMode.parse("cbc") is CipherMode.CBC
    assert CipherMode.parse(" Ctr ") is CipherMode.CTR
    assert CipherMode.parse(CipherMode.OFB) is CipherMode.OFB
    with pytest.raises(ValueError):
        CipherMode.parse("ecb")


def test_mode_properties():
    assert CipherMode.OFB.self_inverse and CipherMode.CTR.self_inverse
    assert not CipherMode.CFB.self_inverse and not CipherMode.CBC.self_inverse
    assert CipherMode.CBC.ciphertext_length(32) == 48
    assert CipherMode.CBC.ciphertext_length(33) == 48
    assert CipherMode.CFB.ciphertext_length(33) == 33


def test_new_context_defaults_to_sm4(sm4_required):
    ctx = new_context(bytes(16), "ctr")
    assert isinstance(ctx.primitive, SM4Primitive)
    assert ctx.mode is CipherMode.CTR
    assert ctx.algorithm == "sm4"
    assert repr(ctx) == "ModeContext(algorithm='sm4', mode=CTR)"


def test_new_context_default_from_environment(monkeypatch):
    monkeypatch.setenv("MODELAB_ALGORITHM", "AES")
    load_settings.cache_clear()
    ctx = new_context(bytes(32), CipherMode.CFB)
    assert isinstance(ctx.primitive, AESPrimitive)


@pytest.mark.parametrize("algorithm,key_len", [("sm4", 15), ("sm4", 32), ("aes", 17), ("aes", 0)])
def test_bad_key_length(algorithm, key_len):
    with pytest.raises(InvalidKeyLength) as info:
        new_context(bytes(key_len), CipherMode.CBC, algorithm)
    assert info.value.length == key_len


def test_unknown_algorithm():
    with pytest.raises(KeyError):
        new_context(bytes(16), CipherMode.CBC, "des")
    with pytest.raises(ValueError):
        new_context(bytes(16), "xts", "aes")


def test_primitive_rejects_wrong_block_size():
    aes = AESPrimitive(bytes(16))
    with pytest.raises(ValueError):
        aes.encrypt_block(bytes(15))
    with pytest.raises(ValueError):
        aes.decrypt_block(bytes(17))


def test_registry():
    reg = PrimitiveRegistry()
    assert reg.list() == ["aes", "sm4"]
    assert reg.exists("SM4")
    assert reg.get("AES") is AESPrimitive
    with pytest.raises(KeyError):
        reg.get("blowfish")


def test_registry_accepts_custom_primitive(iv):
    class XorPrimitive(BlockCipherPrimitive):
        """Toy invertible primitive, only for exercising the registry."""
        name = "xor"
        key_sizes = frozenset({16})

        def __init__(self, key: bytes):
            self._key = bytes(key)

        def encrypt_block(self, block: bytes) -> bytes:
            return bytes(a ^ b for a, b in zip(block, self._key))

        decrypt_block = encrypt_block

    reg = PrimitiveRegistry()
    reg.register(XorPrimitive)
    ctx = new_context(b"k" * 16, CipherMode.CBC, "xor", registry=reg)
    assert ctx.decrypt(ctx.encrypt(b"toy message", iv), iv) == b"toy message"


@pytest.mark.parametrize("mode", [CipherMode.CFB, CipherMode.OFB, CipherMode.CTR])
def test_in_place_matches_returning_api(primitive, iv, mode):
    ctx = ModeContext(primitive, mode)
    pt = bytes(range(200))
    buf = bytearray(pt)
    ctx.encrypt_into(buf, iv)
    assert bytes(buf) == ctx.encrypt(pt, iv)
    ctx.decrypt_into(buf, iv)
    assert bytes(buf) == pt


@pytest.mark.parametrize("mode", [CipherMode.CFB, CipherMode.OFB, CipherMode.CTR])
def test_in_place_respects_length(primitive, iv, mode):
    ctx = ModeContext(primitive, mode)
    buf = bytearray(b"a" * 40 + b"TRAILER!")
    ctx.encrypt_into(buf, iv, length=40)
    assert bytes(buf[:40]) == ctx.encrypt(b"a" * 40, iv)
    assert bytes(buf[40:]) == b"TRAILER!"


def test_in_place_on_memoryview_slice(primitive, iv):
    ctx = ModeContext(primitive, CipherMode.CTR)
    buf = bytearray(b"HEAD" + b"z" * 33)
    ctx.encrypt_into(memoryview(buf)[4:], iv)
    assert bytes(buf[:4]) == b"HEAD"
    assert bytes(buf[4:]) == ctx.encrypt(b"z" * 33, iv)


def test_in_place_rejections(primitive, iv):
    with pytest.raises(UnsupportedOperation):
        ModeContext(primitive, CipherMode.CBC).encrypt_into(bytearray(32), iv)
    ctx = ModeContext(primitive, CipherMode.OFB)
    with pytest.raises(TypeError):
        ctx.encrypt_into(bytes(32), iv)
    with pytest.raises(ValueError):
        ctx.encrypt_into(bytearray(8), iv, length=9)
    buf = bytearray(b"untouched")
    with pytest.raises(InvalidIVLength):
        ctx.decrypt_into(buf, bytes(15))
    assert buf == bytearray(b"untouched")


def test_context_is_stateless_between_calls(primitive, iv):
    ctx = ModeContext(primitive, CipherMode.CFB)
    first = ctx.encrypt(b"m" * 70, iv)
    ctx.encrypt(b"other message", bytes(16))
    assert ctx.encrypt(b"m" * 70, iv) == first


def test_shared_context_across_threads(primitive):
    ctx = ModeContext(primitive, CipherMode.CBC)
    jobs = [(bytes([i]) * (i * 7), bytes([i]) * 16) for i in range(1, 33)]

    def roundtrip(job):
        pt, job_iv = job
        return ctx.decrypt(ctx.encrypt(pt, job_iv), job_iv) == pt

    with ThreadPoolExecutor(max_workers=8) as pool:
        assert all(pool.map(roundtrip, jobs))
