"""Length-preserving modes: CFB, OFB and CTR.

Each mode is implemented once as an in-place loop over a writable buffer.
The buffer-returning functions copy the input into a fresh ``bytearray`` and
run the same loop on it.

The chaining register is created from the IV at the start of every call
and never outlives it. A trailing partial block (1-15 bytes) is XORed
against a prefix of one more keystream block, with no register update
after it, so output length always equals input length.
"""
from __future__ import annotations

from ..cipher.blocks import BLOCK_SIZE, check_iv, increment_counter, xor_bytes
from ..cipher.primitive import BlockCipherPrimitive


def _xor_tail(primitive: BlockCipherPrimitive, buf, start: int, register: bytes) -> None:
    n = len(buf) - start
    if n:
        keystream = primitive.encrypt_block(register)
        buf[start:] = xor_bytes(bytes(buf[start:]), keystream[:n])


def cfb_apply(primitive: BlockCipherPrimitive, buf, iv: bytes, *, decrypt: bool) -> None:
    """Full-block CFB over ``buf`` in place.

    The register always takes the ciphertext block: the freshly produced
    output when encrypting, the consumed input when decrypting.
    """
    register = check_iv(iv)
    full = len(buf) // BLOCK_SIZE
    for i in range(full):
        lo, hi = i * BLOCK_SIZE, (i + 1) * BLOCK_SIZE
        block = bytes(buf[lo:hi])
        out = xor_bytes(primitive.encrypt_block(register), block)
        buf[lo:hi] = out
        register = block if decrypt else out
    _xor_tail(primitive, buf, full * BLOCK_SIZE, register)


def ofb_apply(primitive: BlockCipherPrimitive, buf, iv: bytes) -> None:
    """OFB over ``buf`` in place; the register is fed by the keystream only."""
    register = check_iv(iv)
    full = len(buf) // BLOCK_SIZE
    for i in range(full):
        lo, hi = i * BLOCK_SIZE, (i + 1) * BLOCK_SIZE
        register = primitive.encrypt_block(register)
        buf[lo:hi] = xor_bytes(register, bytes(buf[lo:hi]))
    _xor_tail(primitive, buf, full * BLOCK_SIZE, register)


def ctr_apply(primitive: BlockCipherPrimitive, buf, iv: bytes) -> None:
    """CTR over ``buf`` in place with a 128-bit big-endian counter."""
    counter = bytearray(check_iv(iv))
    full = len(buf) // BLOCK_SIZE
    for i in range(full):
        lo, hi = i * BLOCK_SIZE, (i + 1) * BLOCK_SIZE
        keystream = primitive.encrypt_block(bytes(counter))
        buf[lo:hi] = xor_bytes(keystream, bytes(buf[lo:hi]))
        increment_counter(counter)
    _xor_tail(primitive, buf, full * BLOCK_SIZE, bytes(counter))


def cfb_encrypt(primitive: BlockCipherPrimitive, data: bytes, iv: bytes) -> bytes:
    buf = bytearray(data)
    cfb_apply(primitive, buf, iv, decrypt=False)
    return bytes(buf)


def cfb_decrypt(primitive: BlockCipherPrimitive, data: bytes, iv: bytes) -> bytes:
    buf = bytearray(data)
    cfb_apply(primitive, buf, iv, decrypt=True)
    return bytes(buf)


def ofb_transform(primitive: BlockCipherPrimitive, data: bytes, iv: bytes) -> bytes:
    """OFB encryption and decryption (the same operation)."""
    buf = bytearray(data)
    ofb_apply(primitive, buf, iv)
    return bytes(buf)


def ctr_transform(primitive: BlockCipherPrimitive, data: bytes, iv: bytes) -> bytes:
    """CTR encryption and decryption (the same operation)."""
    buf = bytearray(data)
    ctr_apply(primitive, buf, iv)
    return bytes(buf)
