"""Cipher Block Chaining with unconditional padding.

Encryption always appends padding: ``p = 16 - len % 16`` bytes of value
``p``, which is a whole extra block of ``0x10`` when the plaintext is
already block-aligned. Ciphertext is therefore ``16 * (len // 16 + 1)``
bytes long.

Decryption is stricter than a bare ``1 <= p <= 16`` range check on the last
byte: every one of the ``p`` pad bytes must equal ``p`` (full PKCS#7), so a
block ending ``... 05 02`` is rejected even though ``02`` is in range.
"""
from __future__ import annotations

import hmac

from ..cipher.blocks import BLOCK_SIZE, check_iv, xor_bytes
from ..cipher.primitive import BlockCipherPrimitive
from ..errors import InvalidCiphertextLength, InvalidPadding


def pad_final_block(tail: bytes) -> bytes:
    """Complete the trailing ``len(tail) < 16`` bytes into a padded block."""
    if len(tail) >= BLOCK_SIZE:
        raise ValueError("tail must be shorter than one block")
    p = BLOCK_SIZE - len(tail)
    return bytes(tail) + bytes([p]) * p


def strip_padding(plaintext: bytes) -> bytes:
    """Remove padding from a decrypted, block-aligned buffer.

    The whole final block is compared against its expected padded form
    with ``hmac.compare_digest`` so the comparison time does not depend on
    where the first mismatching byte sits.
    """
    if len(plaintext) < BLOCK_SIZE or len(plaintext) % BLOCK_SIZE:
        raise InvalidPadding()
    last = bytes(plaintext[-BLOCK_SIZE:])
    p = last[-1]
    in_range = 1 <= p <= BLOCK_SIZE
    width = p if in_range else BLOCK_SIZE
    expected = last[:BLOCK_SIZE - width] + bytes([p]) * width
    if not (hmac.compare_digest(last, expected) and in_range):
        raise InvalidPadding()
    return bytes(plaintext[:-p])


def cbc_encrypt(primitive: BlockCipherPrimitive, data: bytes, iv: bytes) -> bytes:
    register = check_iv(iv)
    data = bytes(data)
    full = len(data) // BLOCK_SIZE

    out = bytearray()
    for i in range(full):
        block = data[i * BLOCK_SIZE:(i + 1) * BLOCK_SIZE]
        register = primitive.encrypt_block(xor_bytes(register, block))
        out += register

    # For aligned input the tail is empty and this is a full block of 0x10.
    last = pad_final_block(data[full * BLOCK_SIZE:])
    out += primitive.encrypt_block(xor_bytes(register, last))
    return bytes(out)


def cbc_decrypt(primitive: BlockCipherPrimitive, data: bytes, iv: bytes) -> bytes:
    register = check_iv(iv)
    data = bytes(data)
    if not data or len(data) % BLOCK_SIZE:
        raise InvalidCiphertextLength(len(data), BLOCK_SIZE)

    out = bytearray()
    for i in range(len(data) // BLOCK_SIZE):
        block = data[i * BLOCK_SIZE:(i + 1) * BLOCK_SIZE]
        out += xor_bytes(primitive.decrypt_block(block), register)
        register = block

    return strip_padding(out)
