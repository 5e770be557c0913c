from .blocks import BLOCK_SIZE, check_iv, increment_counter, xor_bytes
from .primitive import AESPrimitive, BlockCipherPrimitive, EcbPrimitive, SM4Primitive
from .registry import PrimitiveRegistry

__all__ = [
    "BLOCK_SIZE",
    "check_iv",
    "increment_counter",
    "xor_bytes",
    "AESPrimitive",
    "BlockCipherPrimitive",
    "EcbPrimitive",
    "SM4Primitive",
    "PrimitiveRegistry",
]
