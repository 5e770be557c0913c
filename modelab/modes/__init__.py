from .cbc import cbc_decrypt, cbc_encrypt, pad_final_block, strip_padding
from .context import CipherMode, ModeContext, new_context
from .stream import cfb_decrypt, cfb_encrypt, ctr_transform, ofb_transform

__all__ = [
    "CipherMode",
    "ModeContext",
    "new_context",
    "cbc_encrypt",
    "cbc_decrypt",
    "pad_final_block",
    "strip_padding",
    "cfb_encrypt",
    "cfb_decrypt",
    "ofb_transform",
    "ctr_transform",
]
