"""
Deterministic generator for mock chain data.

32-bit FNV-1a over the UTF-16 code units of the input string, so the same
wallet identity always yields the same seed across runs and implementations.
"""

import struct

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
_MASK_32 = 0xFFFFFFFF


def pseudo_hash(text: str) -> int:
    """Hash a string to a stable unsigned 32-bit integer."""
    data = text.encode("utf-16-le")
    h = FNV_OFFSET_BASIS
    for (unit,) in struct.iter_unpack("<H", data):
        h ^= unit
        h = (h * FNV_PRIME) & _MASK_32
    return h
