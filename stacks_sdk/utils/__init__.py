"""
Utilities used across the SDK:
- bytes: hex helpers, fixed-width big-endian writers and a bounds-checked reader
- hash:  sha256, sha512/256, ripemd160, hash160, c32check checksum
"""

from .bytes import ByteReader, ensure_bytes, from_hex, to_hex
from .hash import hash160, sha256, sha512_256

__all__ = [
    "ByteReader",
    "ensure_bytes",
    "from_hex",
    "to_hex",
    "hash160",
    "sha256",
    "sha512_256",
]
