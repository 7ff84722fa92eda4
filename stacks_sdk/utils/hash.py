"""
Hash primitives used by addresses, signer hashes, sighashes and txids.

- sha256 comes from :mod:`hashlib`.
- sha512_256 and ripemd160 come from pycryptodome; OpenSSL builds of hashlib
  do not reliably ship either, so they are never looked up there.
"""

from __future__ import annotations

import hashlib

from Crypto.Hash import RIPEMD160, SHA512

from .bytes import BytesLike, ensure_bytes


def sha256(data: BytesLike) -> bytes:
    return hashlib.sha256(ensure_bytes(data)).digest()


def double_sha256(data: BytesLike) -> bytes:
    return sha256(sha256(data))


def sha512_256(data: BytesLike) -> bytes:
    """SHA-512/256 (truncated SHA-512 with its own IV), the txid and sighash digest."""
    return SHA512.new(ensure_bytes(data), truncate="256").digest()


def ripemd160(data: BytesLike) -> bytes:
    h = RIPEMD160.new()
    h.update(ensure_bytes(data))
    return h.digest()


def hash160(data: BytesLike) -> bytes:
    """RIPEMD160(SHA256(data)), the 20-byte public-key hash."""
    return ripemd160(sha256(data))


def checksum4(data: BytesLike) -> bytes:
    """Leading four bytes of double-SHA256; the c32check checksum."""
    return double_sha256(data)[:4]


__all__ = [
    "sha256",
    "double_sha256",
    "sha512_256",
    "ripemd160",
    "hash160",
    "checksum4",
]
