"""
stacks_sdk.address
==================

c32check address derivation and validation.

Format
------
A Stacks address is the letter ``S`` followed by the c32 character of the
version byte and the c32 encoding of ``hash160 || checksum``::

    checksum = sha256(sha256(version || hash160))[:4]
    address  = "S" + C32[version] + c32encode(hash160 || checksum)

c32 is Crockford's base32 alphabet (no I, L, O, U). Decoding is
case-insensitive and maps the look-alikes ``O -> 0`` and ``I/L -> 1``.
Leading zero bytes are preserved as leading ``0`` characters.

This module provides:
- c32_encode(data) / c32_decode(text)
- c32check_encode(version, data) / c32check_decode(address)
- derive_address(hash160, version) -> str
- parse_address(address) -> (version, hash160)
- Address dataclass with parse()/from_public_key()
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple

from .errors import InvalidAddress
from .utils.bytes import BytesLike, ensure_bytes
from .utils.hash import checksum4, hash160

C32_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
HASH160_LEN = 20

_C32_INDEX = {ch: i for i, ch in enumerate(C32_ALPHABET)}
_C32_NORMALIZE = str.maketrans({"O": "0", "I": "1", "L": "1"})


class AddressVersion(IntEnum):
    MAINNET_SINGLE_SIG = 22  # SP
    MAINNET_MULTI_SIG = 20  # SM
    TESTNET_SINGLE_SIG = 26  # ST
    TESTNET_MULTI_SIG = 21  # SN


# ---- c32 ---------------------------------------------------------------------


def c32_encode(data: BytesLike) -> str:
    """Encode bytes as c32; each leading zero byte becomes one leading ``0``."""
    raw = ensure_bytes(data)
    zeros = len(raw) - len(raw.lstrip(b"\x00"))
    num = int.from_bytes(raw, "big")
    digits = []
    while num > 0:
        num, rem = divmod(num, 32)
        digits.append(C32_ALPHABET[rem])
    return "0" * zeros + "".join(reversed(digits))


def c32_decode(text: str) -> bytes:
    """Inverse of :func:`c32_encode`. Raises InvalidAddress on foreign characters."""
    norm = text.upper().translate(_C32_NORMALIZE)
    num = 0
    for ch in norm:
        idx = _C32_INDEX.get(ch)
        if idx is None:
            raise InvalidAddress(f"invalid c32 character {ch!r}", address=text)
        num = num * 32 + idx
    zeros = len(norm) - len(norm.lstrip("0"))
    body = num.to_bytes((num.bit_length() + 7) // 8, "big") if num else b""
    return b"\x00" * zeros + body


# ---- c32check ----------------------------------------------------------------


def _check_version(version: int) -> int:
    if not 0 <= int(version) < 32:
        raise InvalidAddress(f"version must be in [0, 32), got {version}")
    return int(version)


def c32check_encode(version: int, data: BytesLike) -> str:
    version = _check_version(version)
    raw = ensure_bytes(data)
    check = checksum4(bytes([version]) + raw)
    return "S" + C32_ALPHABET[version] + c32_encode(raw + check)


def c32check_decode(address: str) -> Tuple[int, bytes]:
    """
    Decode a c32check string into ``(version, data)``, verifying the checksum.
    The data length is not constrained here; see :func:`parse_address`.
    """
    if not isinstance(address, str):
        raise InvalidAddress(f"address must be a string, got {type(address).__name__}")
    if len(address) < 3 or address[0] not in ("S", "s"):
        raise InvalidAddress("address must start with 'S'", address=address)
    version_ch = address[1].upper().translate(_C32_NORMALIZE)
    if version_ch not in _C32_INDEX:
        raise InvalidAddress(f"invalid version character {address[1]!r}", address=address)
    version = _C32_INDEX[version_ch]

    decoded = c32_decode(address[2:])
    if len(decoded) < 4:
        raise InvalidAddress("address too short to carry a checksum", address=address)
    data, check = decoded[:-4], decoded[-4:]
    if checksum4(bytes([version]) + data) != check:
        raise InvalidAddress("checksum mismatch", address=address)
    return version, data


# ---- addresses ---------------------------------------------------------------


def derive_address(pubkey_hash: BytesLike, version: int) -> str:
    """c32check address for a 20-byte public-key hash and version byte."""
    h = ensure_bytes(pubkey_hash)
    if len(h) != HASH160_LEN:
        raise InvalidAddress(f"public-key hash must be {HASH160_LEN} bytes, got {len(h)}")
    return c32check_encode(version, h)


def parse_address(address: str) -> Tuple[int, bytes]:
    """Return ``(version, hash160)``; raises InvalidAddress on any failure."""
    version, data = c32check_decode(address)
    if len(data) != HASH160_LEN:
        raise InvalidAddress(
            f"decoded hash must be {HASH160_LEN} bytes, got {len(data)}", address=address
        )
    return version, data


def is_valid(address: str) -> bool:
    try:
        parse_address(address)
    except InvalidAddress:
        return False
    return True


@dataclass(frozen=True)
class Address:
    version: int
    hash160: bytes

    def __post_init__(self) -> None:
        _check_version(self.version)
        if len(self.hash160) != HASH160_LEN:
            raise InvalidAddress(f"hash160 must be {HASH160_LEN} bytes, got {len(self.hash160)}")

    @classmethod
    def parse(cls, address: str) -> "Address":
        version, h = parse_address(address)
        return cls(version, h)

    @classmethod
    def from_public_key(cls, public_key: BytesLike, version: int) -> "Address":
        """Single-sig (P2PKH) address for a serialized secp256k1 public key."""
        return cls(int(version), hash160(public_key))

    def __str__(self) -> str:
        return derive_address(self.hash160, self.version)

    @property
    def c32(self) -> str:
        return str(self)


__all__ = [
    "C32_ALPHABET",
    "HASH160_LEN",
    "AddressVersion",
    "c32_encode",
    "c32_decode",
    "c32check_encode",
    "c32check_decode",
    "derive_address",
    "parse_address",
    "is_valid",
    "Address",
]
