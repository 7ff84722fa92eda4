from __future__ import annotations

import struct
from typing import Union

from ..errors import MalformedValue

BytesLike = Union[bytes, bytearray, memoryview]

U32_MAX = 0xFFFF_FFFF
U64_MAX = 0xFFFF_FFFF_FFFF_FFFF
U128_MAX = (1 << 128) - 1
I128_MIN = -(1 << 127)
I128_MAX = (1 << 127) - 1


def ensure_bytes(data: Union[BytesLike, str]) -> bytes:
    """
    Ensure input is bytes.

    Accepts:
      - bytes / bytearray / memoryview  -> bytes(data)
      - str: treated as hex; optional '0x' prefix; even-length enforced

    Raises:
      ValueError on invalid hex strings.
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return from_hex(data)
    raise TypeError(f"Unsupported type for ensure_bytes: {type(data)!r}")


def to_hex(b: BytesLike, prefix: bool = True) -> str:
    """
    Bytes -> hex string (lowercase). Prefix with '0x' by default.
    """
    s = bytes(b).hex()
    return f"0x{s}" if prefix else s


def from_hex(s: str) -> bytes:
    """
    Hex string (optionally '0x' prefixed) -> bytes.

    Enforces even-length and is case agnostic.
    """
    if not isinstance(s, str):
        raise TypeError("from_hex expects a string")
    s = s.strip()
    if s.startswith(("0x", "0X")):
        s = s[2:]
    if len(s) % 2 != 0:
        raise ValueError("hex string must have even length")
    try:
        return bytes.fromhex(s)
    except ValueError as e:
        raise ValueError(f"invalid hex string: {e}") from e


# --- Fixed-width big-endian writers ------------------------------------------


def u8(n: int) -> bytes:
    return struct.pack(">B", n)


def u32(n: int) -> bytes:
    if not 0 <= n <= U32_MAX:
        raise ValueError(f"u32 out of range: {n}")
    return struct.pack(">I", n)


def u64(n: int) -> bytes:
    if not 0 <= n <= U64_MAX:
        raise ValueError(f"u64 out of range: {n}")
    return struct.pack(">Q", n)


def u128(n: int) -> bytes:
    return n.to_bytes(16, "big", signed=False)


def i128(n: int) -> bytes:
    return n.to_bytes(16, "big", signed=True)


def u8_prefixed(data: bytes) -> bytes:
    """1-byte length prefix followed by `data` (names, memos, tuple keys)."""
    if len(data) > 0xFF:
        raise ValueError(f"payload too long for a 1-byte length prefix: {len(data)}")
    return u8(len(data)) + data


def u32_prefixed(data: bytes) -> bytes:
    """4-byte big-endian length prefix followed by `data`."""
    return u32(len(data)) + data


# --- Reader ------------------------------------------------------------------


class ByteReader:
    """
    Forward-only cursor over an immutable buffer.

    Every read checks the remaining length first and raises
    :class:`~stacks_sdk.errors.MalformedValue` (with the failing offset)
    instead of returning short data.
    """

    __slots__ = ("_buf", "_pos")

    def __init__(self, data: BytesLike, offset: int = 0) -> None:
        self._buf = bytes(data)
        self._pos = offset

    @property
    def offset(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._pos

    def at_end(self) -> bool:
        return self._pos >= len(self._buf)

    def read(self, n: int) -> bytes:
        if n < 0 or n > self.remaining:
            raise MalformedValue(
                f"truncated input: wanted {n} bytes, {self.remaining} remaining",
                offset=self._pos,
            )
        out = self._buf[self._pos : self._pos + n]
        self._pos += n
        return out

    def read_u8(self) -> int:
        return self.read(1)[0]

    def read_u32(self) -> int:
        return struct.unpack(">I", self.read(4))[0]

    def read_u64(self) -> int:
        return struct.unpack(">Q", self.read(8))[0]

    def read_u128(self) -> int:
        return int.from_bytes(self.read(16), "big", signed=False)

    def read_i128(self) -> int:
        return int.from_bytes(self.read(16), "big", signed=True)

    def read_u8_prefixed(self) -> bytes:
        return self.read(self.read_u8())

    def read_u32_prefixed(self) -> bytes:
        start = self._pos
        n = self.read_u32()
        if n > self.remaining:
            raise MalformedValue(
                f"length prefix {n} exceeds remaining {self.remaining} bytes", offset=start
            )
        return self.read(n)


__all__ = [
    "BytesLike",
    "U32_MAX",
    "U64_MAX",
    "U128_MAX",
    "I128_MIN",
    "I128_MAX",
    "ensure_bytes",
    "to_hex",
    "from_hex",
    "u8",
    "u32",
    "u64",
    "u128",
    "i128",
    "u8_prefixed",
    "u32_prefixed",
    "ByteReader",
]
