"""
stacks_sdk.clarity.codec
========================

Canonical binary encoding of Clarity values.

Layout (every value starts with its one-byte :class:`ClarityType` tag)
----------------------------------------------------------------------
- int / uint        : 16-byte big-endian (two's complement for int)
- true / false/none : tag only
- buffer            : u32 length || bytes
- string-ascii/utf8 : u32 byte length || bytes
- principal (std)   : version u8 || hash160 (20)
- principal (ctr)   : version u8 || hash160 (20) || u8 name length || name
- ok / err / some   : inner value
- list              : u32 count || values
- tuple             : u32 count || (u8 key length || key || value)* sorted by key bytes

Design notes
------------
- ``decode`` returns ``(value, consumed)`` and never reads past the buffer;
  every structural violation raises :class:`MalformedValue`.
- Decoding is strict enough that ``encode(decode(b)[0]) == b`` holds for any
  input it accepts: tuple keys must arrive strictly ascending, and ASCII
  strings must satisfy the same check the constructor applies.
- Values nested deeper than ``MAX_DEPTH`` levels are rejected on decode with
  :class:`MalformedValue`.
"""

from __future__ import annotations

from typing import Callable, Dict, Tuple, Union

from ..errors import InvalidValue, MalformedValue
from ..utils.bytes import (
    BytesLike,
    ByteReader,
    from_hex as _from_hex,
    i128,
    to_hex as _to_hex,
    u8,
    u8_prefixed,
    u32,
    u32_prefixed,
    u128,
)
from .types import (
    BoolCV,
    BufferCV,
    ClarityType,
    ClarityValue,
    ContractPrincipalCV,
    ErrCV,
    IntCV,
    ListCV,
    NoneCV,
    OkCV,
    SomeCV,
    StandardPrincipalCV,
    StringAsciiCV,
    StringUtf8CV,
    TupleCV,
    UIntCV,
    clarity_name_bytes,
    is_clarity_ascii,
)

# Same nesting limit the node enforces.
MAX_DEPTH = 32

# --- encode ------------------------------------------------------------------


def _enc_int(v: IntCV) -> bytes:
    return i128(v.value)


def _enc_uint(v: UIntCV) -> bytes:
    return u128(v.value)


def _enc_buffer(v: BufferCV) -> bytes:
    return u32_prefixed(v.data)


def _enc_empty(v: ClarityValue) -> bytes:
    return b""


def _enc_standard(v: StandardPrincipalCV) -> bytes:
    return u8(v.version) + v.hash160


def _enc_contract(v: ContractPrincipalCV) -> bytes:
    return u8(v.version) + v.hash160 + u8_prefixed(clarity_name_bytes(v.contract_name))


def _enc_wrapped(v: Union[OkCV, ErrCV, SomeCV]) -> bytes:
    return encode(v.value)


def _enc_list(v: ListCV) -> bytes:
    return u32(len(v.items)) + b"".join(encode(item) for item in v.items)


def _enc_tuple(v: TupleCV) -> bytes:
    out = bytearray(u32(len(v.entries)))
    for key, value in v.sorted_entries():
        out += u8_prefixed(clarity_name_bytes(key, field="tuple key"))
        out += encode(value)
    return bytes(out)


def _enc_ascii(v: StringAsciiCV) -> bytes:
    return u32_prefixed(v.data.encode("ascii"))


def _enc_utf8(v: StringUtf8CV) -> bytes:
    return u32_prefixed(v.data.encode("utf-8"))


_ENCODERS: Dict[ClarityType, Callable[..., bytes]] = {
    ClarityType.INT: _enc_int,
    ClarityType.UINT: _enc_uint,
    ClarityType.BUFFER: _enc_buffer,
    ClarityType.BOOL_TRUE: _enc_empty,
    ClarityType.BOOL_FALSE: _enc_empty,
    ClarityType.PRINCIPAL_STANDARD: _enc_standard,
    ClarityType.PRINCIPAL_CONTRACT: _enc_contract,
    ClarityType.RESPONSE_OK: _enc_wrapped,
    ClarityType.RESPONSE_ERR: _enc_wrapped,
    ClarityType.OPTIONAL_NONE: _enc_empty,
    ClarityType.OPTIONAL_SOME: _enc_wrapped,
    ClarityType.LIST: _enc_list,
    ClarityType.TUPLE: _enc_tuple,
    ClarityType.STRING_ASCII: _enc_ascii,
    ClarityType.STRING_UTF8: _enc_utf8,
}


def encode(value: ClarityValue) -> bytes:
    """Serialize a Clarity value to its canonical bytes."""
    if not isinstance(value, ClarityValue):
        raise InvalidValue(f"expected a ClarityValue, got {type(value).__name__}")
    tag = value.type_id
    return u8(tag) + _ENCODERS[tag](value)


def to_hex(value: ClarityValue) -> str:
    """``0x``-prefixed lowercase hex of :func:`encode`."""
    return _to_hex(encode(value))


# --- decode ------------------------------------------------------------------


def _dec_int(r: ByteReader, depth: int) -> ClarityValue:
    return IntCV(r.read_i128())


def _dec_uint(r: ByteReader, depth: int) -> ClarityValue:
    return UIntCV(r.read_u128())


def _dec_buffer(r: ByteReader, depth: int) -> ClarityValue:
    start = r.offset
    data = r.read_u32_prefixed()
    try:
        return BufferCV(data)
    except InvalidValue as e:
        raise MalformedValue(e.message, offset=start) from e


def _dec_true(r: ByteReader, depth: int) -> ClarityValue:
    return BoolCV(True)


def _dec_false(r: ByteReader, depth: int) -> ClarityValue:
    return BoolCV(False)


def read_name(r: ByteReader, field: str) -> str:
    start = r.offset
    raw = r.read_u8_prefixed()
    try:
        return clarity_name_bytes(raw.decode("ascii"), field=field).decode("ascii")
    except (UnicodeDecodeError, InvalidValue) as e:
        raise MalformedValue(f"invalid {field}: {raw!r}", offset=start) from e


def _dec_standard(r: ByteReader, depth: int) -> ClarityValue:
    version = r.read_u8()
    h = r.read(20)
    try:
        return StandardPrincipalCV(version, h)
    except InvalidValue as e:
        raise MalformedValue(e.message, offset=r.offset) from e


def _dec_contract(r: ByteReader, depth: int) -> ClarityValue:
    version = r.read_u8()
    h = r.read(20)
    name = read_name(r, "contract name")
    try:
        return ContractPrincipalCV(version, h, name)
    except InvalidValue as e:
        raise MalformedValue(e.message, offset=r.offset) from e


def _dec_ok(r: ByteReader, depth: int) -> ClarityValue:
    return OkCV(_decode_from(r, depth + 1))


def _dec_err(r: ByteReader, depth: int) -> ClarityValue:
    return ErrCV(_decode_from(r, depth + 1))


def _dec_none(r: ByteReader, depth: int) -> ClarityValue:
    return NoneCV()


def _dec_some(r: ByteReader, depth: int) -> ClarityValue:
    return SomeCV(_decode_from(r, depth + 1))


def _dec_list(r: ByteReader, depth: int) -> ClarityValue:
    count = r.read_u32()
    # Each element needs at least one byte, so an oversized count fails fast.
    if count > r.remaining:
        raise MalformedValue(
            f"list count {count} exceeds remaining {r.remaining} bytes", offset=r.offset
        )
    return ListCV(tuple(_decode_from(r, depth + 1) for _ in range(count)))


def _dec_tuple(r: ByteReader, depth: int) -> ClarityValue:
    count = r.read_u32()
    if count > r.remaining:
        raise MalformedValue(
            f"tuple count {count} exceeds remaining {r.remaining} bytes", offset=r.offset
        )
    entries = []
    prev = None
    for _ in range(count):
        start = r.offset
        key = read_name(r, "tuple key")
        raw_key = key.encode("ascii")
        if prev is not None and raw_key <= prev:
            raise MalformedValue(
                f"tuple keys not strictly ascending at {key!r}", offset=start
            )
        prev = raw_key
        entries.append((key, _decode_from(r, depth + 1)))
    return TupleCV(tuple(entries))


def _dec_ascii(r: ByteReader, depth: int) -> ClarityValue:
    start = r.offset
    raw = r.read_u32_prefixed()
    if not is_clarity_ascii(raw):
        raise MalformedValue("string-ascii contains non-ASCII bytes", offset=start)
    return StringAsciiCV(raw.decode("ascii"))


def _dec_utf8(r: ByteReader, depth: int) -> ClarityValue:
    start = r.offset
    raw = r.read_u32_prefixed()
    try:
        return StringUtf8CV(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise MalformedValue(f"string-utf8 is not valid UTF-8: {e.reason}", offset=start) from e


_DECODERS: Dict[ClarityType, Callable[[ByteReader, int], ClarityValue]] = {
    ClarityType.INT: _dec_int,
    ClarityType.UINT: _dec_uint,
    ClarityType.BUFFER: _dec_buffer,
    ClarityType.BOOL_TRUE: _dec_true,
    ClarityType.BOOL_FALSE: _dec_false,
    ClarityType.PRINCIPAL_STANDARD: _dec_standard,
    ClarityType.PRINCIPAL_CONTRACT: _dec_contract,
    ClarityType.RESPONSE_OK: _dec_ok,
    ClarityType.RESPONSE_ERR: _dec_err,
    ClarityType.OPTIONAL_NONE: _dec_none,
    ClarityType.OPTIONAL_SOME: _dec_some,
    ClarityType.LIST: _dec_list,
    ClarityType.TUPLE: _dec_tuple,
    ClarityType.STRING_ASCII: _dec_ascii,
    ClarityType.STRING_UTF8: _dec_utf8,
}


def _decode_from(r: ByteReader, depth: int = 0) -> ClarityValue:
    start = r.offset
    if depth > MAX_DEPTH:
        raise MalformedValue(f"value nested deeper than {MAX_DEPTH} levels", offset=start)
    tag = r.read_u8()
    try:
        typ = ClarityType(tag)
    except ValueError:
        raise MalformedValue(f"unknown clarity type tag 0x{tag:02x}", offset=start) from None
    return _DECODERS[typ](r, depth)


def decode_from(reader: ByteReader) -> ClarityValue:
    """Decode one value at the reader's cursor (used by payload and post-condition codecs)."""
    return _decode_from(reader)


def decode(data: BytesLike, offset: int = 0) -> Tuple[ClarityValue, int]:
    """
    Decode one value starting at `offset`.

    Returns:
        (value, bytes_consumed)
    """
    r = ByteReader(data, offset)
    value = _decode_from(r)
    return value, r.offset - offset


def decode_exact(data: BytesLike) -> ClarityValue:
    """Decode a buffer holding exactly one value; trailing bytes are an error."""
    value, used = decode(data)
    if used != len(data):
        raise MalformedValue(f"{len(data) - used} trailing bytes after value", offset=used)
    return value


def from_hex(text: str) -> ClarityValue:
    """Decode a (``0x``-optional) hex string holding exactly one value."""
    try:
        raw = _from_hex(text)
    except (TypeError, ValueError) as e:
        raise MalformedValue(f"invalid hex: {e}") from e
    return decode_exact(raw)


__all__ = ["MAX_DEPTH", "encode", "to_hex", "decode", "decode_from", "decode_exact", "from_hex", "read_name"]
