"""
stacks_sdk.clarity.types
========================

The closed set of Clarity value variants.

Each variant is an immutable dataclass carrying a one-byte wire tag
(:class:`ClarityType`). Construction validates everything the wire format
cannot represent (integer ranges, buffer size, ASCII content, name lengths,
duplicate tuple keys) and raises :class:`~stacks_sdk.errors.InvalidValue`, so
an instance that exists is always encodable.

``str(value)`` renders Clarity source syntax::

    >>> str(tuple_cv({"a": uint_cv(1), "b": some_cv(string_ascii_cv("hi"))}))
    '(tuple (a u1) (b (some "hi")))'

Lowercase constructors (``int_cv``, ``tuple_cv``, ...) are the intended entry
points; the classes are exported for ``isinstance`` checks and matching.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

from ..address import HASH160_LEN, Address, derive_address, parse_address
from ..errors import InvalidValue
from ..utils.bytes import I128_MAX, I128_MIN, U128_MAX, BytesLike, ensure_bytes

MAX_BUFFER_LEN = 1024 * 1024
MAX_NAME_LEN = 128

# Printable ASCII plus tab, LF and CR.
_ASCII_ALLOWED = frozenset(range(0x20, 0x7F)) | {0x09, 0x0A, 0x0D}


class ClarityType(IntEnum):
    INT = 0x00
    UINT = 0x01
    BUFFER = 0x02
    BOOL_TRUE = 0x03
    BOOL_FALSE = 0x04
    PRINCIPAL_STANDARD = 0x05
    PRINCIPAL_CONTRACT = 0x06
    RESPONSE_OK = 0x07
    RESPONSE_ERR = 0x08
    OPTIONAL_NONE = 0x09
    OPTIONAL_SOME = 0x0A
    LIST = 0x0B
    TUPLE = 0x0C
    STRING_ASCII = 0x0D
    STRING_UTF8 = 0x0E


# --- validation helpers ------------------------------------------------------


def clarity_name_bytes(name: str, *, field: str = "name") -> bytes:
    """
    Validate a contract/function/asset name or tuple key and return its bytes.
    Names are 1..128 ASCII bytes.
    """
    if not isinstance(name, str):
        raise InvalidValue(f"{field} must be a string, got {type(name).__name__}", field=field)
    try:
        raw = name.encode("ascii")
    except UnicodeEncodeError:
        raise InvalidValue(f"{field} must be ASCII: {name!r}", field=field) from None
    if not 1 <= len(raw) <= MAX_NAME_LEN:
        raise InvalidValue(
            f"{field} must be 1..{MAX_NAME_LEN} bytes, got {len(raw)}", field=field
        )
    return raw


def is_clarity_ascii(raw: bytes) -> bool:
    return all(b in _ASCII_ALLOWED for b in raw)


def _require_value(value: object, field: str) -> None:
    if not isinstance(value, ClarityValue):
        raise InvalidValue(
            f"{field} must be a ClarityValue, got {type(value).__name__}", field=field
        )


def _require_hash160(h: bytes) -> None:
    if not isinstance(h, (bytes, bytearray)) or len(h) != HASH160_LEN:
        raise InvalidValue(f"hash160 must be {HASH160_LEN} bytes", field="hash160")


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


# --- base --------------------------------------------------------------------


class ClarityValue:
    """Common surface of every variant."""

    __slots__ = ()

    @property
    def type_id(self) -> ClarityType:  # pragma: no cover - overridden
        raise NotImplementedError

    def serialize(self) -> bytes:
        from .codec import encode

        return encode(self)

    def to_hex(self) -> str:
        from .codec import to_hex

        return to_hex(self)

    def byte_length(self) -> int:
        return len(self.serialize())


# --- primitives --------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class IntCV(ClarityValue):
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidValue("int value must be an int", field="int")
        if not I128_MIN <= self.value <= I128_MAX:
            raise InvalidValue(f"int out of i128 range: {self.value}", field="int")

    @property
    def type_id(self) -> ClarityType:
        return ClarityType.INT

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class UIntCV(ClarityValue):
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidValue("uint value must be an int", field="uint")
        if not 0 <= self.value <= U128_MAX:
            raise InvalidValue(f"uint out of u128 range: {self.value}", field="uint")

    @property
    def type_id(self) -> ClarityType:
        return ClarityType.UINT

    def __str__(self) -> str:
        return f"u{self.value}"


@dataclass(frozen=True, slots=True)
class BoolCV(ClarityValue):
    value: bool

    @property
    def type_id(self) -> ClarityType:
        return ClarityType.BOOL_TRUE if self.value else ClarityType.BOOL_FALSE

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True, slots=True)
class BufferCV(ClarityValue):
    data: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.data, (bytes, bytearray, memoryview)):
            raise InvalidValue("buffer data must be bytes", field="buffer")
        object.__setattr__(self, "data", bytes(self.data))
        if len(self.data) > MAX_BUFFER_LEN:
            raise InvalidValue(
                f"buffer exceeds {MAX_BUFFER_LEN} bytes: {len(self.data)}", field="buffer"
            )

    @property
    def type_id(self) -> ClarityType:
        return ClarityType.BUFFER

    def __str__(self) -> str:
        return "0x" + self.data.hex()


@dataclass(frozen=True, slots=True)
class StringAsciiCV(ClarityValue):
    data: str

    def __post_init__(self) -> None:
        if not isinstance(self.data, str):
            raise InvalidValue("string-ascii data must be str", field="string-ascii")
        try:
            raw = self.data.encode("ascii")
        except UnicodeEncodeError:
            raise InvalidValue(
                f"string-ascii contains non-ASCII characters: {self.data!r}", field="string-ascii"
            ) from None
        if not is_clarity_ascii(raw):
            raise InvalidValue(
                f"string-ascii contains unprintable characters: {self.data!r}",
                field="string-ascii",
            )

    @property
    def type_id(self) -> ClarityType:
        return ClarityType.STRING_ASCII

    def __str__(self) -> str:
        return _quote(self.data)


@dataclass(frozen=True, slots=True)
class StringUtf8CV(ClarityValue):
    data: str

    def __post_init__(self) -> None:
        if not isinstance(self.data, str):
            raise InvalidValue("string-utf8 data must be str", field="string-utf8")
        try:
            self.data.encode("utf-8")
        except UnicodeEncodeError:
            raise InvalidValue("string-utf8 is not encodable", field="string-utf8") from None

    @property
    def type_id(self) -> ClarityType:
        return ClarityType.STRING_UTF8

    def __str__(self) -> str:
        return "u" + _quote(self.data)


# --- principals --------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StandardPrincipalCV(ClarityValue):
    version: int
    hash160: bytes

    def __post_init__(self) -> None:
        if not 0 <= self.version < 32:
            raise InvalidValue(f"address version out of range: {self.version}", field="version")
        _require_hash160(self.hash160)
        object.__setattr__(self, "hash160", bytes(self.hash160))

    @property
    def type_id(self) -> ClarityType:
        return ClarityType.PRINCIPAL_STANDARD

    @property
    def address(self) -> str:
        return derive_address(self.hash160, self.version)

    def __str__(self) -> str:
        return self.address


@dataclass(frozen=True, slots=True)
class ContractPrincipalCV(ClarityValue):
    version: int
    hash160: bytes
    contract_name: str

    def __post_init__(self) -> None:
        if not 0 <= self.version < 32:
            raise InvalidValue(f"address version out of range: {self.version}", field="version")
        _require_hash160(self.hash160)
        object.__setattr__(self, "hash160", bytes(self.hash160))
        clarity_name_bytes(self.contract_name, field="contract_name")

    @property
    def type_id(self) -> ClarityType:
        return ClarityType.PRINCIPAL_CONTRACT

    @property
    def address(self) -> str:
        return derive_address(self.hash160, self.version)

    def __str__(self) -> str:
        return f"{self.address}.{self.contract_name}"


PrincipalCV = Union[StandardPrincipalCV, ContractPrincipalCV]


# --- wrappers ----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NoneCV(ClarityValue):
    @property
    def type_id(self) -> ClarityType:
        return ClarityType.OPTIONAL_NONE

    def __str__(self) -> str:
        return "none"


@dataclass(frozen=True, slots=True)
class SomeCV(ClarityValue):
    value: ClarityValue

    def __post_init__(self) -> None:
        _require_value(self.value, "some")

    @property
    def type_id(self) -> ClarityType:
        return ClarityType.OPTIONAL_SOME

    def __str__(self) -> str:
        return f"(some {self.value})"


@dataclass(frozen=True, slots=True)
class OkCV(ClarityValue):
    value: ClarityValue

    def __post_init__(self) -> None:
        _require_value(self.value, "ok")

    @property
    def type_id(self) -> ClarityType:
        return ClarityType.RESPONSE_OK

    def __str__(self) -> str:
        return f"(ok {self.value})"


@dataclass(frozen=True, slots=True)
class ErrCV(ClarityValue):
    value: ClarityValue

    def __post_init__(self) -> None:
        _require_value(self.value, "err")

    @property
    def type_id(self) -> ClarityType:
        return ClarityType.RESPONSE_ERR

    def __str__(self) -> str:
        return f"(err {self.value})"


# --- composites --------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ListCV(ClarityValue):
    """Ordered sequence; element types are not required to agree."""

    items: Tuple[ClarityValue, ...]

    def __post_init__(self) -> None:
        items = tuple(self.items)
        for i, item in enumerate(items):
            _require_value(item, f"list[{i}]")
        object.__setattr__(self, "items", items)

    @property
    def type_id(self) -> ClarityType:
        return ClarityType.LIST

    def __iter__(self) -> Iterator[ClarityValue]:
        return iter(self.items)

    def __str__(self) -> str:
        return "(list" + "".join(f" {v}" for v in self.items) + ")"


@dataclass(frozen=True, slots=True, eq=False)
class TupleCV(ClarityValue):
    """
    Named fields. Insertion order is kept for display; equality and the wire
    form ignore it (entries are encoded in ascending key-byte order).
    """

    entries: Tuple[Tuple[str, ClarityValue], ...]

    def __post_init__(self) -> None:
        entries = tuple((k, v) for k, v in self.entries)
        seen = set()
        for key, value in entries:
            clarity_name_bytes(key, field="tuple key")
            if key in seen:
                raise InvalidValue(f"duplicate tuple key {key!r}", field="tuple key")
            seen.add(key)
            _require_value(value, f"tuple[{key}]")
        object.__setattr__(self, "entries", entries)

    @property
    def type_id(self) -> ClarityType:
        return ClarityType.TUPLE

    @property
    def data(self) -> Dict[str, ClarityValue]:
        return dict(self.entries)

    def sorted_entries(self) -> Tuple[Tuple[str, ClarityValue], ...]:
        return tuple(sorted(self.entries, key=lambda kv: kv[0].encode("ascii")))

    def keys(self) -> Tuple[str, ...]:
        return tuple(k for k, _ in self.entries)

    def get(self, key: str, default: Optional[ClarityValue] = None) -> Optional[ClarityValue]:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> ClarityValue:
        return self.data[key]

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TupleCV):
            return NotImplemented
        return self.sorted_entries() == other.sorted_entries()

    def __hash__(self) -> int:
        return hash((TupleCV, self.sorted_entries()))

    def __str__(self) -> str:
        return "(tuple" + "".join(f" ({k} {v})" for k, v in self.entries) + ")"


# --- constructors ------------------------------------------------------------


def int_cv(value: int) -> IntCV:
    return IntCV(value)


def uint_cv(value: int) -> UIntCV:
    return UIntCV(value)


def bool_cv(value: bool) -> BoolCV:
    return BoolCV(bool(value))


def true_cv() -> BoolCV:
    return BoolCV(True)


def false_cv() -> BoolCV:
    return BoolCV(False)


def buffer_cv(data: Union[BytesLike, str]) -> BufferCV:
    """Bytes, or a hex string (with or without ``0x``)."""
    try:
        raw = ensure_bytes(data)
    except (TypeError, ValueError) as e:
        raise InvalidValue(f"buffer data: {e}", field="buffer") from e
    return BufferCV(raw)


def string_ascii_cv(text: str) -> StringAsciiCV:
    return StringAsciiCV(text)


def string_utf8_cv(text: str) -> StringUtf8CV:
    return StringUtf8CV(text)


def standard_principal_cv(address: Union[str, Address]) -> StandardPrincipalCV:
    if isinstance(address, Address):
        return StandardPrincipalCV(address.version, address.hash160)
    version, h = parse_address(address)
    return StandardPrincipalCV(version, h)


def contract_principal_cv(address: Union[str, Address], contract_name: str) -> ContractPrincipalCV:
    if isinstance(address, Address):
        return ContractPrincipalCV(address.version, address.hash160, contract_name)
    version, h = parse_address(address)
    return ContractPrincipalCV(version, h, contract_name)


def principal_cv(principal: str) -> PrincipalCV:
    """Parse ``SP...`` or ``SP....contract-name`` into a principal value."""
    address, dot, name = principal.partition(".")
    if dot:
        return contract_principal_cv(address, name)
    return standard_principal_cv(address)


def none_cv() -> NoneCV:
    return NoneCV()


def some_cv(value: ClarityValue) -> SomeCV:
    return SomeCV(value)


def optional_cv(value: Optional[ClarityValue]) -> Union[NoneCV, SomeCV]:
    return NoneCV() if value is None else SomeCV(value)


def ok_cv(value: ClarityValue) -> OkCV:
    return OkCV(value)


def err_cv(value: ClarityValue) -> ErrCV:
    return ErrCV(value)


def list_cv(items: Iterable[ClarityValue]) -> ListCV:
    return ListCV(tuple(items))


def tuple_cv(
    entries: Union[Mapping[str, ClarityValue], Iterable[Tuple[str, ClarityValue]]],
) -> TupleCV:
    """
    Build a tuple from a mapping or from ``(key, value)`` pairs. Pairs let
    callers express (and get rejected for) duplicate keys.
    """
    if isinstance(entries, Mapping):
        pairs = tuple(entries.items())
    else:
        pairs = tuple(entries)
    return TupleCV(pairs)


# Every wire tag resolves to exactly one variant class.
VARIANTS: Dict[ClarityType, type] = {
    ClarityType.INT: IntCV,
    ClarityType.UINT: UIntCV,
    ClarityType.BUFFER: BufferCV,
    ClarityType.BOOL_TRUE: BoolCV,
    ClarityType.BOOL_FALSE: BoolCV,
    ClarityType.PRINCIPAL_STANDARD: StandardPrincipalCV,
    ClarityType.PRINCIPAL_CONTRACT: ContractPrincipalCV,
    ClarityType.RESPONSE_OK: OkCV,
    ClarityType.RESPONSE_ERR: ErrCV,
    ClarityType.OPTIONAL_NONE: NoneCV,
    ClarityType.OPTIONAL_SOME: SomeCV,
    ClarityType.LIST: ListCV,
    ClarityType.TUPLE: TupleCV,
    ClarityType.STRING_ASCII: StringAsciiCV,
    ClarityType.STRING_UTF8: StringUtf8CV,
}

__all__ = [
    "MAX_BUFFER_LEN",
    "MAX_NAME_LEN",
    "ClarityType",
    "ClarityValue",
    "IntCV",
    "UIntCV",
    "BoolCV",
    "BufferCV",
    "StringAsciiCV",
    "StringUtf8CV",
    "StandardPrincipalCV",
    "ContractPrincipalCV",
    "PrincipalCV",
    "NoneCV",
    "SomeCV",
    "OkCV",
    "ErrCV",
    "ListCV",
    "TupleCV",
    "VARIANTS",
    "clarity_name_bytes",
    "is_clarity_ascii",
    "int_cv",
    "uint_cv",
    "bool_cv",
    "true_cv",
    "false_cv",
    "buffer_cv",
    "string_ascii_cv",
    "string_utf8_cv",
    "standard_principal_cv",
    "contract_principal_cv",
    "principal_cv",
    "none_cv",
    "some_cv",
    "optional_cv",
    "ok_cv",
    "err_cv",
    "list_cv",
    "tuple_cv",
]
