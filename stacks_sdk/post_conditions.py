"""
stacks_sdk.post_conditions
==========================

Post-conditions: caller-declared limits on what assets a transaction may move.
The node aborts the transaction if any listed condition does not hold (and,
in deny mode, if an unlisted asset moves).

Wire format
-----------
    principal   = 0x01                                      (tx origin)
                | 0x02 version hash160                      (standard)
                | 0x03 version hash160 u8len name           (contract)
    asset_info  = version hash160 u8len contract_name u8len asset_name

    STX  = 0x00 principal code amount:u64
    FT   = 0x01 principal asset_info code amount:u64
    NFT  = 0x02 principal asset_info clarity_value code

Amount conditions use :class:`FungibleConditionCode`; NFT conditions use the
separate :class:`NonFungibleConditionCode` set. Using a code from the wrong
set raises :class:`InvalidPostCondition` at construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Sequence, Tuple, Union

from .address import parse_address
from .clarity.codec import decode_from as _decode_value, encode as _encode_value
from .clarity.codec import read_name as _read_name
from .clarity.types import (
    ClarityValue,
    ContractPrincipalCV,
    StandardPrincipalCV,
    clarity_name_bytes,
    principal_cv,
)
from .errors import InvalidPostCondition, InvalidValue, MalformedValue
from .utils.bytes import U64_MAX, BytesLike, ByteReader, u8, u8_prefixed, u32, u64


class PostConditionMode(IntEnum):
    ALLOW = 0x01
    DENY = 0x02


class PostConditionType(IntEnum):
    STX = 0x00
    FUNGIBLE = 0x01
    NON_FUNGIBLE = 0x02


class PrincipalType(IntEnum):
    ORIGIN = 0x01
    STANDARD = 0x02
    CONTRACT = 0x03


class FungibleConditionCode(IntEnum):
    EQUAL = 0x01
    GREATER = 0x02
    GREATER_EQUAL = 0x03
    LESS = 0x04
    LESS_EQUAL = 0x05


class NonFungibleConditionCode(IntEnum):
    SENT = 0x10
    NOT_SENT = 0x11


@dataclass(frozen=True)
class OriginPrincipal:
    """Stands for whoever signs the transaction's origin."""

    def __str__(self) -> str:
        return "origin"


ORIGIN = OriginPrincipal()

PostConditionPrincipal = Union[OriginPrincipal, StandardPrincipalCV, ContractPrincipalCV]


@dataclass(frozen=True)
class AssetInfo:
    address_version: int
    address_hash160: bytes
    contract_name: str
    asset_name: str

    def __post_init__(self) -> None:
        clarity_name_bytes(self.contract_name, field="contract_name")
        clarity_name_bytes(self.asset_name, field="asset_name")
        if len(self.address_hash160) != 20:
            raise InvalidValue("asset contract hash160 must be 20 bytes", field="asset")

    @classmethod
    def create(cls, contract_address: str, contract_name: str, asset_name: str) -> "AssetInfo":
        version, h = parse_address(contract_address)
        return cls(version, h, contract_name, asset_name)

    @classmethod
    def parse(cls, identifier: str) -> "AssetInfo":
        """Parse ``SP....contract-name::asset-name``."""
        contract, sep, asset = identifier.partition("::")
        address, dot, name = contract.partition(".")
        if not sep or not dot:
            raise InvalidValue(
                f"asset identifier must look like ADDR.contract::asset, got {identifier!r}",
                field="asset",
            )
        return cls.create(address, name, asset)

    def __str__(self) -> str:
        cp = ContractPrincipalCV(self.address_version, self.address_hash160, self.contract_name)
        return f"{cp}::{self.asset_name}"


# --- conditions --------------------------------------------------------------


def _require_principal(principal: object) -> None:
    if not isinstance(principal, (OriginPrincipal, StandardPrincipalCV, ContractPrincipalCV)):
        raise InvalidValue(
            f"post-condition principal must be ORIGIN or a principal value, "
            f"got {type(principal).__name__}",
            field="principal",
        )


def _require_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or not 0 <= amount <= U64_MAX:
        raise InvalidValue(f"amount must be a u64, got {amount!r}", field="amount")


def _fungible_code(code: object) -> FungibleConditionCode:
    if isinstance(code, NonFungibleConditionCode):
        raise InvalidPostCondition(f"{code.name} is a non-fungible code; expected an amount comparison")
    try:
        return FungibleConditionCode(code)
    except ValueError:
        raise InvalidPostCondition(f"not a fungible condition code: {code!r}") from None


def _non_fungible_code(code: object) -> NonFungibleConditionCode:
    if isinstance(code, FungibleConditionCode):
        raise InvalidPostCondition(f"{code.name} is an amount comparison; expected SENT or NOT_SENT")
    try:
        return NonFungibleConditionCode(code)
    except ValueError:
        raise InvalidPostCondition(f"not a non-fungible condition code: {code!r}") from None


@dataclass(frozen=True)
class StxPostCondition:
    principal: PostConditionPrincipal
    code: FungibleConditionCode
    amount: int

    def __post_init__(self) -> None:
        _require_principal(self.principal)
        object.__setattr__(self, "code", _fungible_code(self.code))
        _require_amount(self.amount)

    @property
    def condition_type(self) -> PostConditionType:
        return PostConditionType.STX


@dataclass(frozen=True)
class FungiblePostCondition:
    principal: PostConditionPrincipal
    asset: AssetInfo
    code: FungibleConditionCode
    amount: int

    def __post_init__(self) -> None:
        _require_principal(self.principal)
        if not isinstance(self.asset, AssetInfo):
            raise InvalidValue("asset must be an AssetInfo", field="asset")
        object.__setattr__(self, "code", _fungible_code(self.code))
        _require_amount(self.amount)

    @property
    def condition_type(self) -> PostConditionType:
        return PostConditionType.FUNGIBLE


@dataclass(frozen=True)
class NonFungiblePostCondition:
    principal: PostConditionPrincipal
    asset: AssetInfo
    asset_value: ClarityValue
    code: NonFungibleConditionCode

    def __post_init__(self) -> None:
        _require_principal(self.principal)
        if not isinstance(self.asset, AssetInfo):
            raise InvalidValue("asset must be an AssetInfo", field="asset")
        if not isinstance(self.asset_value, ClarityValue):
            raise InvalidValue("asset_value must be a ClarityValue", field="asset_value")
        object.__setattr__(self, "code", _non_fungible_code(self.code))

    @property
    def condition_type(self) -> PostConditionType:
        return PostConditionType.NON_FUNGIBLE


PostCondition = Union[StxPostCondition, FungiblePostCondition, NonFungiblePostCondition]


# --- constructors ------------------------------------------------------------


def _principal(p: Union[str, PostConditionPrincipal]) -> PostConditionPrincipal:
    if isinstance(p, str):
        return ORIGIN if p == "origin" else principal_cv(p)
    return p


def _asset(a: Union[str, AssetInfo]) -> AssetInfo:
    return AssetInfo.parse(a) if isinstance(a, str) else a


def stx_post_condition(
    principal: Union[str, PostConditionPrincipal], code: FungibleConditionCode, amount: int
) -> StxPostCondition:
    """`principal` may be ``"origin"``, an address / contract id string, or a principal value."""
    return StxPostCondition(_principal(principal), code, amount)


def ft_post_condition(
    principal: Union[str, PostConditionPrincipal],
    asset: Union[str, AssetInfo],
    code: FungibleConditionCode,
    amount: int,
) -> FungiblePostCondition:
    return FungiblePostCondition(_principal(principal), _asset(asset), code, amount)


def nft_post_condition(
    principal: Union[str, PostConditionPrincipal],
    asset: Union[str, AssetInfo],
    asset_value: ClarityValue,
    code: NonFungibleConditionCode,
) -> NonFungiblePostCondition:
    return NonFungiblePostCondition(_principal(principal), _asset(asset), asset_value, code)


# --- encoding ----------------------------------------------------------------


def encode_principal(p: PostConditionPrincipal) -> bytes:
    if isinstance(p, OriginPrincipal):
        return u8(PrincipalType.ORIGIN)
    if isinstance(p, StandardPrincipalCV):
        return u8(PrincipalType.STANDARD) + u8(p.version) + p.hash160
    if isinstance(p, ContractPrincipalCV):
        return (
            u8(PrincipalType.CONTRACT)
            + u8(p.version)
            + p.hash160
            + u8_prefixed(clarity_name_bytes(p.contract_name, field="contract_name"))
        )
    raise InvalidValue(f"unsupported principal {type(p).__name__}", field="principal")


def encode_asset_info(a: AssetInfo) -> bytes:
    return (
        u8(a.address_version)
        + a.address_hash160
        + u8_prefixed(clarity_name_bytes(a.contract_name, field="contract_name"))
        + u8_prefixed(clarity_name_bytes(a.asset_name, field="asset_name"))
    )


def encode_post_condition(pc: PostCondition) -> bytes:
    head = u8(pc.condition_type) + encode_principal(pc.principal)
    if isinstance(pc, StxPostCondition):
        return head + u8(pc.code) + u64(pc.amount)
    if isinstance(pc, FungiblePostCondition):
        return head + encode_asset_info(pc.asset) + u8(pc.code) + u64(pc.amount)
    if isinstance(pc, NonFungiblePostCondition):
        return head + encode_asset_info(pc.asset) + _encode_value(pc.asset_value) + u8(pc.code)
    raise InvalidValue(f"unsupported post-condition {type(pc).__name__}")


def encode_post_conditions(pcs: Sequence[PostCondition]) -> bytes:
    """u32 count followed by each condition, in the given order."""
    return u32(len(pcs)) + b"".join(encode_post_condition(pc) for pc in pcs)


# --- decoding ----------------------------------------------------------------


def read_principal(r: ByteReader) -> PostConditionPrincipal:
    start = r.offset
    tag = r.read_u8()
    if tag == PrincipalType.ORIGIN:
        return ORIGIN
    if tag not in (PrincipalType.STANDARD, PrincipalType.CONTRACT):
        raise MalformedValue(f"unknown post-condition principal tag 0x{tag:02x}", offset=start)
    version = r.read_u8()
    h = r.read(20)
    try:
        if tag == PrincipalType.STANDARD:
            return StandardPrincipalCV(version, h)
        return ContractPrincipalCV(version, h, _read_name(r, "contract name"))
    except InvalidValue as e:
        raise MalformedValue(e.message, offset=start) from e


def read_asset_info(r: ByteReader) -> AssetInfo:
    version = r.read_u8()
    h = r.read(20)
    contract = _read_name(r, "contract name")
    asset = _read_name(r, "asset name")
    return AssetInfo(version, h, contract, asset)


def _read_code(r: ByteReader, parse) -> IntEnum:
    start = r.offset
    raw = r.read_u8()
    try:
        return parse(raw)
    except InvalidPostCondition as e:
        raise MalformedValue(e.message, offset=start) from e


def read_post_condition(r: ByteReader) -> PostCondition:
    start = r.offset
    tag = r.read_u8()
    try:
        kind = PostConditionType(tag)
    except ValueError:
        raise MalformedValue(f"unknown post-condition type 0x{tag:02x}", offset=start) from None
    principal = read_principal(r)
    if kind == PostConditionType.STX:
        code = _read_code(r, _fungible_code)
        return StxPostCondition(principal, code, r.read_u64())
    asset = read_asset_info(r)
    if kind == PostConditionType.FUNGIBLE:
        code = _read_code(r, _fungible_code)
        return FungiblePostCondition(principal, asset, code, r.read_u64())
    value = _decode_value(r)
    code = _read_code(r, _non_fungible_code)
    return NonFungiblePostCondition(principal, asset, value, code)


def read_post_conditions(r: ByteReader) -> List[PostCondition]:
    count = r.read_u32()
    if count > r.remaining:
        raise MalformedValue(
            f"post-condition count {count} exceeds remaining {r.remaining} bytes", offset=r.offset
        )
    return [read_post_condition(r) for _ in range(count)]


def decode_post_condition(data: BytesLike, offset: int = 0) -> Tuple[PostCondition, int]:
    """Returns (condition, bytes_consumed)."""
    r = ByteReader(data, offset)
    pc = read_post_condition(r)
    return pc, r.offset - offset


def normalize_post_conditions(pcs: Iterable[PostCondition]) -> Tuple[PostCondition, ...]:
    out = tuple(pcs)
    for i, pc in enumerate(out):
        if not isinstance(pc, (StxPostCondition, FungiblePostCondition, NonFungiblePostCondition)):
            raise InvalidValue(
                f"post_conditions[{i}] is not a post-condition: {type(pc).__name__}",
                field="post_conditions",
            )
    return out


__all__ = [
    "PostConditionMode",
    "PostConditionType",
    "PrincipalType",
    "FungibleConditionCode",
    "NonFungibleConditionCode",
    "OriginPrincipal",
    "ORIGIN",
    "PostConditionPrincipal",
    "AssetInfo",
    "StxPostCondition",
    "FungiblePostCondition",
    "NonFungiblePostCondition",
    "PostCondition",
    "stx_post_condition",
    "ft_post_condition",
    "nft_post_condition",
    "encode_principal",
    "encode_asset_info",
    "encode_post_condition",
    "encode_post_conditions",
    "read_principal",
    "read_asset_info",
    "read_post_condition",
    "read_post_conditions",
    "decode_post_condition",
    "normalize_post_conditions",
]
