"""
stacks_sdk.tx.payload
=====================

Transaction payloads: what the transaction does.

    token transfer = 0x00 recipient:clarity-principal amount:u64 memo[34]
    contract call  = 0x02 version hash160 u8len contract u8len function u32 n arg*

The memo is zero-padded on the right to exactly 34 bytes; payload objects
hold the padded form so decoded and constructed payloads compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Tuple, Union

from ..address import Address
from ..clarity.codec import decode_from as _decode_value, encode as _encode_value
from ..clarity.codec import read_name as _read_name
from ..clarity.types import (
    ClarityValue,
    ContractPrincipalCV,
    PrincipalCV,
    StandardPrincipalCV,
    clarity_name_bytes,
    principal_cv,
)
from ..errors import InvalidAddress, InvalidValue, MalformedValue
from ..utils.bytes import U64_MAX, BytesLike, ByteReader, u8, u8_prefixed, u32, u64

MEMO_LEN = 34


class PayloadType(IntEnum):
    TOKEN_TRANSFER = 0x00
    SMART_CONTRACT = 0x01
    CONTRACT_CALL = 0x02


def _memo_bytes(memo: Union[str, BytesLike, None]) -> bytes:
    if memo is None:
        raw = b""
    elif isinstance(memo, str):
        raw = memo.encode("utf-8")
    elif isinstance(memo, (bytes, bytearray, memoryview)):
        raw = bytes(memo)
    else:
        raise InvalidValue(f"memo must be str or bytes, got {type(memo).__name__}", field="memo")
    if len(raw) > MEMO_LEN:
        raise InvalidValue(f"memo exceeds {MEMO_LEN} bytes: {len(raw)}", field="memo")
    return raw.ljust(MEMO_LEN, b"\x00")


@dataclass(frozen=True)
class TokenTransferPayload:
    recipient: PrincipalCV
    amount: int
    memo: bytes = b""

    def __post_init__(self) -> None:
        if isinstance(self.recipient, str):
            object.__setattr__(self, "recipient", principal_cv(self.recipient))
        if not isinstance(self.recipient, (StandardPrincipalCV, ContractPrincipalCV)):
            raise InvalidValue("recipient must be a principal", field="recipient")
        if isinstance(self.amount, bool) or not isinstance(self.amount, int) or not 0 <= self.amount <= U64_MAX:
            raise InvalidValue(f"amount must be a u64, got {self.amount!r}", field="amount")
        object.__setattr__(self, "memo", _memo_bytes(self.memo))

    @property
    def payload_type(self) -> PayloadType:
        return PayloadType.TOKEN_TRANSFER

    @property
    def memo_text(self) -> str:
        """Memo with padding stripped, decoded leniently for display."""
        return self.memo.rstrip(b"\x00").decode("utf-8", errors="replace")


@dataclass(frozen=True)
class ContractCallPayload:
    contract_address: Address
    contract_name: str
    function_name: str
    function_args: Tuple[ClarityValue, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.contract_address, str):
            object.__setattr__(self, "contract_address", Address.parse(self.contract_address))
        if not isinstance(self.contract_address, Address):
            raise InvalidValue("contract_address must be an Address", field="contract_address")
        clarity_name_bytes(self.contract_name, field="contract_name")
        clarity_name_bytes(self.function_name, field="function_name")
        args = tuple(self.function_args)
        for i, arg in enumerate(args):
            if not isinstance(arg, ClarityValue):
                raise InvalidValue(
                    f"function_args[{i}] must be a ClarityValue, got {type(arg).__name__}",
                    field="function_args",
                )
        object.__setattr__(self, "function_args", args)

    @property
    def payload_type(self) -> PayloadType:
        return PayloadType.CONTRACT_CALL

    @property
    def contract_id(self) -> str:
        return f"{self.contract_address}.{self.contract_name}"


Payload = Union[TokenTransferPayload, ContractCallPayload]


def token_transfer_payload(
    recipient: Union[str, PrincipalCV], amount: int, memo: Union[str, BytesLike, None] = None
) -> TokenTransferPayload:
    return TokenTransferPayload(recipient, amount, _memo_bytes(memo))


def contract_call_payload(
    contract_address: Union[str, Address],
    contract_name: str,
    function_name: str,
    function_args: Iterable[ClarityValue] = (),
) -> ContractCallPayload:
    return ContractCallPayload(contract_address, contract_name, function_name, tuple(function_args))


# --- codec -------------------------------------------------------------------


def encode_payload(payload: Payload) -> bytes:
    if isinstance(payload, TokenTransferPayload):
        return (
            u8(PayloadType.TOKEN_TRANSFER)
            + _encode_value(payload.recipient)
            + u64(payload.amount)
            + payload.memo
        )
    if isinstance(payload, ContractCallPayload):
        out = bytearray(u8(PayloadType.CONTRACT_CALL))
        out += u8(payload.contract_address.version) + payload.contract_address.hash160
        out += u8_prefixed(clarity_name_bytes(payload.contract_name, field="contract_name"))
        out += u8_prefixed(clarity_name_bytes(payload.function_name, field="function_name"))
        out += u32(len(payload.function_args))
        for arg in payload.function_args:
            out += _encode_value(arg)
        return bytes(out)
    raise InvalidValue(f"unsupported payload {type(payload).__name__}")


def read_payload(r: ByteReader) -> Payload:
    start = r.offset
    tag = r.read_u8()
    if tag == PayloadType.TOKEN_TRANSFER:
        recipient = _decode_value(r)
        if not isinstance(recipient, (StandardPrincipalCV, ContractPrincipalCV)):
            raise MalformedValue("token transfer recipient is not a principal", offset=start + 1)
        amount = r.read_u64()
        memo = r.read(MEMO_LEN)
        return TokenTransferPayload(recipient, amount, memo)
    if tag == PayloadType.CONTRACT_CALL:
        version = r.read_u8()
        h = r.read(20)
        try:
            address = Address(version, h)
        except InvalidAddress as e:
            raise MalformedValue(f"invalid contract address: {e}", offset=start + 1) from e
        contract_name = _read_name(r, "contract name")
        function_name = _read_name(r, "function name")
        count = r.read_u32()
        if count > r.remaining:
            raise MalformedValue(
                f"argument count {count} exceeds remaining {r.remaining} bytes", offset=r.offset
            )
        args = tuple(_decode_value(r) for _ in range(count))
        return ContractCallPayload(address, contract_name, function_name, args)
    raise MalformedValue(f"unsupported payload type 0x{tag:02x}", offset=start)


def decode_payload(data: BytesLike, offset: int = 0) -> Tuple[Payload, int]:
    """Returns (payload, bytes_consumed)."""
    r = ByteReader(data, offset)
    payload = read_payload(r)
    return payload, r.offset - offset


__all__ = [
    "MEMO_LEN",
    "PayloadType",
    "TokenTransferPayload",
    "ContractCallPayload",
    "Payload",
    "token_transfer_payload",
    "contract_call_payload",
    "encode_payload",
    "read_payload",
    "decode_payload",
]
