"""
Transactions: payloads, authorization, the signing state machine and
high-level builders.
"""

from .auth import AuthType, Authorization, HashMode, PubKeyEncoding, SingleSigSpendingCondition
from .build import make_contract_call, make_token_transfer
from .payload import (
    ContractCallPayload,
    PayloadType,
    TokenTransferPayload,
    contract_call_payload,
    decode_payload,
    encode_payload,
    token_transfer_payload,
)
from .transaction import AnchorMode, Transaction, TxState

__all__ = [
    "AnchorMode",
    "AuthType",
    "Authorization",
    "ContractCallPayload",
    "HashMode",
    "PayloadType",
    "PubKeyEncoding",
    "SingleSigSpendingCondition",
    "TokenTransferPayload",
    "Transaction",
    "TxState",
    "contract_call_payload",
    "decode_payload",
    "encode_payload",
    "make_contract_call",
    "make_token_transfer",
    "token_transfer_payload",
]
