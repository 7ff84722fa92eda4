"""
Clarity values: the typed variants (``types``) and their canonical wire
codec (``codec``).

Example:
    from stacks_sdk.clarity import tuple_cv, uint_cv, encode, decode
    raw = encode(tuple_cv({"amount": uint_cv(10)}))
    value, used = decode(raw)
"""

from .codec import MAX_DEPTH, decode, decode_exact, decode_from, encode, from_hex, to_hex
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
    PrincipalCV,
    SomeCV,
    StandardPrincipalCV,
    StringAsciiCV,
    StringUtf8CV,
    TupleCV,
    UIntCV,
    bool_cv,
    buffer_cv,
    contract_principal_cv,
    err_cv,
    false_cv,
    int_cv,
    list_cv,
    none_cv,
    ok_cv,
    optional_cv,
    principal_cv,
    some_cv,
    standard_principal_cv,
    string_ascii_cv,
    string_utf8_cv,
    true_cv,
    tuple_cv,
    uint_cv,
)

__all__ = [
    "MAX_DEPTH",
    "encode",
    "decode",
    "decode_exact",
    "decode_from",
    "to_hex",
    "from_hex",
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
