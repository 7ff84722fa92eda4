"""
stacks_sdk.tx.auth
==================

Transaction authorization: who pays and who signs.

    standard  = 0x04 origin_condition
    sponsored = 0x05 origin_condition sponsor_condition

    condition = hash_mode:u8 signer:hash160 nonce:u64 fee:u64 key_encoding:u8 signature[65]

Only single-signature conditions are built here (P2PKH and P2WPKH).

Sighash chain
-------------
Every signature covers a *presign* digest derived from the running sighash,
and yields the *postsign* digest the next signer (the sponsor) starts from::

    presign  = sha512_256(sighash || auth_flag || fee:u64 || nonce:u64)
    postsign = sha512_256(presign || key_encoding || signature)

The origin always signs with flag 0x04 and a sponsor with 0x05.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Tuple

from ..errors import InvalidValue, MalformedValue, SigningError
from ..utils.bytes import U64_MAX, BytesLike, ByteReader, ensure_bytes, to_hex, u8, u64
from ..utils.hash import hash160, sha512_256
from ..wallet.signer import SIGNATURE_LEN, Secp256k1Signer, recover_public_key

EMPTY_SIGNATURE = bytes(SIGNATURE_LEN)


class AuthType(IntEnum):
    STANDARD = 0x04
    SPONSORED = 0x05


class HashMode(IntEnum):
    P2PKH = 0x00
    P2SH = 0x01
    P2WPKH = 0x02
    P2WSH = 0x03


class PubKeyEncoding(IntEnum):
    COMPRESSED = 0x00
    UNCOMPRESSED = 0x01


SINGLE_SIG_MODES = (HashMode.P2PKH, HashMode.P2WPKH)


def signer_hash(public_key: BytesLike, hash_mode: HashMode = HashMode.P2PKH) -> bytes:
    """The 20-byte signer field a spending condition commits to for `public_key`."""
    pub = ensure_bytes(public_key)
    if hash_mode == HashMode.P2PKH:
        return hash160(pub)
    if hash_mode == HashMode.P2WPKH:
        return hash160(b"\x00\x14" + hash160(pub))
    raise InvalidValue(f"hash mode {HashMode(hash_mode).name} is not single-sig", field="hash_mode")


def _require_u64(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= U64_MAX:
        raise InvalidValue(f"{name} must be a u64, got {value!r}", field=name)
    return value


@dataclass(slots=True)
class SingleSigSpendingCondition:
    hash_mode: HashMode
    signer: bytes
    nonce: int = 0
    fee: int = 0
    key_encoding: PubKeyEncoding = PubKeyEncoding.COMPRESSED
    signature: bytes = field(default=EMPTY_SIGNATURE)

    def __post_init__(self) -> None:
        try:
            self.hash_mode = HashMode(self.hash_mode)
            self.key_encoding = PubKeyEncoding(self.key_encoding)
        except ValueError as e:
            raise InvalidValue(str(e), field="spending_condition") from e
        if self.hash_mode not in SINGLE_SIG_MODES:
            raise InvalidValue(
                f"hash mode {self.hash_mode.name} is not single-sig", field="hash_mode"
            )
        if len(self.signer) != 20:
            raise InvalidValue("signer must be a 20-byte hash160", field="signer")
        if len(self.signature) != SIGNATURE_LEN:
            raise InvalidValue(f"signature must be {SIGNATURE_LEN} bytes", field="signature")
        self.signer = bytes(self.signer)
        self.signature = bytes(self.signature)
        _require_u64(self.nonce, "nonce")
        _require_u64(self.fee, "fee")

    @classmethod
    def from_public_key(
        cls,
        public_key: BytesLike,
        *,
        nonce: int = 0,
        fee: int = 0,
        hash_mode: HashMode = HashMode.P2PKH,
    ) -> "SingleSigSpendingCondition":
        return cls(hash_mode, signer_hash(public_key, hash_mode), nonce, fee)

    @classmethod
    def sentinel(cls) -> "SingleSigSpendingCondition":
        """All-zero placeholder that stands in for a sponsor not yet attached."""
        return cls(HashMode.P2PKH, bytes(20))

    @property
    def is_signed(self) -> bool:
        return self.signature != EMPTY_SIGNATURE

    @property
    def is_sentinel(self) -> bool:
        return self.signer == bytes(20) and not self.is_signed

    def cleared(self) -> "SingleSigSpendingCondition":
        """Copy with nonce, fee and signature zeroed, as hashed for the initial sighash."""
        return SingleSigSpendingCondition(self.hash_mode, self.signer, 0, 0, self.key_encoding)

    def serialize(self) -> bytes:
        return (
            u8(self.hash_mode)
            + self.signer
            + u64(self.nonce)
            + u64(self.fee)
            + u8(self.key_encoding)
            + self.signature
        )


@dataclass(slots=True)
class Authorization:
    """Standard when `sponsor` is None, sponsored otherwise."""

    origin: SingleSigSpendingCondition
    sponsor: Optional[SingleSigSpendingCondition] = None

    @classmethod
    def standard(cls, origin: SingleSigSpendingCondition) -> "Authorization":
        return cls(origin)

    @classmethod
    def sponsored(
        cls,
        origin: SingleSigSpendingCondition,
        sponsor: Optional[SingleSigSpendingCondition] = None,
    ) -> "Authorization":
        return cls(origin, sponsor or SingleSigSpendingCondition.sentinel())

    @property
    def auth_type(self) -> AuthType:
        return AuthType.STANDARD if self.sponsor is None else AuthType.SPONSORED

    @property
    def is_sponsored(self) -> bool:
        return self.sponsor is not None

    def for_initial_sighash(self) -> "Authorization":
        sponsor = None if self.sponsor is None else SingleSigSpendingCondition.sentinel()
        return Authorization(self.origin.cleared(), sponsor)

    def copy(self) -> "Authorization":
        return copy.deepcopy(self)

    def serialize(self) -> bytes:
        out = u8(self.auth_type) + self.origin.serialize()
        if self.sponsor is not None:
            out += self.sponsor.serialize()
        return out


# --- decoding ----------------------------------------------------------------


def read_spending_condition(r: ByteReader) -> SingleSigSpendingCondition:
    start = r.offset
    raw_mode = r.read_u8()
    try:
        mode = HashMode(raw_mode)
    except ValueError:
        raise MalformedValue(f"unknown hash mode 0x{raw_mode:02x}", offset=start) from None
    if mode not in SINGLE_SIG_MODES:
        raise MalformedValue("multisig spending conditions are not supported", offset=start)
    signer = r.read(20)
    nonce = r.read_u64()
    fee = r.read_u64()
    enc_at = r.offset
    raw_enc = r.read_u8()
    try:
        encoding = PubKeyEncoding(raw_enc)
    except ValueError:
        raise MalformedValue(f"unknown key encoding 0x{raw_enc:02x}", offset=enc_at) from None
    signature = r.read(SIGNATURE_LEN)
    return SingleSigSpendingCondition(mode, signer, nonce, fee, encoding, signature)


def read_authorization(r: ByteReader) -> Authorization:
    start = r.offset
    raw = r.read_u8()
    if raw == AuthType.STANDARD:
        return Authorization(read_spending_condition(r))
    if raw == AuthType.SPONSORED:
        origin = read_spending_condition(r)
        return Authorization(origin, read_spending_condition(r))
    raise MalformedValue(f"unknown authorization type 0x{raw:02x}", offset=start)


# --- sighash chain -----------------------------------------------------------


def presign_hash(sighash: bytes, auth_type: AuthType, fee: int, nonce: int) -> bytes:
    return sha512_256(sighash + u8(auth_type) + u64(fee) + u64(nonce))


def postsign_hash(presign: bytes, key_encoding: PubKeyEncoding, signature: bytes) -> bytes:
    return sha512_256(presign + u8(key_encoding) + signature)


def next_signature(
    sighash: bytes,
    auth_type: AuthType,
    condition: SingleSigSpendingCondition,
    signer: Secp256k1Signer,
) -> Tuple[bytes, bytes]:
    """Sign one step of the chain. Returns (signature, next_sighash)."""
    presign = presign_hash(sighash, auth_type, condition.fee, condition.nonce)
    signature = signer.sign_recoverable(presign)
    return signature, postsign_hash(presign, condition.key_encoding, signature)


def next_verification(
    sighash: bytes,
    auth_type: AuthType,
    condition: SingleSigSpendingCondition,
) -> bytes:
    """
    Check one step of the chain: recover the signer from the stored signature
    and compare its hash with the condition's signer field. Returns the
    next sighash.
    """
    if not condition.is_signed:
        raise SigningError("spending condition carries no signature")
    presign = presign_hash(sighash, auth_type, condition.fee, condition.nonce)
    public_key = recover_public_key(presign, condition.signature)
    got = signer_hash(public_key, condition.hash_mode)
    if got != condition.signer:
        raise SigningError(
            "recovered signer does not match spending condition",
            expected=to_hex(condition.signer),
            got=to_hex(got),
        )
    return postsign_hash(presign, condition.key_encoding, condition.signature)


__all__ = [
    "EMPTY_SIGNATURE",
    "AuthType",
    "HashMode",
    "PubKeyEncoding",
    "signer_hash",
    "SingleSigSpendingCondition",
    "Authorization",
    "read_spending_condition",
    "read_authorization",
    "presign_hash",
    "postsign_hash",
    "next_signature",
    "next_verification",
]
