"""
stacks_sdk.tx.transaction
=========================

The Stacks transaction envelope, its signing life cycle and its wire form.

Wire layout
-----------
    version:u8 chain_id:u32 authorization anchor_mode:u8
    post_condition_mode:u8 post_conditions payload

Life cycle
----------
A transaction moves UNSIGNED -> SIGNED -> SERIALIZED:

- ``set_nonce`` / ``set_fee`` are accepted only while UNSIGNED;
- ``sign`` turns an UNSIGNED transaction into a SIGNED one;
- ``serialize`` requires a signature and caches the bytes it returns;
- ``sponsor`` re-signs the sponsor slot of a signed sponsored transaction
  and drops the cached bytes;
- ``clear_signatures`` goes back to UNSIGNED so fields can change again.

Breaking these rules raises :class:`SerializationStateError`, so a
transaction can never be broadcast with a signature over stale fields.

Sighash
-------
The initial sighash is ``sha512_256`` of the transaction serialized with the
origin's nonce, fee and signature zeroed and any sponsor replaced by an
all-zero sentinel. From there the chain in :mod:`stacks_sdk.tx.auth` runs:
the origin signs, and its postsign digest seeds the sponsor's signature.

The transaction id is ``sha512_256`` of the final serialization.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum, IntEnum
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from ..errors import InvalidValue, MalformedValue, SerializationStateError, SigningError
from ..network import StacksNetwork, TransactionVersion
from ..post_conditions import (
    PostCondition,
    PostConditionMode,
    encode_post_conditions,
    normalize_post_conditions,
    read_post_conditions,
)
from ..utils.bytes import U32_MAX, BytesLike, ByteReader, ensure_bytes, to_hex, u8, u32
from ..utils.hash import sha512_256
from ..wallet.signer import Secp256k1Signer
from .auth import (
    EMPTY_SIGNATURE,
    AuthType,
    Authorization,
    HashMode,
    SingleSigSpendingCondition,
    next_signature,
    next_verification,
    read_authorization,
    signer_hash,
)
from .payload import ContractCallPayload, Payload, TokenTransferPayload, encode_payload, read_payload

log = logging.getLogger(__name__)

PrivateKeyLike = Union[BytesLike, str, Secp256k1Signer]


class AnchorMode(IntEnum):
    ON_CHAIN_ONLY = 0x01
    OFF_CHAIN_ONLY = 0x02
    ANY = 0x03


class TxState(str, Enum):
    UNSIGNED = "unsigned"
    SIGNED = "signed"
    SERIALIZED = "serialized"


def _as_signer(key: PrivateKeyLike) -> Secp256k1Signer:
    if isinstance(key, Secp256k1Signer):
        return key
    return Secp256k1Signer(key)


def _coerce(enum_cls, value: Any, name: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidValue(f"invalid {name}: {value!r}", field=name) from None


class Transaction:
    """
    A single-sig Stacks transaction.

    Build one with :meth:`new` (or the helpers in :mod:`stacks_sdk.tx.build`),
    then ``sign`` and ``serialize``::

        tx = Transaction.new(payload, auth, TESTNET)
        tx.set_nonce(3)
        tx.set_fee(180)
        tx.sign(private_key)
        raw = tx.serialize()
        txid = tx.txid()
    """

    __slots__ = (
        "version",
        "chain_id",
        "auth",
        "anchor_mode",
        "post_condition_mode",
        "post_conditions",
        "payload",
        "_state",
        "_serialized",
    )

    def __init__(
        self,
        *,
        version: TransactionVersion,
        chain_id: int,
        auth: Authorization,
        payload: Payload,
        anchor_mode: AnchorMode = AnchorMode.ANY,
        post_condition_mode: PostConditionMode = PostConditionMode.DENY,
        post_conditions: Iterable[PostCondition] = (),
    ) -> None:
        self.version = _coerce(TransactionVersion, version, "version")
        if isinstance(chain_id, bool) or not isinstance(chain_id, int) or not 0 <= chain_id <= U32_MAX:
            raise InvalidValue(f"chain_id must be a u32, got {chain_id!r}", field="chain_id")
        self.chain_id = chain_id
        if not isinstance(auth, Authorization):
            raise InvalidValue("auth must be an Authorization", field="auth")
        if not isinstance(payload, (TokenTransferPayload, ContractCallPayload)):
            raise InvalidValue(f"unsupported payload {type(payload).__name__}", field="payload")
        # Owned copy; the caller's Authorization is never mutated.
        self.auth = auth.copy()
        self.payload = payload
        self.anchor_mode = _coerce(AnchorMode, anchor_mode, "anchor_mode")
        self.post_condition_mode = _coerce(PostConditionMode, post_condition_mode, "post_condition_mode")
        self.post_conditions: Tuple[PostCondition, ...] = normalize_post_conditions(post_conditions)
        self._state = TxState.SIGNED if auth.origin.is_signed else TxState.UNSIGNED
        self._serialized: Optional[bytes] = None

    @classmethod
    def new(
        cls,
        payload: Payload,
        auth: Authorization,
        network: StacksNetwork,
        *,
        anchor_mode: AnchorMode = AnchorMode.ANY,
        post_condition_mode: PostConditionMode = PostConditionMode.DENY,
        post_conditions: Iterable[PostCondition] = (),
    ) -> "Transaction":
        """Validated constructor taking version and chain id from `network`."""
        if auth.origin.is_signed:
            raise InvalidValue("a new transaction must start unsigned", field="auth")
        return cls(
            version=network.version,
            chain_id=network.chain_id,
            auth=auth,
            payload=payload,
            anchor_mode=anchor_mode,
            post_condition_mode=post_condition_mode,
            post_conditions=post_conditions,
        )

    # --- state ----------------------------------------------------------------

    @property
    def state(self) -> TxState:
        return self._state

    @property
    def is_sponsored(self) -> bool:
        return self.auth.is_sponsored

    @property
    def nonce(self) -> int:
        return self.auth.origin.nonce

    @property
    def fee(self) -> int:
        return self.auth.origin.fee

    def _require(self, operation: str, *allowed: TxState) -> None:
        if self._state not in allowed:
            raise SerializationStateError(
                f"cannot {operation} a {self._state.value} transaction",
                state=self._state.value,
                operation=operation,
            )

    def set_nonce(self, nonce: int) -> None:
        self._require("set_nonce", TxState.UNSIGNED)
        self.auth.origin = replace(self.auth.origin, nonce=nonce)

    def set_fee(self, fee: int) -> None:
        self._require("set_fee", TxState.UNSIGNED)
        self.auth.origin = replace(self.auth.origin, fee=fee)

    def clear_signatures(self) -> None:
        """Drop every signature (and any attached sponsor) and return to UNSIGNED."""
        self.auth.origin = replace(self.auth.origin, signature=EMPTY_SIGNATURE)
        if self.auth.sponsor is not None:
            self.auth.sponsor = SingleSigSpendingCondition.sentinel()
        self._state = TxState.UNSIGNED
        self._serialized = None

    # --- signing --------------------------------------------------------------

    def initial_sighash(self) -> bytes:
        cleared = Transaction(
            version=self.version,
            chain_id=self.chain_id,
            auth=self.auth.for_initial_sighash(),
            payload=self.payload,
            anchor_mode=self.anchor_mode,
            post_condition_mode=self.post_condition_mode,
            post_conditions=self.post_conditions,
        )
        return sha512_256(cleared._encode())

    def sign(self, private_key: PrivateKeyLike) -> None:
        """
        Sign as the origin. The key must hash to the signer already committed
        in the authorization, otherwise :class:`SigningError` is raised.
        """
        self._require("sign", TxState.UNSIGNED)
        signer = _as_signer(private_key)
        origin = self.auth.origin
        got = signer_hash(signer.public_key, origin.hash_mode)
        if got != origin.signer:
            raise SigningError(
                "private key does not match the transaction origin",
                expected=to_hex(origin.signer),
                got=to_hex(got),
            )
        signature, _ = next_signature(self.initial_sighash(), AuthType.STANDARD, origin, signer)
        self.auth.origin = replace(origin, signature=signature)
        self._state = TxState.SIGNED
        self._serialized = None
        log.debug("signed tx origin=%s nonce=%d fee=%d", to_hex(origin.signer), origin.nonce, origin.fee)

    def sponsor(
        self,
        private_key: PrivateKeyLike,
        *,
        fee: int,
        nonce: int,
        hash_mode: HashMode = HashMode.P2PKH,
    ) -> None:
        """
        Attach a sponsor to a signed sponsored transaction. The sponsor pays
        `fee` from its own account at `nonce`. Calling again replaces the
        previous sponsor.
        """
        if not self.auth.is_sponsored:
            raise SerializationStateError(
                "transaction is not sponsored", state=self._state.value, operation="sponsor"
            )
        self._require("sponsor", TxState.SIGNED, TxState.SERIALIZED)
        signer = _as_signer(private_key)
        condition = SingleSigSpendingCondition.from_public_key(
            signer.public_key, nonce=nonce, fee=fee, hash_mode=hash_mode
        )
        origin_postsign = next_verification(self.initial_sighash(), AuthType.STANDARD, self.auth.origin)
        condition.signature, _ = next_signature(origin_postsign, AuthType.SPONSORED, condition, signer)
        self.auth.sponsor = condition
        self._state = TxState.SIGNED
        self._serialized = None
        log.debug("sponsored tx sponsor=%s nonce=%d fee=%d", to_hex(condition.signer), nonce, fee)

    def verify(self) -> bool:
        """
        Check the origin signature and, when present, the sponsor signature.
        Returns True or raises :class:`SigningError`.
        """
        self._require("verify", TxState.SIGNED, TxState.SERIALIZED)
        postsign = next_verification(self.initial_sighash(), AuthType.STANDARD, self.auth.origin)
        sponsor = self.auth.sponsor
        if sponsor is not None and not sponsor.is_sentinel:
            next_verification(postsign, AuthType.SPONSORED, sponsor)
        return True

    # --- encoding -------------------------------------------------------------

    def _encode(self) -> bytes:
        return (
            u8(self.version)
            + u32(self.chain_id)
            + self.auth.serialize()
            + u8(self.anchor_mode)
            + u8(self.post_condition_mode)
            + encode_post_conditions(self.post_conditions)
            + encode_payload(self.payload)
        )

    def serialize(self) -> bytes:
        self._require("serialize", TxState.SIGNED, TxState.SERIALIZED)
        if self._serialized is None:
            self._serialized = self._encode()
            self._state = TxState.SERIALIZED
            log.debug(
                "serialized tx len=%d txid=%s...", len(self._serialized), sha512_256(self._serialized).hex()[:16]
            )
        return self._serialized

    def to_hex(self) -> str:
        return to_hex(self.serialize())

    def byte_length(self) -> int:
        """Serialized size. Signatures are fixed-width, so this holds before signing too."""
        if self._serialized is not None:
            return len(self._serialized)
        return len(self._encode())

    def txid_bytes(self) -> bytes:
        return sha512_256(self.serialize())

    def txid(self) -> str:
        """Transaction id as 64 lowercase hex characters, no prefix."""
        return self.txid_bytes().hex()

    @classmethod
    def deserialize(cls, data: Union[BytesLike, str]) -> "Transaction":
        """
        Parse a full transaction. Raises :class:`MalformedValue` on truncation,
        unknown tags or trailing bytes.
        """
        try:
            raw = ensure_bytes(data)
        except (TypeError, ValueError) as e:
            raise MalformedValue(f"invalid transaction bytes: {e}") from e
        r = ByteReader(raw)
        raw_version = r.read_u8()
        try:
            version = TransactionVersion(raw_version)
        except ValueError:
            raise MalformedValue(f"unknown transaction version 0x{raw_version:02x}", offset=0) from None
        chain_id = r.read_u32()
        auth = read_authorization(r)
        mode_at = r.offset
        raw_anchor = r.read_u8()
        raw_pc_mode = r.read_u8()
        try:
            anchor_mode = AnchorMode(raw_anchor)
            pc_mode = PostConditionMode(raw_pc_mode)
        except ValueError as e:
            raise MalformedValue(str(e), offset=mode_at) from None
        post_conditions = read_post_conditions(r)
        payload = read_payload(r)
        if not r.at_end():
            raise MalformedValue(f"{r.remaining} trailing bytes after transaction", offset=r.offset)
        tx = cls(
            version=version,
            chain_id=chain_id,
            auth=auth,
            payload=payload,
            anchor_mode=anchor_mode,
            post_condition_mode=pc_mode,
            post_conditions=post_conditions,
        )
        log.debug("decoded tx version=%s chain_id=0x%08x size=%d", version.name, chain_id, len(raw))
        return tx

    # --- display --------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly summary (used by the CLI)."""
        origin = self.auth.origin
        out: Dict[str, Any] = {
            "state": self._state.value,
            "version": self.version.name.lower(),
            "chain_id": f"0x{self.chain_id:08x}",
            "auth_type": self.auth.auth_type.name.lower(),
            "origin": _condition_dict(origin),
            "anchor_mode": self.anchor_mode.name.lower(),
            "post_condition_mode": self.post_condition_mode.name.lower(),
            "post_conditions": len(self.post_conditions),
            "payload": _payload_dict(self.payload),
        }
        if self.auth.sponsor is not None:
            out["sponsor"] = _condition_dict(self.auth.sponsor)
        if self._state is not TxState.UNSIGNED:
            out["txid"] = self.txid()
        return out

    def __repr__(self) -> str:
        return (
            f"Transaction(state={self._state.value}, version={self.version.name}, "
            f"auth={self.auth.auth_type.name}, payload={type(self.payload).__name__})"
        )


def _condition_dict(c: SingleSigSpendingCondition) -> Dict[str, Any]:
    return {
        "hash_mode": c.hash_mode.name,
        "signer": c.signer.hex(),
        "nonce": c.nonce,
        "fee": c.fee,
        "signature": c.signature.hex(),
    }


def _payload_dict(p: Payload) -> Dict[str, Any]:
    if isinstance(p, TokenTransferPayload):
        return {
            "type": "token_transfer",
            "recipient": str(p.recipient),
            "amount": p.amount,
            "memo": p.memo_text,
        }
    return {
        "type": "contract_call",
        "contract": p.contract_id,
        "function": p.function_name,
        "args": [str(a) for a in p.function_args],
    }


__all__ = ["AnchorMode", "TxState", "Transaction"]
