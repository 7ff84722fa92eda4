"""
High-level transaction builders.

Both helpers take keyword arguments only and return an UNSIGNED
:class:`~stacks_sdk.tx.transaction.Transaction` built through its validated
constructor. The origin is identified by its public key, so keys can stay in
an external wallet until :meth:`Transaction.sign` is called; passing
``sender_key`` instead signs the transaction before it is returned.

Examples
--------
>>> tx = make_token_transfer(
...     recipient="ST000000000000000000002AMW42H",
...     amount=100_000,
...     memo="test memo",
...     sender_key=key_hex,
...     network=TESTNET,
... )
>>> tx.serialize().hex()
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from ..address import Address
from ..clarity.types import ClarityValue, PrincipalCV
from ..errors import InvalidValue
from ..network import MAINNET, StacksNetwork
from ..post_conditions import PostCondition, PostConditionMode
from ..utils.bytes import BytesLike, ensure_bytes
from ..wallet.signer import Secp256k1Signer
from .auth import Authorization, HashMode, SingleSigSpendingCondition
from .payload import contract_call_payload, token_transfer_payload
from .transaction import AnchorMode, PrivateKeyLike, Transaction

log = logging.getLogger(__name__)

KeyLike = Union[BytesLike, str]


def _origin(
    public_key: Optional[KeyLike],
    signer: Optional[Secp256k1Signer],
    *,
    nonce: int,
    fee: int,
    hash_mode: HashMode,
) -> SingleSigSpendingCondition:
    if signer is not None:
        pub = signer.public_key
    elif public_key is not None:
        try:
            pub = ensure_bytes(public_key)
        except (TypeError, ValueError) as e:
            raise InvalidValue(f"invalid public key: {e}", field="public_key") from e
        if len(pub) != 33 or pub[0] not in (0x02, 0x03):
            raise InvalidValue("public key must be 33-byte compressed secp256k1", field="public_key")
    else:
        raise InvalidValue("either public_key or sender_key is required", field="public_key")
    return SingleSigSpendingCondition.from_public_key(pub, nonce=nonce, fee=fee, hash_mode=hash_mode)


def _signer(sender_key: Optional[PrivateKeyLike]) -> Optional[Secp256k1Signer]:
    if sender_key is None or isinstance(sender_key, Secp256k1Signer):
        return sender_key
    return Secp256k1Signer(sender_key)


def _finish(
    payload,
    origin: SingleSigSpendingCondition,
    signer: Optional[Secp256k1Signer],
    *,
    network: StacksNetwork,
    sponsored: bool,
    anchor_mode: AnchorMode,
    post_condition_mode: PostConditionMode,
    post_conditions: Iterable[PostCondition],
) -> Transaction:
    auth = Authorization.sponsored(origin) if sponsored else Authorization.standard(origin)
    tx = Transaction.new(
        payload,
        auth,
        network,
        anchor_mode=anchor_mode,
        post_condition_mode=post_condition_mode,
        post_conditions=post_conditions,
    )
    if signer is not None:
        tx.sign(signer)
    return tx


def make_token_transfer(
    *,
    recipient: Union[str, PrincipalCV],
    amount: int,
    public_key: Optional[KeyLike] = None,
    sender_key: Optional[PrivateKeyLike] = None,
    network: StacksNetwork = MAINNET,
    nonce: int = 0,
    fee: int = 0,
    memo: Union[str, BytesLike, None] = None,
    anchor_mode: AnchorMode = AnchorMode.ANY,
    post_condition_mode: PostConditionMode = PostConditionMode.DENY,
    post_conditions: Iterable[PostCondition] = (),
    sponsored: bool = False,
    hash_mode: HashMode = HashMode.P2PKH,
) -> Transaction:
    """Build an STX transfer of `amount` micro-STX to `recipient`."""
    signer = _signer(sender_key)
    origin = _origin(public_key, signer, nonce=nonce, fee=fee, hash_mode=hash_mode)
    payload = token_transfer_payload(recipient, amount, memo)
    log.debug("token transfer to=%s amount=%d network=%s", payload.recipient, amount, network.name)
    return _finish(
        payload,
        origin,
        signer,
        network=network,
        sponsored=sponsored,
        anchor_mode=anchor_mode,
        post_condition_mode=post_condition_mode,
        post_conditions=post_conditions,
    )


def make_contract_call(
    *,
    contract_address: Union[str, Address],
    contract_name: str,
    function_name: str,
    function_args: Iterable[ClarityValue] = (),
    public_key: Optional[KeyLike] = None,
    sender_key: Optional[PrivateKeyLike] = None,
    network: StacksNetwork = MAINNET,
    nonce: int = 0,
    fee: int = 0,
    anchor_mode: AnchorMode = AnchorMode.ANY,
    post_condition_mode: PostConditionMode = PostConditionMode.DENY,
    post_conditions: Iterable[PostCondition] = (),
    sponsored: bool = False,
    hash_mode: HashMode = HashMode.P2PKH,
) -> Transaction:
    """Build a call of ``contract_address.contract_name::function_name``."""
    signer = _signer(sender_key)
    origin = _origin(public_key, signer, nonce=nonce, fee=fee, hash_mode=hash_mode)
    payload = contract_call_payload(contract_address, contract_name, function_name, function_args)
    log.debug("contract call %s::%s network=%s", payload.contract_id, function_name, network.name)
    return _finish(
        payload,
        origin,
        signer,
        network=network,
        sponsored=sponsored,
        anchor_mode=anchor_mode,
        post_condition_mode=post_condition_mode,
        post_conditions=post_conditions,
    )


__all__ = ["make_token_transfer", "make_contract_call"]
