"""
stacks_sdk: build, sign and serialize Stacks blockchain transactions.

Quick start::

    from stacks_sdk import TESTNET, make_token_transfer

    tx = make_token_transfer(
        recipient="ST000000000000000000002AMW42H",
        amount=100_000,
        memo="test memo",
        public_key=pub,
        network=TESTNET,
    )
    tx.set_nonce(0)
    tx.set_fee(180)
    tx.sign(private_key)
    raw, txid = tx.serialize(), tx.txid()

Subpackages
-----------
- ``clarity``  Clarity values and their wire codec
- ``tx``       payloads, authorization, the Transaction state machine, builders
- ``wallet``   secp256k1 signer
- ``rpc``      HTTP client for the node API
- ``cli``      the ``stacks-sdk`` command line
"""

from .address import Address, AddressVersion, derive_address, parse_address
from .config import SDKConfig
from .errors import (
    ApiError,
    InvalidAddress,
    InvalidPostCondition,
    InvalidValue,
    MalformedValue,
    SerializationStateError,
    SigningError,
    StacksSdkError,
)
from .network import MAINNET, MOCKNET, TESTNET, StacksNetwork
from .post_conditions import (
    FungibleConditionCode,
    NonFungibleConditionCode,
    PostConditionMode,
    ft_post_condition,
    nft_post_condition,
    stx_post_condition,
)
from .tx import (
    AnchorMode,
    HashMode,
    Transaction,
    TxState,
    make_contract_call,
    make_token_transfer,
)
from .version import __version__
from .wallet import Secp256k1Signer

__all__ = [
    "__version__",
    "Address",
    "AddressVersion",
    "derive_address",
    "parse_address",
    "SDKConfig",
    "StacksSdkError",
    "MalformedValue",
    "InvalidValue",
    "InvalidAddress",
    "InvalidPostCondition",
    "SigningError",
    "SerializationStateError",
    "ApiError",
    "StacksNetwork",
    "MAINNET",
    "TESTNET",
    "MOCKNET",
    "PostConditionMode",
    "FungibleConditionCode",
    "NonFungibleConditionCode",
    "stx_post_condition",
    "ft_post_condition",
    "nft_post_condition",
    "AnchorMode",
    "HashMode",
    "Transaction",
    "TxState",
    "make_token_transfer",
    "make_contract_call",
    "Secp256k1Signer",
]
