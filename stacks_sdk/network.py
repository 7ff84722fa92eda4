"""
Network parameters: transaction version, chain id, address versions and the
default node API URL for each known Stacks network.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, Optional

from .address import AddressVersion


class TransactionVersion(IntEnum):
    MAINNET = 0x00
    TESTNET = 0x80


class ChainId(IntEnum):
    MAINNET = 0x0000_0001
    TESTNET = 0x8000_0000


@dataclass(frozen=True)
class StacksNetwork:
    name: str
    version: TransactionVersion
    chain_id: int
    address_version: int
    multisig_address_version: int
    api_url: str

    @property
    def is_mainnet(self) -> bool:
        return self.version == TransactionVersion.MAINNET

    def with_api_url(self, api_url: Optional[str]) -> "StacksNetwork":
        if not api_url:
            return self
        return replace(self, api_url=api_url.rstrip("/"))

    @classmethod
    def from_name(cls, name: str) -> "StacksNetwork":
        try:
            return _PRESETS[name.strip().lower()]
        except KeyError:
            raise ValueError(
                f"unknown network {name!r}; expected one of {sorted(_PRESETS)}"
            ) from None


MAINNET = StacksNetwork(
    name="mainnet",
    version=TransactionVersion.MAINNET,
    chain_id=ChainId.MAINNET,
    address_version=AddressVersion.MAINNET_SINGLE_SIG,
    multisig_address_version=AddressVersion.MAINNET_MULTI_SIG,
    api_url="https://api.mainnet.hiro.so",
)

TESTNET = StacksNetwork(
    name="testnet",
    version=TransactionVersion.TESTNET,
    chain_id=ChainId.TESTNET,
    address_version=AddressVersion.TESTNET_SINGLE_SIG,
    multisig_address_version=AddressVersion.TESTNET_MULTI_SIG,
    api_url="https://api.testnet.hiro.so",
)

# Local devnet: testnet parameters against a local API.
MOCKNET = replace(TESTNET, name="mocknet", api_url="http://localhost:3999")

_PRESETS: Dict[str, StacksNetwork] = {n.name: n for n in (MAINNET, TESTNET, MOCKNET)}

__all__ = [
    "TransactionVersion",
    "ChainId",
    "StacksNetwork",
    "MAINNET",
    "TESTNET",
    "MOCKNET",
]
