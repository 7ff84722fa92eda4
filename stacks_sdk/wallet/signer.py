"""
stacks_sdk.wallet.signer
========================

secp256k1 signer: the key boundary between an external wallet and the
transaction signer.

This module wraps `coincurve` (libsecp256k1) and produces the recoverable
signature layout used on the wire::

    signature = recovery_id (1) || r (32) || s (32)

libsecp256k1 signs deterministically (RFC 6979) and always emits low-S
signatures, so the same key and digest give byte-identical output.

Notes
-----
- Digests are signed as-is (``hasher=None``); callers pass the 32-byte
  presign hash, never a message to be hashed again.
- Private keys are accepted as 32 raw bytes, or 33 bytes whose last byte is
  the ``0x01`` "compressed public key" flag used by Stacks wallets.
- Only compressed public keys are produced.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from coincurve import PrivateKey, PublicKey

from ..address import Address
from ..errors import SigningError
from ..network import StacksNetwork
from ..utils.bytes import BytesLike, ensure_bytes, to_hex
from ..utils.hash import hash160

SIGNATURE_LEN = 65
DIGEST_LEN = 32

__all__ = [
    "SIGNATURE_LEN",
    "SignerInfo",
    "Secp256k1Signer",
    "normalize_private_key",
    "recover_public_key",
    "verify_recoverable",
]


@dataclass(frozen=True)
class SignerInfo:
    """
    Lightweight description of a signer.

    Attributes
    ----------
    public_key : str
        Compressed public key, 0x-hex.
    hash160 : str
        RIPEMD160(SHA256(public_key)), 0x-hex.
    address : str
        c32check address for the requested version.
    """

    public_key: str
    hash160: str
    address: str


def normalize_private_key(key: Union[BytesLike, str]) -> bytes:
    try:
        raw = ensure_bytes(key)
    except (TypeError, ValueError) as e:
        raise SigningError(f"private key is not valid hex/bytes: {e}") from e
    if len(raw) == 33 and raw[-1] == 0x01:
        raw = raw[:32]
    if len(raw) != 32:
        raise SigningError(f"private key must be 32 bytes (or 33 with 0x01 suffix), got {len(raw)}")
    return raw


def _check_digest(digest: bytes) -> bytes:
    d = ensure_bytes(digest)
    if len(d) != DIGEST_LEN:
        raise SigningError(f"digest must be {DIGEST_LEN} bytes, got {len(d)}")
    return d


def _to_coincurve_layout(signature: bytes) -> bytes:
    sig = ensure_bytes(signature)
    if len(sig) != SIGNATURE_LEN:
        raise SigningError(f"signature must be {SIGNATURE_LEN} bytes, got {len(sig)}")
    return sig[1:] + sig[:1]


def recover_public_key(digest: BytesLike, signature: BytesLike) -> bytes:
    """Recover the compressed public key that produced `signature` over `digest`."""
    d = _check_digest(digest)
    try:
        pub = PublicKey.from_signature_and_message(_to_coincurve_layout(signature), d, hasher=None)
    except (ValueError, TypeError) as e:
        raise SigningError(f"public key recovery failed: {e}") from e
    return pub.format(compressed=True)


def verify_recoverable(digest: BytesLike, signature: BytesLike, public_key: BytesLike) -> bool:
    try:
        return recover_public_key(digest, signature) == PublicKey(ensure_bytes(public_key)).format(
            compressed=True
        )
    except SigningError:
        return False


class Secp256k1Signer:
    """Holds one private key; signs presign digests with recoverable ECDSA."""

    __slots__ = ("_sk", "_pub")

    def __init__(self, private_key: Union[BytesLike, str]) -> None:
        secret = normalize_private_key(private_key)
        try:
            self._sk = PrivateKey(secret)
        except ValueError as e:
            raise SigningError(f"invalid secp256k1 private key: {e}") from e
        self._pub = self._sk.public_key.format(compressed=True)

    @classmethod
    def from_private_key(cls, private_key: Union[BytesLike, str]) -> "Secp256k1Signer":
        return cls(private_key)

    @property
    def public_key(self) -> bytes:
        return self._pub

    @property
    def hash160(self) -> bytes:
        return hash160(self._pub)

    def address(self, network: Union[StacksNetwork, int]) -> Address:
        """Single-sig address on `network` (a preset or a raw address version)."""
        version = network.address_version if isinstance(network, StacksNetwork) else network
        return Address.from_public_key(self._pub, version)

    def info(self, version: Union[StacksNetwork, int]) -> SignerInfo:
        return SignerInfo(
            public_key=to_hex(self._pub),
            hash160=to_hex(self.hash160),
            address=str(self.address(version)),
        )

    def sign_recoverable(self, digest: BytesLike) -> bytes:
        """Sign a 32-byte digest; returns ``recid || r || s``."""
        d = _check_digest(digest)
        try:
            sig = self._sk.sign_recoverable(d, hasher=None)
        except (ValueError, TypeError) as e:
            raise SigningError(f"secp256k1 signing failed: {e}") from e
        return sig[64:] + sig[:64]

    def __repr__(self) -> str:
        return f"Secp256k1Signer(public_key={to_hex(self._pub)})"
