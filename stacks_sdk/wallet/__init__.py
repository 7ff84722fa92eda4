"""
Key boundary: a secp256k1 signer over raw private-key bytes. Mnemonic and
HD derivation live outside this package.
"""

from .signer import (
    Secp256k1Signer,
    SignerInfo,
    normalize_private_key,
    recover_public_key,
    verify_recoverable,
)

__all__ = [
    "Secp256k1Signer",
    "SignerInfo",
    "normalize_private_key",
    "recover_public_key",
    "verify_recoverable",
]
