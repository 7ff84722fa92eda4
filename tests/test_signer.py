import pytest

from stacks_sdk.errors import SigningError
from stacks_sdk.network import MAINNET, TESTNET
from stacks_sdk.utils.hash import sha512_256
from stacks_sdk.wallet import Secp256k1Signer, normalize_private_key, recover_public_key, verify_recoverable

KEY = "edf9aee84d9b7abc145504dde6726c64f369d37ee34ded868fabd876c26570bc"
PUB = "03ef788b3830c00abe8f64f62dc32fc863bc0b2cafeb073b6c8e1c7657d9c2c3ab"
HASH160 = "15c31b8c1c11c515e244b75806bac48d1399c775"

SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


def test_public_key_and_hash():
    s = Secp256k1Signer(KEY)
    assert s.public_key.hex() == PUB
    assert s.hash160.hex() == HASH160
    # 33-byte form with the compressed-key flag is the same key
    assert Secp256k1Signer(KEY + "01").public_key.hex() == PUB
    assert Secp256k1Signer(bytes.fromhex(KEY)).public_key.hex() == PUB


def test_addresses_per_network():
    s = Secp256k1Signer(KEY)
    assert str(s.address(MAINNET)).startswith("SP")
    assert str(s.address(TESTNET)).startswith("ST")
    info = s.info(TESTNET)
    assert info.public_key == "0x" + PUB
    assert info.hash160 == "0x" + HASH160
    assert info.address == str(s.address(TESTNET))


def test_signatures_are_deterministic_low_s_and_recoverable():
    s = Secp256k1Signer(KEY)
    digest = sha512_256(b"stacks")
    sig = s.sign_recoverable(digest)
    assert len(sig) == 65
    assert sig == s.sign_recoverable(digest)
    assert sig[0] in (0, 1, 2, 3)
    assert int.from_bytes(sig[33:], "big") <= SECP256K1_N // 2
    assert recover_public_key(digest, sig).hex() == PUB
    assert verify_recoverable(digest, sig, bytes.fromhex(PUB))
    assert not verify_recoverable(sha512_256(b"other"), sig, bytes.fromhex(PUB))


@pytest.mark.parametrize("bad", ["00" * 31, "00" * 33, KEY + "02", "zz" * 32, "00" * 32])
def test_bad_private_keys(bad):
    with pytest.raises(SigningError):
        Secp256k1Signer(bad)


def test_digest_length_is_checked():
    with pytest.raises(SigningError):
        Secp256k1Signer(KEY).sign_recoverable(b"\x00" * 31)


def test_repr_hides_private_key():
    s = Secp256k1Signer(KEY)
    assert KEY not in repr(s)
    assert PUB in repr(s)
    assert normalize_private_key(KEY + "01") == bytes.fromhex(KEY)
