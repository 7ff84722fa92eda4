import pytest

from stacks_sdk.address import (
    Address,
    AddressVersion,
    c32_decode,
    c32_encode,
    c32check_decode,
    derive_address,
    is_valid,
    parse_address,
)
from stacks_sdk.errors import InvalidAddress
from stacks_sdk.network import MAINNET, MOCKNET, TESTNET, StacksNetwork

VECTORS = [
    # (address, version, hash160 hex)
    ("SP2JXKMSH007NPYAQHKJPQMAQYAD90NQGTVJVQ02B", 22, "a5d9d331000f5b79578ce56bd157f29a9056f0d6"),
    ("STB44HYPYAT2BB2QE513NSP81HTMYWBJP02HPGK6", 26, "164247d6f2b425ac5771423ae6c80c754f7172b0"),
    ("SP3FGQ8Z7JY9BWYZ5WM53E0M9NK7WHJF0691NZ159", 22, "df0ba3e79792be7be5e50a370289accfc8c9e032"),
    ("ST000000000000000000002AMW42H", 26, "00" * 20),
]


@pytest.mark.parametrize("address,version,h160", VECTORS)
def test_known_addresses(address, version, h160):
    assert parse_address(address) == (version, bytes.fromhex(h160))
    assert derive_address(bytes.fromhex(h160), version) == address


def test_c32_keeps_leading_zero_bytes():
    raw = b"\x00\x00\x01\x02"
    text = c32_encode(raw)
    assert text.startswith("00")
    assert c32_decode(text) == raw
    assert c32_encode(b"") == ""


def test_c32_decode_is_lenient_about_lookalikes_and_case():
    canonical = "SP2JXKMSH007NPYAQHKJPQMAQYAD90NQGTVJVQ02B"
    # O -> 0 and lowercase are accepted
    assert c32check_decode(canonical.replace("0", "O")) == c32check_decode(canonical)
    assert c32check_decode(canonical.lower()) == c32check_decode(canonical)


def test_bad_checksum_is_rejected():
    good = "SP2JXKMSH007NPYAQHKJPQMAQYAD90NQGTVJVQ02B"
    bad = good[:-1] + ("C" if good[-1] != "C" else "D")
    assert is_valid(good)
    assert not is_valid(bad)
    with pytest.raises(InvalidAddress):
        parse_address(bad)


@pytest.mark.parametrize("text", ["", "XP2JXKMSH007NPYAQHKJPQMAQYAD90NQGTVJVQ02B", "SP2JXKMSH0U7NPYAQ", "SP!"])
def test_garbage_is_rejected(text):
    with pytest.raises(InvalidAddress):
        parse_address(text)


def test_wrong_hash_length_is_rejected():
    with pytest.raises(InvalidAddress):
        derive_address(b"\x01" * 19, AddressVersion.MAINNET_SINGLE_SIG)
    with pytest.raises(InvalidAddress):
        Address(22, b"\x00" * 21)


def test_address_dataclass():
    a = Address.parse("STB44HYPYAT2BB2QE513NSP81HTMYWBJP02HPGK6")
    assert a.version == AddressVersion.TESTNET_SINGLE_SIG
    assert str(a) == a.c32 == "STB44HYPYAT2BB2QE513NSP81HTMYWBJP02HPGK6"

    pub = bytes.fromhex("03ef788b3830c00abe8f64f62dc32fc863bc0b2cafeb073b6c8e1c7657d9c2c3ab")
    derived = Address.from_public_key(pub, MAINNET.address_version)
    assert derived.hash160.hex() == "15c31b8c1c11c515e244b75806bac48d1399c775"
    assert str(derived).startswith("SP")
    assert Address.parse(str(derived)) == derived


def test_network_presets():
    assert MAINNET.version == 0x00 and MAINNET.chain_id == 0x00000001
    assert TESTNET.version == 0x80 and TESTNET.chain_id == 0x80000000
    assert MAINNET.is_mainnet and not TESTNET.is_mainnet
    assert MOCKNET.chain_id == TESTNET.chain_id
    assert MOCKNET.api_url == "http://localhost:3999"
    assert StacksNetwork.from_name(" Testnet ") is TESTNET
    assert TESTNET.with_api_url("http://node:20443/").api_url == "http://node:20443"
    assert TESTNET.with_api_url(None) is TESTNET
    with pytest.raises(ValueError):
        StacksNetwork.from_name("devnet-42")
