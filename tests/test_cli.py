import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from stacks_sdk.cli.main import app, main, parse_literal
from stacks_sdk.clarity import buffer_cv, int_cv, none_cv, principal_cv, string_utf8_cv, uint_cv
from stacks_sdk.network import TESTNET
from stacks_sdk.tx import make_token_transfer

KEY = "edf9aee84d9b7abc145504dde6726c64f369d37ee34ded868fabd876c26570bc"
PUB = "03ef788b3830c00abe8f64f62dc32fc863bc0b2cafeb073b6c8e1c7657d9c2c3ab"

runner = CliRunner()
VECTORS = json.loads((Path(__file__).parent / "vectors" / "transactions.json").read_text())


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("STACKS_NETWORK", "STACKS_API_URL", "STACKS_TIMEOUT", "STACKS_PRIVATE_KEY"):
        monkeypatch.delenv(name, raising=False)


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.startswith("stacks-sdk 0.1.0")


def test_address_from_either_key():
    by_priv = runner.invoke(app, ["--network", "testnet", "address", "--private-key", KEY])
    by_pub = runner.invoke(app, ["--network", "testnet", "address", "--public-key", PUB])
    assert by_priv.exit_code == 0 and by_pub.exit_code == 0
    a, b = json.loads(by_priv.stdout), json.loads(by_pub.stdout)
    assert a == b
    assert a["address"].startswith("ST")
    assert a["network"] == "testnet"
    assert a["hash160"] == "15c31b8c1c11c515e244b75806bac48d1399c775"


def test_address_needs_exactly_one_key():
    result = runner.invoke(app, ["address"])
    assert result.exit_code != 0


def test_encode_and_decode_value():
    enc = runner.invoke(app, ["encode-value", "u100"])
    assert enc.exit_code == 0
    assert enc.stdout.strip() == "0x0100000000000000000000000000000064"

    dec = runner.invoke(app, ["decode-value", enc.stdout.strip()])
    assert dec.exit_code == 0
    assert json.loads(dec.stdout) == {"type": "uint", "repr": "u100"}


def test_decode_value_rejects_garbage():
    result = runner.invoke(app, ["decode-value", "0x0f"])
    assert result.exit_code == 1
    assert "error:" in result.output


def test_decode_tx():
    vec = VECTORS["sponsored_transfer_testnet"]
    result = runner.invoke(app, ["decode-tx", vec["tx"]])
    assert result.exit_code == 0
    info = json.loads(result.stdout)
    assert info["txid"] == vec["txid"]
    assert info["auth_type"] == "sponsored"
    assert info["sponsor"]["nonce"] == 55
    assert info["sponsor"]["fee"] == 123
    assert info["payload"] == {
        "type": "token_transfer",
        "recipient": "SP3FGQ8Z7JY9BWYZ5WM53E0M9NK7WHJF0691NZ159",
        "amount": 12345,
        "memo": "test memo",
    }


def test_decode_tx_rejects_multisig():
    result = runner.invoke(app, ["decode-tx", VECTORS["multisig_transfer_mainnet"]["tx"]])
    assert result.exit_code == 1
    assert "multisig" in result.output


def test_offline_transfer_matches_the_builder():
    args = [
        "--network", "testnet",
        "transfer",
        "--key", KEY,
        "--recipient", "ST000000000000000000002AMW42H",
        "--amount", "100000",
        "--memo", "test memo",
        "--fee", "180",
        "--nonce", "2",
    ]
    result = runner.invoke(app, args)
    assert result.exit_code == 0, result.output
    out = json.loads(result.stdout)

    tx = make_token_transfer(
        recipient="ST000000000000000000002AMW42H",
        amount=100_000,
        memo="test memo",
        sender_key=KEY,
        network=TESTNET,
        fee=180,
        nonce=2,
    )
    assert out == {"txid": tx.txid(), "tx": tx.to_hex(), "nonce": 2, "fee": 180}


def test_transfer_reads_the_key_from_the_environment(monkeypatch):
    monkeypatch.setenv("STACKS_PRIVATE_KEY", KEY)
    result = runner.invoke(app, ["transfer", "--recipient", "SP3FGQ8Z7JY9BWYZ5WM53E0M9NK7WHJF0691NZ159", "--amount", "1"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["tx"].startswith("0x00000000010400")


def test_transfer_with_bad_recipient():
    result = runner.invoke(app, ["transfer", "--key", KEY, "--recipient", "nope", "--amount", "1"])
    assert result.exit_code == 1


def test_unknown_network_is_a_usage_error():
    result = runner.invoke(app, ["--network", "devnet-42", "version"])
    assert result.exit_code != 0


@pytest.mark.parametrize(
    "text,value",
    [
        ("-7", int_cv(-7)),
        ("u7", uint_cv(7)),
        ("none", none_cv()),
        ("0xbeef", buffer_cv(b"\xbe\xef")),
        ('u"hi"', string_utf8_cv("hi")),
        ("ST000000000000000000002AMW42H.pox", principal_cv("ST000000000000000000002AMW42H.pox")),
    ],
)
def test_parse_literal(text, value):
    assert parse_literal(text) == value


def test_main_returns_exit_codes():
    assert main(["version"]) == 0
    assert main(["decode-value", "0x0f"]) == 1
