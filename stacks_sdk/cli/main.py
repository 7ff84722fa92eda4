"""
stacks_sdk.cli.main
===================

`stacks-sdk`: a small command-line interface over the SDK. Offline commands
cover addresses, Clarity values and transaction decoding. The network
commands (`nonce`, `call-read-only`, `transfer --broadcast`) talk to the
node API selected by ``--network`` / ``--api-url``.

Examples
--------
    $ stacks-sdk version
    $ stacks-sdk --network testnet address --private-key edf9...70bc
    $ stacks-sdk encode-value u100
    $ stacks-sdk decode-value 0x0100000000000000000000000000000064
    $ stacks-sdk --network testnet transfer --key $KEY --recipient ST2... --amount 1000
    $ stacks-sdk decode-tx 0x8080000000040015c3...
    $ stacks-sdk --network mocknet nonce ST2CY5V39NHDPWSXMW9QDT3HC3GD6Q6XX4CFRK9AG

Configuration
-------------
- Network  : `--network` or env `STACKS_NETWORK` (mainnet | testnet | mocknet)
- API URL  : `--api-url` or env `STACKS_API_URL` (default: the preset's URL)
- Timeout  : `--timeout` or env `STACKS_TIMEOUT` seconds (default: 10.0)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, List, NoReturn, Optional

import typer

from ..address import Address, is_valid
from ..clarity import codec
from ..clarity.types import (
    ClarityValue,
    buffer_cv,
    false_cv,
    int_cv,
    none_cv,
    principal_cv,
    string_ascii_cv,
    string_utf8_cv,
    true_cv,
    uint_cv,
)
from ..config import SDKConfig
from ..errors import StacksSdkError
from ..network import StacksNetwork
from ..rpc.http import StacksApiClient
from ..tx.build import make_token_transfer
from ..tx.transaction import Transaction
from ..utils.bytes import to_hex
from ..wallet.signer import Secp256k1Signer
from ..version import version as sdk_version

log = logging.getLogger(__name__)

# --- Typer app and global context --------------------------------------------

app = typer.Typer(
    name="stacks-sdk",
    help="Stacks SDK CLI: addresses, Clarity values, transactions and node queries.",
    no_args_is_help=True,
    add_completion=False,
)

__all__ = ["app", "main"]


@dataclass
class Ctx:
    config: SDKConfig

    @property
    def network(self) -> StacksNetwork:
        return self.config.network_params()

    def client(self) -> StacksApiClient:
        return StacksApiClient.from_config(self.config)


def _print_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def _fail(e: Exception) -> NoReturn:
    typer.echo(f"error: {e}", err=True)
    raise typer.Exit(code=1)


@app.callback()
def _root(
    ctx: typer.Context,
    network: Optional[str] = typer.Option(
        None, "--network", help="mainnet, testnet or mocknet.", envvar="STACKS_NETWORK"
    ),
    api_url: Optional[str] = typer.Option(
        None, "--api-url", help="Node API base URL.", envvar="STACKS_API_URL"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="HTTP timeout in seconds.", envvar="STACKS_TIMEOUT"
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Python logging level."),
) -> None:
    """Resolve the effective configuration for this process."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = SDKConfig.with_overrides(
            SDKConfig.from_env(), network=network, api_url=api_url, request_timeout=timeout
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    ctx.obj = Ctx(config=config)


# --- literals ----------------------------------------------------------------


def parse_literal(text: str) -> ClarityValue:
    """
    Parse a simple Clarity literal: ``1``, ``-7``, ``u1``, ``true``, ``false``,
    ``none``, ``0xbeef``, ``"ascii"``, ``u"utf8"`` or a principal.
    """
    s = text.strip()
    if s == "true":
        return true_cv()
    if s == "false":
        return false_cv()
    if s == "none":
        return none_cv()
    if s.startswith('u"') and s.endswith('"') and len(s) >= 3:
        return string_utf8_cv(s[2:-1])
    if s.startswith('"') and s.endswith('"') and len(s) >= 2:
        return string_ascii_cv(s[1:-1])
    if s.startswith("0x"):
        return buffer_cv(s)
    if s.startswith("u") and s[1:].isdigit():
        return uint_cv(int(s[1:]))
    if s.lstrip("-").isdigit():
        return int_cv(int(s))
    if is_valid(s.split(".", 1)[0]):
        return principal_cv(s)
    raise ValueError(f"unrecognised Clarity literal: {text!r}")


# --- offline commands --------------------------------------------------------


@app.command("version")
def version() -> None:
    """Print the SDK version."""
    typer.echo(f"stacks-sdk {sdk_version()}")


@app.command("address")
def address(
    ctx: typer.Context,
    public_key: Optional[str] = typer.Option(None, "--public-key", help="Compressed public key hex."),
    private_key: Optional[str] = typer.Option(None, "--private-key", help="Private key hex."),
) -> None:
    """Derive the single-sig address of a key on the selected network."""
    c: Ctx = ctx.obj
    if (public_key is None) == (private_key is None):
        raise typer.BadParameter("Provide exactly one of --public-key or --private-key")
    try:
        if private_key is not None:
            pub = Secp256k1Signer(private_key).public_key
        else:
            pub = bytes.fromhex(public_key.removeprefix("0x"))
        addr = Address.from_public_key(pub, c.network.address_version)
    except (StacksSdkError, ValueError) as e:
        _fail(e)
    _print_json(
        {
            "address": str(addr),
            "network": c.network.name,
            "public_key": pub.hex(),
            "hash160": addr.hash160.hex(),
        }
    )


@app.command("decode-value")
def decode_value(value_hex: str = typer.Argument(..., help="Serialized Clarity value (hex).")) -> None:
    """Decode a serialized Clarity value and print it in Clarity syntax."""
    try:
        value = codec.from_hex(value_hex)
    except StacksSdkError as e:
        _fail(e)
    _print_json({"type": value.type_id.name.lower(), "repr": str(value)})


@app.command("encode-value")
def encode_value(literal: str = typer.Argument(..., help='Literal such as u1, -5, true, 0xbeef, "hi".')) -> None:
    """Serialize a simple Clarity literal to hex."""
    try:
        value = parse_literal(literal)
    except (StacksSdkError, ValueError) as e:
        _fail(e)
    typer.echo(codec.to_hex(value))


@app.command("decode-tx")
def decode_tx(tx_hex: str = typer.Argument(..., help="Serialized transaction (hex).")) -> None:
    """Decode a serialized transaction and print a JSON summary."""
    try:
        tx = Transaction.deserialize(tx_hex)
    except StacksSdkError as e:
        _fail(e)
    _print_json(tx.to_dict())


# --- transaction and network commands ----------------------------------------


@app.command("transfer")
def transfer(
    ctx: typer.Context,
    key: str = typer.Option(..., "--key", help="Sender private key hex.", envvar="STACKS_PRIVATE_KEY"),
    recipient: str = typer.Option(..., "--recipient", help="Recipient principal."),
    amount: int = typer.Option(..., "--amount", help="Amount in micro-STX."),
    memo: Optional[str] = typer.Option(None, "--memo", help="Memo, up to 34 bytes."),
    fee: Optional[int] = typer.Option(None, "--fee", help="Fee in micro-STX (estimated when broadcasting)."),
    nonce: Optional[int] = typer.Option(None, "--nonce", help="Sender nonce (fetched when broadcasting)."),
    broadcast: bool = typer.Option(False, "--broadcast", help="Submit the signed transaction."),
) -> None:
    """Build, sign and optionally broadcast an STX transfer."""
    c: Ctx = ctx.obj
    network = c.network
    try:
        signer = Secp256k1Signer(key)
        tx = make_token_transfer(
            recipient=recipient,
            amount=amount,
            memo=memo,
            public_key=signer.public_key,
            network=network,
        )
        api = c.client() if broadcast else None
        try:
            if api is not None:
                if nonce is None:
                    nonce = api.get_nonce(str(signer.address(network)))
                if fee is None:
                    fee = api.estimate_fee(tx)
            tx.set_nonce(nonce or 0)
            tx.set_fee(fee or 0)
            tx.sign(signer)
            out = {"txid": tx.txid(), "tx": tx.to_hex(), "nonce": tx.nonce, "fee": tx.fee}
            if api is not None:
                out["broadcast"] = api.broadcast(tx)
        finally:
            if api is not None:
                api.close()
    except StacksSdkError as e:
        _fail(e)
    _print_json(out)


@app.command("nonce")
def nonce(ctx: typer.Context, address: str = typer.Argument(..., help="Account address.")) -> None:
    """Print the next nonce the node expects from ADDRESS."""
    c: Ctx = ctx.obj
    try:
        with c.client() as api:
            typer.echo(str(api.get_nonce(address)))
    except StacksSdkError as e:
        _fail(e)


@app.command("call-read-only")
def call_read_only(
    ctx: typer.Context,
    contract_address: str = typer.Argument(..., help="Contract deployer address."),
    contract_name: str = typer.Argument(..., help="Contract name."),
    function_name: str = typer.Argument(..., help="Read-only function name."),
    args: Optional[List[str]] = typer.Argument(None, help="Arguments as serialized value hex."),
    sender: Optional[str] = typer.Option(None, "--sender", help="Sender address for the call."),
) -> None:
    """Call a read-only contract function and print its result."""
    c: Ctx = ctx.obj
    try:
        values = [codec.from_hex(a) for a in args or []]
        with c.client() as api:
            result = api.call_read_only(contract_address, contract_name, function_name, values, sender=sender)
    except StacksSdkError as e:
        _fail(e)
    _print_json({"repr": str(result), "hex": to_hex(result.serialize())})


# --- Entrypoints --------------------------------------------------------------


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI. Returns an integer exit code."""
    try:
        rv = app(prog_name="stacks-sdk", standalone_mode=False, args=argv)
    except typer.Exit as e:
        return int(e.exit_code)
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        return 1
    return rv if isinstance(rv, int) else 0
