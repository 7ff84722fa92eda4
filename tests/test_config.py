import pytest

from stacks_sdk.config import SDKConfig
from stacks_sdk.network import MAINNET, TESTNET

ENV_VARS = (
    "STACKS_NETWORK",
    "STACKS_API_URL",
    "STACKS_TIMEOUT",
    "STACKS_MAX_RETRIES",
    "STACKS_BACKOFF",
    "STACKS_USER_AGENT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    cfg = SDKConfig.from_env()
    assert cfg.network == "mainnet"
    assert cfg.api_url is None
    assert cfg.network_params() == MAINNET
    assert cfg.http_headers()["User-Agent"].startswith("stacks-sdk-py/")


def test_from_env(monkeypatch):
    monkeypatch.setenv("STACKS_NETWORK", "testnet")
    monkeypatch.setenv("STACKS_API_URL", "http://localhost:20443/")
    monkeypatch.setenv("STACKS_TIMEOUT", "2.5")
    monkeypatch.setenv("STACKS_MAX_RETRIES", "0")
    monkeypatch.setenv("STACKS_USER_AGENT", "")
    cfg = SDKConfig.from_env()
    assert cfg.api_url == "http://localhost:20443"
    assert cfg.request_timeout == 2.5
    assert cfg.max_retries == 0
    # empty values fall back to defaults
    assert cfg.user_agent.startswith("stacks-sdk-py/")

    params = cfg.network_params()
    assert params.chain_id == TESTNET.chain_id
    assert params.api_url == "http://localhost:20443"


def test_custom_prefix(monkeypatch):
    monkeypatch.setenv("APP_NETWORK", "mocknet")
    assert SDKConfig.from_env(prefix="APP_").network_params().api_url == "http://localhost:3999"


def test_with_overrides_ignores_none_and_unknown_keys():
    base = SDKConfig(network="testnet", request_timeout=3.0)
    cfg = SDKConfig.with_overrides(base, api_url=None, request_timeout=7.0, colour="blue")
    assert cfg.network == "testnet"
    assert cfg.request_timeout == 7.0
    assert base.request_timeout == 3.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"network": "devnet-42"},
        {"api_url": "ftp://node"},
        {"max_retries": -1},
        {"request_timeout": 0},
    ],
)
def test_validation(kwargs):
    with pytest.raises(ValueError):
        SDKConfig(**kwargs)


def test_to_dict_round_trips():
    cfg = SDKConfig(network="testnet", api_url="https://node.example", max_retries=5)
    data = cfg.to_dict()
    assert data["api_url"] == "https://node.example"
    assert SDKConfig(**data) == cfg
