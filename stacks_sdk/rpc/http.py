"""
HTTP client for a Stacks node / API service (sync, httpx).

- Covers what a wallet needs around signing: account nonce, fee rate,
  broadcast, and read-only contract calls.
- Retries on transient transport failures and 429/502/503/504 with
  exponential backoff and jitter; any other HTTP error is raised at once
  as :class:`~stacks_sdk.errors.ApiError`.
- Accepts an ``httpx`` transport so tests can plug in ``httpx.MockTransport``.

Example:
    from stacks_sdk.rpc.http import StacksApiClient
    with StacksApiClient("https://api.testnet.hiro.so") as api:
        nonce = api.get_nonce("ST2CY5V39NHDPWSXMW9QDT3HC3GD6Q6XX4CFRK9AG")
        tx.set_nonce(nonce)
        tx.set_fee(api.estimate_fee(tx.byte_length()))
        tx.sign(key)
        txid = api.broadcast(tx)
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Union

import httpx

from ..address import parse_address
from ..clarity.codec import from_hex as _value_from_hex, to_hex as _value_to_hex
from ..clarity.types import ClarityValue
from ..config import SDKConfig
from ..errors import ApiError, MalformedValue
from ..network import StacksNetwork
from ..tx.transaction import Transaction
from ..utils.bytes import BytesLike, ensure_bytes
from ..version import __version__ as SDK_VERSION

log = logging.getLogger(__name__)

JSON = Union[dict, list, str, int, float, bool, None]


def _is_retriable_http(status: int) -> bool:
    # Typical transient HTTP statuses: 429/502/503/504
    return status in (429, 502, 503, 504)


def _jitter_backoff(base: float, factor: float, attempt: int, jitter: float) -> float:
    # Exponential backoff with jitter in [0, jitter]
    return base * (factor ** max(attempt - 1, 0)) + random.random() * jitter


def _error_message(r: httpx.Response) -> tuple[str, JSON]:
    """Pull a readable reason out of an error response."""
    try:
        body: JSON = r.json()
    except ValueError:
        body = r.text[:512]
    if isinstance(body, dict):
        parts = [str(body[k]) for k in ("error", "reason", "message") if body.get(k)]
        if parts:
            return ": ".join(parts), body
    if isinstance(body, str) and body:
        return body, body
    return f"HTTP {r.status_code}", body


@dataclass
class StacksApiClient:
    """Synchronous client for the node's ``/v2`` HTTP API."""

    base_url: str
    timeout: float = 10.0
    max_retries: int = 3
    backoff_base: float = 0.15
    backoff_factor: float = 1.8
    backoff_jitter: float = 0.2
    headers: Optional[Mapping[str, str]] = None
    transport: Optional[httpx.BaseTransport] = None
    _client: Any = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        merged: Dict[str, str] = {
            "Accept": "application/json",
            "User-Agent": f"stacks-sdk-py/{SDK_VERSION}",
        }
        if self.headers:
            merged.update(dict(self.headers))
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=merged,
            transport=self.transport,
        )

    @classmethod
    def from_config(
        cls, config: SDKConfig, *, transport: Optional[httpx.BaseTransport] = None
    ) -> "StacksApiClient":
        return cls(
            base_url=config.network_params().api_url,
            timeout=config.request_timeout,
            max_retries=config.max_retries,
            backoff_factor=config.backoff_factor,
            headers=config.http_headers(),
            transport=transport,
        )

    @classmethod
    def for_network(cls, network: StacksNetwork, **kwargs: Any) -> "StacksApiClient":
        return cls(base_url=network.api_url, **kwargs)

    # --- context manager -------------------------------------------------

    def __enter__(self) -> "StacksApiClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    # --- public API ------------------------------------------------------

    def get_account_info(self, address: str) -> Dict[str, Any]:
        """``GET /v2/accounts/{address}``: balance, locked amount and next nonce."""
        parse_address(address)
        body = self._get_json(f"/v2/accounts/{address}", params={"proof": 0})
        if not isinstance(body, dict) or "nonce" not in body:
            raise ApiError("malformed account response", url=f"/v2/accounts/{address}", body=body)
        return body

    def get_nonce(self, address: str) -> int:
        """Next nonce the node expects from `address`."""
        return int(self.get_account_info(address)["nonce"])

    def get_fee_rate(self) -> int:
        """Fee rate in micro-STX per byte, ``GET /v2/fees/transfer``."""
        body = self._get_json("/v2/fees/transfer")
        if isinstance(body, bool) or not isinstance(body, int):
            raise ApiError("malformed fee rate response", url="/v2/fees/transfer", body=body)
        return body

    def estimate_fee(self, size: Union[int, Transaction]) -> int:
        """Fee for a transaction of `size` bytes at the current rate."""
        byte_length = size.byte_length() if isinstance(size, Transaction) else int(size)
        return byte_length * self.get_fee_rate()

    def broadcast(self, tx: Union[Transaction, BytesLike, str]) -> str:
        """
        Submit a signed transaction (``POST /v2/transactions``). Returns the
        txid the node reports; a rejection raises ApiError with its reason.
        """
        raw = tx.serialize() if isinstance(tx, Transaction) else ensure_bytes(tx)
        r = self._send(
            "POST",
            "/v2/transactions",
            content=raw,
            headers={"Content-Type": "application/octet-stream"},
        )
        if r.status_code >= 400:
            message, body = _error_message(r)
            raise ApiError(
                f"transaction rejected: {message}",
                status=r.status_code,
                url=str(r.request.url),
                body=body,
            )
        txid = r.text.strip().strip('"')
        if isinstance(tx, Transaction) and txid != tx.txid():
            log.warning("node returned txid %s, expected %s", txid, tx.txid())
        log.info("broadcast tx %s (%d bytes)", txid, len(raw))
        return txid

    def call_read_only(
        self,
        contract_address: str,
        contract_name: str,
        function_name: str,
        args: Iterable[ClarityValue] = (),
        *,
        sender: Optional[str] = None,
    ) -> ClarityValue:
        """Evaluate a read-only function on the node and decode its result value."""
        path = f"/v2/contracts/call-read/{contract_address}/{contract_name}/{function_name}"
        payload = {
            "sender": sender or contract_address,
            "arguments": [_value_to_hex(a) for a in args],
        }
        body = self._post_json(path, payload)
        if not isinstance(body, dict):
            raise ApiError("malformed read-only response", url=path, body=body)
        if not body.get("okay"):
            raise ApiError(f"read-only call failed: {body.get('cause', 'unknown cause')}", url=path, body=body)
        try:
            return _value_from_hex(body["result"])
        except (KeyError, MalformedValue) as e:
            raise ApiError(f"undecodable read-only result: {e}", url=path, body=body) from e

    # --- internals -------------------------------------------------------

    def _get_json(self, path: str, params: Optional[Mapping[str, Any]] = None) -> JSON:
        return self._decode(self._send("GET", path, params=params))

    def _post_json(self, path: str, payload: Mapping[str, Any]) -> JSON:
        return self._decode(self._send("POST", path, json=dict(payload)))

    def _decode(self, r: httpx.Response) -> JSON:
        if r.status_code >= 400:
            message, body = _error_message(r)
            raise ApiError(message, status=r.status_code, url=str(r.request.url), body=body)
        try:
            return r.json()
        except ValueError as e:
            raise ApiError(
                "non-JSON response", status=r.status_code, url=str(r.request.url), body=r.text[:256]
            ) from e

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        last: Optional[str] = None
        for attempt in range(1, self.max_retries + 2):  # N retries -> N+1 attempts
            try:
                r = self._client.request(method, path, **kwargs)
            except httpx.TransportError as e:
                last = f"{type(e).__name__}: {e}"
            else:
                if not _is_retriable_http(r.status_code):
                    return r
                last = f"HTTP {r.status_code}"
            if attempt > self.max_retries:
                break
            delay = _jitter_backoff(self.backoff_base, self.backoff_factor, attempt, self.backoff_jitter)
            log.warning("%s %s failed (%s), retry %d in %.2fs", method, path, last, attempt, delay)
            time.sleep(delay)
        raise ApiError(
            f"request failed after {self.max_retries + 1} attempts",
            url=f"{self.base_url}{path}",
            body=last,
        )


__all__ = ["StacksApiClient"]
