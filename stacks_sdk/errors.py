"""
Typed error classes for the Stacks SDK.

Every failure the codec, address, post-condition, transaction and network
layers can report has its own class so callers can catch specific failure
modes while still being able to catch the base `StacksSdkError`.

None of these are retried internally; retries only happen inside
:mod:`stacks_sdk.rpc.http` for transient transport failures.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

__all__ = [
    "StacksSdkError",
    "MalformedValue",
    "InvalidValue",
    "InvalidAddress",
    "InvalidPostCondition",
    "SigningError",
    "SerializationStateError",
    "ApiError",
]


class StacksSdkError(Exception):
    """Base class for all SDK errors."""


@dataclass(slots=True)
class MalformedValue(StacksSdkError):
    """
    Raised while decoding bytes that are structurally invalid: truncated
    input, a length prefix running past the buffer, an unknown type tag,
    non-ASCII bytes in an ASCII string, or trailing garbage.
    """

    message: str
    offset: Optional[int] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        at = f" @{self.offset}" if self.offset is not None else ""
        return f"MalformedValue{at}: {self.message}"


@dataclass(slots=True)
class InvalidValue(StacksSdkError):
    """
    Raised at construction time when a value is semantically invalid
    (integer out of range, oversized buffer, duplicate tuple key, bad name).
    """

    message: str
    field: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = f" [{self.field}]" if self.field else ""
        return f"InvalidValue{where}: {self.message}"


@dataclass(slots=True)
class InvalidAddress(StacksSdkError):
    """Raised on c32check checksum, alphabet, version or length failures."""

    message: str
    address: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        addr = f" addr={self.address!r}" if self.address is not None else ""
        return f"InvalidAddress{addr}: {self.message}"


@dataclass(slots=True)
class InvalidPostCondition(StacksSdkError):
    """Raised when a condition code does not belong to its variant's code set."""

    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"InvalidPostCondition: {self.message}"


@dataclass(slots=True)
class SigningError(StacksSdkError):
    """
    Raised when a key does not match the signer hash embedded in a spending
    condition, when the signature scheme itself fails, or when verification
    recovers a different signer.
    """

    message: str
    expected: Optional[str] = None
    got: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        bits = [self.message]
        if self.expected or self.got:
            bits.append(f"expected={self.expected} got={self.got}")
        return "SigningError: " + " ".join(bits)


@dataclass(slots=True)
class SerializationStateError(StacksSdkError):
    """Raised when a Transaction operation is invoked in the wrong lifecycle state."""

    message: str
    state: Optional[str] = None
    operation: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = []
        if self.operation:
            where.append(f"op={self.operation}")
        if self.state:
            where.append(f"state={self.state}")
        where_s = (" [" + ", ".join(where) + "]") if where else ""
        return f"SerializationStateError{where_s}: {self.message}"


@dataclass(slots=True)
class ApiError(StacksSdkError):
    """
    Raised by the HTTP client when the node API rejects a request, returns an
    unexpected body, or cannot be reached after retries.
    """

    message: str
    status: Optional[int] = None
    url: Optional[str] = None
    body: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        parts = [f"ApiError: {self.message}"]
        if self.status is not None:
            parts.append(f"http={self.status}")
        if self.url:
            parts.append(f"url={self.url}")
        if self.body is not None:
            parts.append(f"body={self.body!r}")
        return " ".join(parts)
