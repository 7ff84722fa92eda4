"""
SDK configuration: target network, node API URL, and HTTP retry/timeouts.

- Defaults come from the selected network preset.
- Every field can be overridden through ``STACKS_*`` environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .network import StacksNetwork
from .version import __version__

_DEFAULT_NETWORK = "mainnet"
_DEFAULT_UA = f"stacks-sdk-py/{__version__}"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v not in (None, "") else default


def _ensure_http(url: Optional[str]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not (lower.startswith("http://") or lower.startswith("https://")):
        raise ValueError(f"API URL must start with http:// or https://, got: {url!r}")
    return url.rstrip("/")


@dataclass(slots=True)
class SDKConfig:
    # Target chain
    network: str = _DEFAULT_NETWORK
    # Overrides the preset's API URL when set
    api_url: Optional[str] = None
    # HTTP behavior
    request_timeout: float = 10.0
    max_retries: int = 3
    backoff_factor: float = 1.8
    user_agent: str = field(default_factory=lambda: _DEFAULT_UA)

    def __post_init__(self) -> None:
        StacksNetwork.from_name(self.network)
        self.api_url = _ensure_http(self.api_url)
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be > 0")

    @classmethod
    def from_env(cls, prefix: str = "STACKS_") -> "SDKConfig":
        """
        Create config from environment variables:

        STACKS_NETWORK          mainnet | testnet | mocknet
        STACKS_API_URL          (http/https) overrides the preset URL
        STACKS_TIMEOUT          (float seconds)
        STACKS_MAX_RETRIES      (int)
        STACKS_BACKOFF          (float, exponential backoff factor)
        STACKS_USER_AGENT       (str)
        """
        return cls(
            network=_env(f"{prefix}NETWORK", _DEFAULT_NETWORK),
            api_url=_env(f"{prefix}API_URL"),
            request_timeout=float(_env(f"{prefix}TIMEOUT", "10.0")),
            max_retries=int(_env(f"{prefix}MAX_RETRIES", "3")),
            backoff_factor=float(_env(f"{prefix}BACKOFF", "1.8")),
            user_agent=_env(f"{prefix}USER_AGENT", _DEFAULT_UA),
        )

    @classmethod
    def with_overrides(cls, base: Optional["SDKConfig"] = None, **overrides: Any) -> "SDKConfig":
        """
        Build from an existing config plus keyword overrides. Unknown keys and
        ``None`` values are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data and v is not None})
        return cls(**data)

    def network_params(self) -> StacksNetwork:
        """The network preset, with ``api_url`` applied."""
        return StacksNetwork.from_name(self.network).with_api_url(self.api_url)

    def http_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "network": self.network,
            "api_url": self.api_url,
            "request_timeout": float(self.request_timeout),
            "max_retries": int(self.max_retries),
            "backoff_factor": float(self.backoff_factor),
            "user_agent": self.user_agent,
        }


__all__ = ["SDKConfig"]
