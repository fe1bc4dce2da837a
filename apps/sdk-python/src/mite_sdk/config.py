"""Configuration objects for the mite Python SDK."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Optional

from .errors import ConfigurationError
from .models import ErrorCallback


@dataclass(frozen=True)
class ClientConfig:
    account: str = ""
    api_key: str = ""
    protocol: str = "https"
    domain: str = "mite.yo.lk"
    async_mode: bool = True
    timeout: float = 60.0
    error: Optional[ErrorCallback] = None

    def __post_init__(self) -> None:
        if not self.account or not self.api_key:
            raise ConfigurationError("account & api_key need to be set")

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientConfig":
        values: dict[str, Any] = {
            "account": os.environ.get("MITE_ACCOUNT", ""),
            "api_key": os.environ.get("MITE_API_KEY", ""),
            "protocol": os.environ.get("MITE_PROTOCOL", "https"),
            "domain": os.environ.get("MITE_DOMAIN", "mite.yo.lk"),
            "async_mode": os.environ.get("MITE_ASYNC", "true").strip().lower() not in ("0", "false", "no"),
            "timeout": float(os.environ.get("MITE_TIMEOUT", "60")),
        }
        values.update(overrides)
        return cls(**values)


__all__ = ["ClientConfig"]
