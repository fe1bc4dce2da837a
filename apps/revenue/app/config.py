"""Revenue service configuration utilities."""

from __future__ import annotations

import os
from dataclasses import dataclass

from mite_sdk import ClientConfig


@dataclass(frozen=True)
class RevenueSettings:
    account: str = ""
    api_key: str = ""
    protocol: str = "https"
    domain: str = "mite.yo.lk"
    timeout: float = 60.0
    number_delimiter: str = "."

    @classmethod
    def from_env(cls) -> "RevenueSettings":
        return cls(
            account=os.environ.get("MITE_ACCOUNT", ""),
            api_key=os.environ.get("MITE_API_KEY", ""),
            protocol=os.environ.get("MITE_PROTOCOL", "https"),
            domain=os.environ.get("MITE_DOMAIN", "mite.yo.lk"),
            timeout=float(os.environ.get("MITE_TIMEOUT", "60")),
            number_delimiter=os.environ.get("REVENUE_NUMBER_DELIMITER", "."),
        )

    def client_config(self) -> ClientConfig:
        return ClientConfig(
            account=self.account,
            api_key=self.api_key,
            protocol=self.protocol,
            domain=self.domain,
            async_mode=True,
            timeout=self.timeout,
        )


settings = RevenueSettings.from_env()

__all__ = ["RevenueSettings", "settings"]
