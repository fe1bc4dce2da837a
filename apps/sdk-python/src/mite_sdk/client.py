"""Python client for the mite time-tracking API."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from .config import ClientConfig
from .gateway import RequestGateway
from .models import OptionsLike
from .query import base_url
from .registry import InFlightRegistry, ResponseCache
from .resources import Bookmarks, Customers, Projects, Services, TimeEntries, Tracker, Users
from .transport import Transport


class ResourceInterface:
    """Account lookups and resource facades bound to one request gateway."""

    def __init__(self, gateway: RequestGateway) -> None:
        self._gateway = gateway
        self.time_entries = TimeEntries(gateway)
        self.tracker = Tracker(gateway)
        self.bookmarks = Bookmarks(gateway)
        self.customers = Customers(gateway)
        self.projects = Projects(gateway)
        self.services = Services(gateway)
        self.users = Users(gateway)

    def account(self, options: OptionsLike = None) -> Any:
        return self._gateway.get("account", None, options)

    def myself(self, options: OptionsLike = None) -> Any:
        return self._gateway.get("myself", None, options)

    def clear_cache(self, kind: Any = None) -> None:
        self._gateway.clear_cache(kind)


class MiteClient(ResourceInterface):
    """Entry point: ``client.customers.find(1, on_success)``.

    ``client.cache`` exposes the same resources, but GETs on it are answered
    from the response cache when an entry for the URL exists. Both variants
    share one in-flight registry and one cache.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = Transport(config, transport=transport, async_transport=async_transport)
        self._registry = InFlightRegistry()
        self._cache = ResponseCache(base_url(config))
        super().__init__(self._gateway_for(use_cache=False))
        self.cache = ResourceInterface(self._gateway_for(use_cache=True))

    @classmethod
    def connect(cls, **options: Any) -> "MiteClient":
        """Build a client from keyword options (``account=..., api_key=...``)."""
        if "async" in options:
            options["async_mode"] = options.pop("async")
        return cls(ClientConfig(**options))

    def _gateway_for(self, *, use_cache: bool) -> RequestGateway:
        return RequestGateway(self._config, self._transport, self._registry, self._cache, use_cache=use_cache)

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def drain(self) -> None:
        await self._transport.drain()

    def __enter__(self) -> "MiteClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def __aenter__(self) -> "MiteClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def close(self) -> None:
        self._transport.close()

    async def aclose(self) -> None:
        await self._transport.aclose()


__all__ = ["MiteClient", "ResourceInterface"]
