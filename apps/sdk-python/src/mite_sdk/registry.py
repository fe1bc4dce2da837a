"""In-flight request registry and response cache owned by one client."""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .models import NormalizedResponse, RequestOptions


@dataclass
class Waiter:
    options: RequestOptions
    future: "asyncio.Future[NormalizedResponse]"
    alarm: Optional[asyncio.TimerHandle] = None
    method: str = "GET"
    url: str = ""

    @property
    def settled(self) -> bool:
        return self.future.done()

    def disarm(self) -> None:
        if self.alarm is not None:
            self.alarm.cancel()
            self.alarm = None


class InFlightRegistry:
    """Tracks GET requests awaiting a response, keyed by full URL."""

    def __init__(self) -> None:
        self._loading: Dict[str, List[Waiter]] = {}
        self._lock = threading.Lock()

    def join(self, url: str, waiter: Waiter) -> bool:
        """Queue ``waiter`` behind a pending request; False when none is pending."""
        with self._lock:
            waiters = self._loading.get(url)
            if waiters is None:
                return False
            waiters.append(waiter)
            return True

    def open(self, url: str, waiter: Waiter) -> None:
        with self._lock:
            self._loading[url] = [waiter]

    def waiters(self, url: str) -> List[Waiter]:
        with self._lock:
            return self._loading.get(url, [])

    def close(self, url: str) -> List[Waiter]:
        with self._lock:
            return self._loading.pop(url, [])

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._loading

    def __len__(self) -> int:
        with self._lock:
            return len(self._loading)


class ResponseCache:
    """Last normalized response per URL. Entries live until cleared."""

    def __init__(self, base_url: str) -> None:
        self._base_url = base_url
        self._entries: Dict[str, NormalizedResponse] = {}
        self._lock = threading.Lock()

    def get(self, url: str) -> Optional[NormalizedResponse]:
        with self._lock:
            return self._entries.get(url)

    def store(self, url: str, response: NormalizedResponse) -> None:
        with self._lock:
            self._entries[url] = response

    def clear(self, kind: Any = None) -> None:
        """Drop everything, or only the entries belonging to one resource.

        ``kind`` may be a cached URL, a resource path such as ``"customers"``
        or a resource object exposing ``path``. Anything without a path is
        ignored.
        """
        with self._lock:
            if kind is None:
                self._entries.clear()
                return
            if isinstance(kind, str):
                path = kind
            else:
                path = getattr(kind, "path", None)
            if not path:
                return
            if path in self._entries:
                del self._entries[path]
                return
            for url in [url for url in self._entries if self._belongs_to(url, path)]:
                del self._entries[url]

    def _belongs_to(self, url: str, path: str) -> bool:
        if not url.startswith(self._base_url):
            return False
        resource = url[len(self._base_url):].split("?", 1)[0]
        if resource.endswith(".json"):
            resource = resource[: -len(".json")]
        return resource == path or resource.startswith(path + "/")

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["InFlightRegistry", "ResponseCache", "Waiter"]
