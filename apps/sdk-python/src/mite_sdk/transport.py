"""HTTP transport for the mite API: blocking and non-blocking entry points."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Set, Tuple, Union

import httpx

from .config import ClientConfig
from .models import ErrorCallback, NormalizedResponse, RequestOptions

logger = logging.getLogger("mite_sdk.transport")

Outcome = Union[httpx.Response, httpx.HTTPError]


def parse_json(text: str) -> Any:
    if not text or text.isspace():
        return {}
    return json.loads(text)


def default_error_handler(response: Any, message: str) -> None:
    status = getattr(response, "status_code", None)
    logger.error("mite request failed status=%s message=%s", status, message)


def classify(outcome: Outcome) -> NormalizedResponse:
    """Turn a response (or transport failure) into a normalized outcome.

    A response counts as success only when the status is 2xx and the body is
    non-empty. Malformed JSON in a success body raises ``json.JSONDecodeError``.
    """
    if isinstance(outcome, httpx.HTTPError):
        message = "timeout" if isinstance(outcome, httpx.TimeoutException) else (str(outcome) or "error")
        return NormalizedResponse(error=(outcome, message), complete=(outcome,))

    if outcome.is_success:
        if outcome.text:
            return NormalizedResponse(success=(parse_json(outcome.text),), complete=(outcome,))
        return NormalizedResponse(error=(outcome, "error"), complete=(outcome,))
    return NormalizedResponse(error=(outcome, outcome.text or "error"), complete=(outcome,))


def deliver(normalized: NormalizedResponse, options: RequestOptions, default_error: ErrorCallback) -> None:
    if normalized.success is not None:
        if options.success is not None:
            options.success(*normalized.success)
    elif normalized.error is not None:
        (options.error or default_error)(*normalized.error)

    if options.complete is not None and normalized.complete is not None:
        options.complete(*normalized.complete)


class Transport:
    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._client = httpx.Client(timeout=config.timeout, transport=transport)
        self._async_client = httpx.AsyncClient(timeout=config.timeout, transport=async_transport)
        self._tasks: Set[asyncio.Task] = set()

    def _headers(self) -> Dict[str, str]:
        return {
            "X-Requested-With": "XMLHttpRequest",
            "X-MiteApiKey": self._config.api_key,
            "X-MiteAccount": self._config.account,
        }

    def _prepare(self, data: Any) -> Tuple[Optional[Union[str, bytes]], Dict[str, str]]:
        headers = self._headers()
        if data is None or isinstance(data, (str, bytes)):
            return data, headers
        if isinstance(data, (Mapping, list, tuple)):
            headers["Content-Type"] = "application/json"
            return json.dumps(data, separators=(",", ":")), headers
        return str(data), headers

    def timeout_for(self, options: RequestOptions) -> float:
        return options.timeout or self._config.timeout

    def is_async(self, options: RequestOptions) -> bool:
        if isinstance(options.async_mode, bool):
            return options.async_mode
        return self._config.async_mode

    def send(self, method: str, url: str, options: RequestOptions) -> httpx.Response:
        content, headers = self._prepare(options.data)
        logger.debug("%s %s (blocking)", method, url)
        return self._client.request(method, url, content=content, headers=headers, timeout=self.timeout_for(options))

    def fetch(self, method: str, url: str, options: RequestOptions) -> Any:
        """Issue the request and block until the parsed body is available.

        The body is parsed whatever the status, so an API error document such
        as ``{"error": "Record not found"}`` comes back to the caller as data.
        """
        return parse_json(self.send(method, url, options).text)

    def build_request(self, method: str, url: str) -> httpx.Request:
        """A request handle for outcomes that never reached the network."""
        return self._async_client.build_request(method, url, headers=self._headers())

    def dispatch(
        self,
        method: str,
        url: str,
        options: RequestOptions,
        on_outcome: Callable[[Outcome], None],
    ) -> asyncio.Task:
        """Schedule the request on the running loop; ``on_outcome`` gets the result."""
        task = asyncio.get_running_loop().create_task(self._send(method, url, options, on_outcome))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _send(
        self,
        method: str,
        url: str,
        options: RequestOptions,
        on_outcome: Callable[[Outcome], None],
    ) -> None:
        content, headers = self._prepare(options.data)
        logger.debug("%s %s", method, url)
        outcome: Outcome
        try:
            outcome = await self._async_client.request(
                method, url, content=content, headers=headers, timeout=self.timeout_for(options)
            )
        except httpx.HTTPError as exc:
            logger.warning("mite transport failure method=%s url=%s error=%s", method, url, exc)
            outcome = exc
        on_outcome(outcome)

    def arm_timeout(self, options: RequestOptions, on_timeout: Callable[[], None]) -> Optional[asyncio.TimerHandle]:
        """Schedule the fallback timeout notification when an error callback exists."""
        if options.error is None:
            return None
        loop = asyncio.get_running_loop()
        return loop.call_later(self.timeout_for(options), on_timeout)

    async def drain(self) -> None:
        """Wait for every dispatched request to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        self._client.close()
        if self._async_client.is_closed:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._async_client.aclose())
            return
        task = loop.create_task(self._async_client.aclose())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def aclose(self) -> None:
        await self._async_client.aclose()
        self._client.close()


__all__ = ["Outcome", "Transport", "classify", "default_error_handler", "deliver", "parse_json"]
