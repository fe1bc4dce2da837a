"""Read-path coalescing and caching on top of the transport."""

from __future__ import annotations

import asyncio
import json
import logging
from functools import partial
from typing import Any, Mapping, Optional, Union

from .config import ClientConfig
from .models import NormalizedResponse, OptionsLike, RequestOptions
from .query import append_query, build_url
from .registry import InFlightRegistry, ResponseCache, Waiter
from .transport import Outcome, Transport, classify, default_error_handler, deliver, parse_json

logger = logging.getLogger("mite_sdk.gateway")

Params = Optional[Union[Mapping[str, Any], str]]


def replay(cached: NormalizedResponse, options: RequestOptions) -> None:
    """Feed a cached outcome into whichever callbacks the caller supplied."""
    if options.success is not None and cached.success is not None:
        options.success(*cached.success)
    if options.error is not None and cached.error is not None:
        options.error(*cached.error)
    if options.complete is not None and cached.complete is not None:
        options.complete(*cached.complete)


class RequestGateway:
    """GET/POST/PUT/DELETE against the mite API.

    In non-blocking mode every call returns an ``asyncio.Future`` resolving to
    the caller's ``NormalizedResponse``; callbacks fire before it resolves.
    Blocking mode returns the parsed body directly and never calls callbacks.
    Concurrent GETs for one URL share a single round trip, and the caching
    gateway answers from the last stored outcome when one exists.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Transport,
        registry: InFlightRegistry,
        cache: ResponseCache,
        *,
        use_cache: bool = False,
    ) -> None:
        self._config = config
        self._transport = transport
        self._registry = registry
        self._cache = cache
        self._use_cache = use_cache
        self._default_error = config.error or default_error_handler

    @property
    def use_cache(self) -> bool:
        return self._use_cache

    def get(self, path: str, params: Params = None, options: OptionsLike = None) -> Any:
        if options is None and (callable(params) or isinstance(params, RequestOptions)):
            # all(callback) style: a lone second argument is the options
            params, options = None, params
        parsed = RequestOptions.parse(options)
        parsed.data = None
        url = append_query(build_url(self._config, path), params)

        if not self._transport.is_async(parsed):
            return self._get_blocking(url, parsed)

        waiter = Waiter(parsed, asyncio.get_running_loop().create_future(), method="GET", url=url)
        if self._registry.join(url, waiter):
            logger.debug("GET %s already in flight; queued", url)
            self._arm(waiter)
            return waiter.future

        cached = self._cache.get(url) if self._use_cache else None
        if cached is not None:
            logger.debug("GET %s served from cache", url)
            replay(cached, parsed)
            waiter.future.set_result(cached)
            return waiter.future

        self._registry.open(url, waiter)
        self._arm(waiter)
        self._transport.dispatch("GET", url, parsed, partial(self._complete_get, url))
        return waiter.future

    def post(self, path: str, params: Any, options: OptionsLike = None) -> Any:
        return self._send("POST", path, params, options)

    def put(self, path: str, params: Any, options: OptionsLike = None) -> Any:
        return self._send("PUT", path, params, options)

    def destroy(self, path: str, options: OptionsLike = None) -> Any:
        return self._send("DELETE", path, None, options)

    def clear_cache(self, kind: Any = None) -> None:
        self._cache.clear(kind)

    def _get_blocking(self, url: str, options: RequestOptions) -> Any:
        if self._use_cache:
            cached = self._cache.get(url)
            if cached is not None and cached.ok:
                logger.debug("GET %s served from cache (blocking)", url)
                return cached.payload
        response = self._transport.send("GET", url, options)
        payload = parse_json(response.text)
        if response.is_success and response.text:
            self._cache.store(url, NormalizedResponse(success=(payload,), complete=(response,)))
        return payload

    def _send(self, method: str, path: str, data: Any, options: OptionsLike) -> Any:
        parsed = RequestOptions.parse(options)
        parsed.data = data
        url = build_url(self._config, path)

        if not self._transport.is_async(parsed):
            return self._transport.fetch(method, url, parsed)

        waiter = Waiter(parsed, asyncio.get_running_loop().create_future(), method=method, url=url)
        self._arm(waiter)
        self._transport.dispatch(method, url, parsed, partial(self._complete_single, waiter))
        return waiter.future

    def _arm(self, waiter: Waiter) -> None:
        waiter.alarm = self._transport.arm_timeout(waiter.options, partial(self._expire, waiter))

    def _expire(self, waiter: Waiter) -> None:
        waiter.alarm = None
        if waiter.settled:
            return
        handle = self._transport.build_request(waiter.method, waiter.url)
        logger.warning("%s %s timed out", waiter.method, waiter.url)
        waiter.future.set_result(NormalizedResponse(error=(handle, "timeout"), complete=(handle,)))
        if waiter.options.error is not None:
            waiter.options.error(handle, "timeout")

    def _settle(self, waiter: Waiter, normalized: NormalizedResponse) -> None:
        waiter.disarm()
        if waiter.settled:
            logger.debug("dropping late response for a request that already timed out")
            return
        waiter.future.set_result(normalized)
        try:
            deliver(normalized, waiter.options, self._default_error)
        except Exception:
            # a failing callback leaves the remaining waiters and the cache write intact
            logger.exception("callback failed for %s %s", waiter.method, waiter.url)

    def _fail(self, waiter: Waiter, exc: BaseException) -> None:
        waiter.disarm()
        if not waiter.settled:
            waiter.future.set_exception(exc)

    def _complete_single(self, waiter: Waiter, outcome: Outcome) -> None:
        try:
            normalized = classify(outcome)
        except json.JSONDecodeError as exc:
            self._fail(waiter, exc)
            return
        self._settle(waiter, normalized)

    def _complete_get(self, url: str, outcome: Outcome) -> None:
        try:
            try:
                normalized = classify(outcome)
            except json.JSONDecodeError as exc:
                for waiter in self._registry.waiters(url):
                    self._fail(waiter, exc)
                return

            waiters = self._registry.waiters(url)
            # callbacks may queue more waiters for this URL while we deliver
            index = 0
            while index < len(waiters):
                self._settle(waiters[index], normalized)
                index += 1
            self._cache.store(url, normalized)
        finally:
            self._registry.close(url)


__all__ = ["Params", "RequestGateway", "replay"]
