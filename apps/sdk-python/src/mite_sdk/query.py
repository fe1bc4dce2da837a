"""URL and query-string construction for the mite API."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union
from urllib.parse import quote

from .config import ClientConfig

QUERY_STRING_KEY = "_query_string"

# Characters left alone by JavaScript's encodeURIComponent.
_UNRESERVED = "-_.!~*'()"


def encode_component(value: Any) -> str:
    if isinstance(value, bool):
        value = "true" if value else "false"
    elif isinstance(value, (list, tuple, set)):
        value = ",".join(str(item) for item in value)
    return quote(str(value), safe=_UNRESERVED)


def base_url(config: ClientConfig) -> str:
    return f"{config.protocol}://corsapi.{config.domain}/"


def build_url(config: ClientConfig, path: str) -> str:
    return f"{base_url(config)}{path}.json"


def build_query(params: Optional[Union[Mapping[str, Any], str]]) -> str:
    if not params:
        return ""
    if isinstance(params, str):
        return params

    queries = []
    for key, value in params.items():
        if key == QUERY_STRING_KEY:
            queries.append(str(value))
        else:
            queries.append(f"{encode_component(key)}={encode_component(value)}")
    return "&".join(queries)


def append_query(url: str, params: Optional[Union[Mapping[str, Any], str]]) -> str:
    query = build_query(params)
    if not query:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


__all__ = ["QUERY_STRING_KEY", "append_query", "base_url", "build_query", "build_url", "encode_component"]
