"""mite time-tracking API client."""

from .client import MiteClient, ResourceInterface
from .config import ClientConfig
from .errors import ConfigurationError, MiteError
from .models import NormalizedResponse, RequestOptions
from .query import QUERY_STRING_KEY, build_query, build_url
from .resources import resource_name

__all__ = [
    "ClientConfig",
    "ConfigurationError",
    "MiteClient",
    "MiteError",
    "NormalizedResponse",
    "QUERY_STRING_KEY",
    "RequestOptions",
    "ResourceInterface",
    "build_query",
    "build_url",
    "resource_name",
]
