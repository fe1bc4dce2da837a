"""Exceptions raised by the mite SDK."""

from __future__ import annotations


class MiteError(Exception):
    """Base class for SDK errors."""


class ConfigurationError(MiteError, ValueError):
    """Raised when the client is constructed without required credentials."""


__all__ = ["MiteError", "ConfigurationError"]
