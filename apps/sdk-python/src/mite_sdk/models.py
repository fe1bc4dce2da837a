"""Request and response records shared by the transport and the facade."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Callable, Mapping, Optional, Tuple, Union

SuccessCallback = Callable[[Any], None]
ErrorCallback = Callable[[Any, str], None]
CompleteCallback = Callable[[Any], None]


@dataclass
class RequestOptions:
    data: Any = None
    async_mode: Optional[bool] = None
    timeout: Optional[float] = None
    success: Optional[SuccessCallback] = None
    error: Optional[ErrorCallback] = None
    complete: Optional[CompleteCallback] = None

    @classmethod
    def parse(cls, options: "OptionsLike") -> "RequestOptions":
        """Accept a bare success callback, a mapping, options, or nothing."""
        if options is None:
            return cls()
        if isinstance(options, RequestOptions):
            return cls(**{f.name: getattr(options, f.name) for f in fields(cls)})
        if callable(options):
            return cls(success=options)
        if isinstance(options, Mapping):
            values = dict(options)
            if "async" in values:
                values["async_mode"] = values.pop("async")
            return cls(**values)
        raise TypeError(f"Unsupported request options: {options!r}")


OptionsLike = Union[RequestOptions, Mapping[str, Any], SuccessCallback, None]


@dataclass
class NormalizedResponse:
    """Outcome of one request: exactly one of success/error is populated."""

    success: Optional[Tuple[Any]] = None
    error: Optional[Tuple[Any, str]] = None
    complete: Optional[Tuple[Any]] = None

    @property
    def ok(self) -> bool:
        return self.success is not None

    @property
    def payload(self) -> Any:
        return self.success[0] if self.success is not None else None

    @property
    def message(self) -> Optional[str]:
        return self.error[1] if self.error is not None else None

    @property
    def response(self) -> Any:
        return self.complete[0] if self.complete is not None else None


__all__ = [
    "CompleteCallback",
    "ErrorCallback",
    "NormalizedResponse",
    "OptionsLike",
    "RequestOptions",
    "SuccessCallback",
]
