"""Exceptions raised by wrykit."""

from __future__ import annotations

from typing import Any, ClassVar


class WryError(Exception):
    """Base class for every error raised by wrykit."""


class InitScriptError(WryError):
    """An initialization script could not be installed."""

    def __init__(self, message: str = "Failed to initialize the script") -> None:
        super().__init__(message)


class RpcScriptError(WryError):
    """A malformed RPC request arrived from the page."""

    def __init__(self, method: str, params: Any) -> None:
        self.method = method
        self.params = params
        super().__init__(f"Bad RPC request: {method} ((1))")


class MessageSenderError(WryError):
    """A message could not be delivered."""

    def __init__(self, message: str = "Failed to send the message") -> None:
        super().__init__(message)


class DuplicateCustomProtocolError(WryError):
    """A custom protocol scheme was registered twice."""

    def __init__(self, scheme: str) -> None:
        self.scheme = scheme
        super().__init__(f"Duplicate custom protocol registered: {scheme}")


class _DetailedError(WryError, ValueError):
    """An error whose message is a fixed prefix followed by a detail."""

    prefix: ClassVar[str] = ""

    def __init__(self, detail: object) -> None:
        self.detail = detail
        super().__init__(f"{self.prefix}: {detail}")


class InvalidHeaderNameError(_DetailedError):
    """A header name is not a valid HTTP token."""

    prefix = "Invalid header name"


class InvalidHeaderValueError(_DetailedError):
    """A header value holds characters HTTP does not allow."""

    prefix = "Invalid header value"


class InvalidUriError(_DetailedError):
    """A URI could not be parsed."""

    prefix = "Invalid uri"


class InvalidStatusCodeError(_DetailedError):
    """A status code is outside the range 100 to 999."""

    prefix = "Invalid status code"


class InvalidMethodError(_DetailedError):
    """An HTTP method is empty or holds non-token characters."""

    prefix = "Invalid method"