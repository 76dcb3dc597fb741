# stratum/core/exceptions.py

"""Exceptions raised by the Stratum JSON-RPC client

Every failure that leaves the client is one of the kinds below. Lower-level
failures (JSON parsing, httpx transport errors, stream reads) are wrapped
and chained so callers never have to catch foreign exception types.
"""

import json
from typing import Any, Optional

import httpx
from pydantic import ValidationError


class StratumError(Exception):
    """Base exception for all client errors"""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None,
        cause: Optional[BaseException] = None
    ):
        self.message = message
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)


class DecodeError(StratumError):
    """Raised when a request or response could not be encoded or decoded"""

    def __init__(self, cause: BaseException, details: Optional[dict] = None):
        super().__init__(f"JSON decode error: {cause}", details=details, cause=cause)


class TransportError(StratumError):
    """Raised when the HTTP transport fails to deliver the request"""

    def __init__(self, cause: BaseException, details: Optional[dict] = None):
        super().__init__(f"Transport error: {cause}", details=details, cause=cause)


class IoError(StratumError):
    """Raised when reading the response body fails"""

    def __init__(self, cause: BaseException, details: Optional[dict] = None):
        super().__init__(f"IO error: {cause!r}", details=details, cause=cause)


class RpcResponseError(StratumError):
    """Raised when the server answers with a JSON-RPC error object"""

    def __init__(self, error: Any):
        self.error = error
        self.code = error.code
        self.data = error.data
        super().__init__(
            f"RPC error response: {error.code} {error.message}",
            details={"code": error.code, "data": error.data}
        )


class NoErrorOrResultError(StratumError):
    """Raised when a response carries neither a result nor an error"""

    def __init__(self):
        super().__init__("Malformed RPC response")


class NonceMismatchError(StratumError):
    """Raised when the response id does not match the request id"""

    def __init__(self, expected: Any, received: Any):
        self.expected = expected
        self.received = received
        super().__init__(
            "Nonce of response did not match nonce of request",
            details={"expected": expected, "received": received}
        )


def wrap_exception(exc: Any, reading_body: bool = False) -> StratumError:
    """
    Convert a lower-level failure into the matching client error

    Args:
        exc: Exception raised by json, pydantic, httpx or the OS, or an
            RpcError model returned by the server
        reading_body: The failure happened while reading an established
            response, so transport errors count as IoError

    Returns:
        StratumError subclass wrapping the original failure

    Raises:
        TypeError: If the failure has no counterpart in the taxonomy
    """
    from stratum.models.jsonrpc import RpcError

    if isinstance(exc, StratumError):
        return exc
    if isinstance(exc, RpcError):
        return RpcResponseError(exc)
    if isinstance(exc, (ValidationError, json.JSONDecodeError, UnicodeError)):
        return DecodeError(exc)
    if isinstance(exc, httpx.TransportError) and not reading_body:
        return TransportError(exc)
    if isinstance(exc, (httpx.TransportError, httpx.StreamError, OSError)):
        return IoError(exc)
    if isinstance(exc, (TypeError, ValueError)):
        return DecodeError(exc)
    raise TypeError(f"Cannot convert {type(exc).__name__} to a client error")
