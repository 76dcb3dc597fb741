# stratum/utils/standard_errors.py

"""Standard JSON-RPC error objects

The five reserved error codes from http://www.jsonrpc.org/specification#error_object
and a helper to wrap an outcome into a Response.
"""

from enum import Enum
from typing import Any, Optional

from stratum.models.jsonrpc import Response, RpcError


class StandardError(Enum):
    """Reserved JSON-RPC error conditions as (code, message) pairs"""
    PARSE_ERROR = (-32700, "Parse error")
    INVALID_REQUEST = (-32600, "Invalid Request")
    METHOD_NOT_FOUND = (-32601, "Method not found")
    INVALID_PARAMS = (-32602, "Invalid params")
    INTERNAL_ERROR = (-32603, "Internal error")

    @property
    def code(self) -> int:
        return self.value[0]

    @property
    def message(self) -> str:
        return self.value[1]


def standard_error(kind: StandardError, data: Optional[Any] = None) -> RpcError:
    """
    Create a standard error object

    Args:
        kind: Which reserved condition occurred
        data: Optional diagnostic payload

    Returns:
        RpcError with the canonical code and message
    """
    return RpcError(code=kind.code, message=kind.message, data=data)


def result_to_response(result: Any, id: Any) -> Response:
    """
    Build a response from the outcome of a call

    An RpcError becomes the error member; any other value is the result.
    """
    if isinstance(result, RpcError):
        return Response(result=None, error=result, id=id)
    return Response(result=result, error=None, id=id)
