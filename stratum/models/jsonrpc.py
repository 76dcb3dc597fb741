# stratum/models/jsonrpc.py

"""Stratum JSON-RPC wire types

Request, Response and error object shapes exchanged with the server.
Field names map one to one onto the JSON keys; no aliasing is applied.
"""

import json
from typing import Any, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from stratum.core.exceptions import (
    NoErrorOrResultError,
    RpcResponseError,
    wrap_exception,
)

T = TypeVar("T")

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


def ids_match(left: Any, right: Any) -> bool:
    """
    Compare two request ids as JSON values

    Python equality treats 1, 1.0 and True as equal; JSON does not.
    """
    return json.dumps(left, sort_keys=True) == json.dumps(right, sort_keys=True)


class _WireModel(BaseModel):
    """Shared JSON encode/decode for wire types"""

    def to_json(self) -> str:
        """Serialize to compact JSON text, emitting null for absent fields"""
        try:
            return self.model_dump_json()
        except (ValueError, TypeError) as e:
            raise wrap_exception(e) from e

    @classmethod
    def from_json(cls, data: Union[str, bytes]):
        """
        Parse JSON text into this model

        Raises:
            DecodeError: If the text is not JSON or does not have the expected shape
        """
        try:
            return cls.model_validate_json(data)
        except (ValidationError, ValueError) as e:
            raise wrap_exception(e) from e


class Request(_WireModel):
    """Stratum request object"""
    model_config = ConfigDict(frozen=True)

    method: str
    params: List[Any]
    id: Any


class RpcError(_WireModel):
    """JSON-RPC error object"""
    code: int = Field(..., strict=True, ge=INT32_MIN, le=INT32_MAX)
    message: str
    data: Optional[Any] = None


class Response(_WireModel):
    """Stratum response object"""
    result: Optional[Any] = None
    error: Optional[RpcError] = None
    id: Any

    def is_none(self) -> bool:
        """Whether the result field is empty"""
        return self.result is None

    def check_error(self) -> None:
        """
        Raise the RPC error if there is one, without looking at the result

        Raises:
            RpcResponseError: If the server returned an error object
        """
        if self.error is not None:
            raise RpcResponseError(self.error)

    def into_result(self, result_type: Optional[Type[T]] = None) -> Any:
        """
        Extract the result of the call

        Args:
            result_type: Optional type the result is validated into

        Returns:
            The raw JSON result, or an instance of result_type

        Raises:
            RpcResponseError: If the server returned an error object
            NoErrorOrResultError: If neither result nor error is set
            DecodeError: If the result does not fit result_type
        """
        self.check_error()
        if self.result is None:
            raise NoErrorOrResultError()
        if result_type is None:
            return self.result
        # strict JSON validation: "42" is not an int
        try:
            return TypeAdapter(result_type).validate_json(json.dumps(self.result), strict=True)
        except ValidationError as e:
            raise wrap_exception(e) from e
