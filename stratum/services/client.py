# stratum/services/client.py

"""Stratum JSON-RPC Client

Sends requests to a JSON-RPC server over HTTP POST and validates that each
response belongs to the request that produced it.
"""

import base64
import logging
from typing import Any, Dict, List, Optional, Type

import httpx

from stratum.core.config import Settings, settings as default_settings
from stratum.core.exceptions import NonceMismatchError, wrap_exception
from stratum.models.jsonrpc import Request, Response, ids_match
from stratum.services.nonce import NonceGenerator

logger = logging.getLogger(__name__)

_ABORTED_ERRORS = (ConnectionAbortedError, BrokenPipeError)
_SERVER_DISCONNECTED = "Server disconnected without sending a response"


def is_connection_aborted(exc: httpx.TransportError) -> bool:
    """
    Whether a transport failure means a pooled connection was dropped by the peer

    httpx keeps idle connections alive; when the server has closed one in the
    meantime the failure only shows up once the request is written. Failures
    after the request may have reached the server (a reset while reading the
    response head, a malformed status line) are not retried.
    """
    if isinstance(exc, httpx.WriteError):
        return True
    if isinstance(exc, httpx.RemoteProtocolError):
        return _SERVER_DISCONNECTED in str(exc)

    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, _ABORTED_ERRORS):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


class RpcClient:
    """Handle to a remote JSON-RPC server"""

    def __init__(
        self,
        url: str,
        user: Optional[str] = None,
        password: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
        user_agent: Optional[str] = None
    ):
        """
        Initialize the client

        Args:
            url: Endpoint every request is POSTed to
            user: Optional username for HTTP Basic authentication
            password: Optional password; only valid together with a username
            timeout: Transport timeout in seconds (defaults to settings)
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
            user_agent: User-Agent header value (defaults to settings)

        Raises:
            ValueError: If a password is given without a username
        """
        if password is not None and user is None:
            raise ValueError("A password requires a username")

        self.url = url
        self.user = user
        self.password = password
        self.timeout = timeout if timeout is not None else default_settings.STRATUM_TIMEOUT
        self._nonce = NonceGenerator()
        self._headers = self._build_headers(user_agent or default_settings.USER_AGENT)
        self._client = httpx.Client(timeout=self.timeout, transport=transport)
        logger.debug(f"RpcClient initialized for {self.url}")

    @classmethod
    def from_settings(
        cls,
        config: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None
    ) -> "RpcClient":
        """Create a client from STRATUM_* settings"""
        config = config or default_settings
        return cls(
            config.STRATUM_URL,
            config.STRATUM_USER,
            config.STRATUM_PASSWORD,
            timeout=config.STRATUM_TIMEOUT,
            transport=transport,
            user_agent=config.USER_AGENT
        )

    def _build_headers(self, user_agent: str) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": user_agent
        }
        if self.user is not None:
            credentials = f"{self.user}:{self.password or ''}"
            token = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
            headers["Authorization"] = f"Basic {token}"
        return headers

    def build_request(self, method: str, params: List[Any]) -> Request:
        """
        Build a request with a fresh id

        Args:
            method: RPC method name
            params: Positional parameters

        Returns:
            Request ready to send
        """
        return Request(method=method, params=list(params), id=self._nonce.next())

    def last_nonce(self) -> int:
        """Id of the most recently built request"""
        return self._nonce.last()

    def send_request(self, request: Request) -> Response:
        """
        Send a request and wait for its response

        A connection the server dropped while it sat idle in the pool is
        retried once on a new connection; every other failure is raised.

        Args:
            request: Request to send

        Returns:
            Response whose id matches the request id

        Raises:
            DecodeError: If the request cannot be encoded or the body is not a response
            TransportError: If the request could not be delivered
            IoError: If reading the response body failed
            NonceMismatchError: If the response belongs to another request
        """
        body = request.to_json()
        log_extra = {"rpc_method": request.method, "rpc_id": request.id}
        logger.debug(f"Sending {request.method} (id={request.id}) to {self.url}", extra=log_extra)

        try:
            http_response = self._post(body)
        except httpx.TransportError as e:
            if not is_connection_aborted(e):
                raise wrap_exception(e) from e
            logger.warning(
                f"Connection aborted sending {request.method} (id={request.id}), retrying once",
                extra=log_extra
            )
            try:
                http_response = self._post(body)
            except httpx.TransportError as retry_error:
                raise wrap_exception(retry_error) from retry_error

        # HTTP status is ignored: error details are in the JSON body
        try:
            content = http_response.read()
        except (httpx.StreamError, httpx.TransportError, OSError) as e:
            raise wrap_exception(e, reading_body=True) from e
        finally:
            http_response.close()

        response = Response.from_json(content)
        if not ids_match(response.id, request.id):
            logger.error(
                f"Nonce mismatch for {request.method}: expected {request.id!r}, got {response.id!r}",
                extra=log_extra
            )
            raise NonceMismatchError(request.id, response.id)

        return response

    def _post(self, body: str) -> httpx.Response:
        http_request = self._client.build_request(
            "POST",
            self.url,
            content=body.encode("utf-8"),
            headers=self._headers
        )
        return self._client.send(http_request, stream=True)

    def call(
        self,
        method: str,
        params: Optional[List[Any]] = None,
        result_type: Optional[Type[Any]] = None
    ) -> Any:
        """
        Build, send and unwrap a request in one step

        Args:
            method: RPC method name
            params: Positional parameters (empty when omitted)
            result_type: Optional type the result is validated into

        Returns:
            The call result

        Raises:
            StratumError: Any failure from send_request or Response.into_result
        """
        request = self.build_request(method, params or [])
        return self.send_request(request).into_result(result_type)

    def close(self) -> None:
        """Close the underlying HTTP connections"""
        self._client.close()

    def __enter__(self) -> "RpcClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
