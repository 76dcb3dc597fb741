# stratum/main.py

"""Command-line entry point

Commands:
  call     send one request and print its result
  version  print the client version
"""

import json
import logging
from typing import Any, List, Optional

import typer

from stratum.core.config import settings
from stratum.core.exceptions import RpcResponseError, StratumError
from stratum.core.logging import setup_logging
from stratum.services.client import RpcClient

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="stratum-rpc",
    help="Send JSON-RPC requests to a Stratum server over HTTP.",
    add_completion=False,
)


def parse_param(raw: str) -> Any:
    """Parse a command-line parameter as JSON, falling back to a plain string"""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


@app.command()
def call(
    method: str = typer.Argument(..., help="RPC method name"),
    params: Optional[List[str]] = typer.Argument(None, help="Parameters, each parsed as JSON"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Server URL (defaults to STRATUM_URL)"),
    user: Optional[str] = typer.Option(None, "--user", help="Basic auth username"),
    password: Optional[str] = typer.Option(None, "--password", help="Basic auth password"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Transport timeout in seconds"),
) -> None:
    """Send one request and print the JSON result."""
    setup_logging()

    user = user if user is not None else settings.STRATUM_USER
    password = password if password is not None else settings.STRATUM_PASSWORD
    if password is not None and user is None:
        typer.echo("A password requires a username", err=True)
        raise typer.Exit(code=2)

    with RpcClient(
        url or settings.STRATUM_URL,
        user,
        password,
        timeout=timeout if timeout is not None else settings.STRATUM_TIMEOUT,
    ) as client:
        request = client.build_request(method, [parse_param(p) for p in params or []])
        try:
            response = client.send_request(request)
            response.check_error()
        except RpcResponseError as e:
            typer.echo(e.error.to_json(), err=True)
            raise typer.Exit(code=1)
        except StratumError as e:
            logger.debug(f"Call to {method} failed", exc_info=True)
            typer.echo(e.message, err=True)
            raise typer.Exit(code=2)

    typer.echo(json.dumps(response.result, indent=2))


@app.command()
def version() -> None:
    """Print the client version."""
    typer.echo(f"{settings.APP_NAME} {settings.VERSION}")


if __name__ == "__main__":
    app()
