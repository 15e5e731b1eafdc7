"""Shared-secret bearer authentication for inbound requests."""

import secrets

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response
from rich.console import Console

console = Console()

# Preflight requests never carry credentials
UNAUTHENTICATED_METHODS = frozenset({"OPTIONS"})


class BearerAuthGate:
    """Pipeline stage rejecting requests without the configured bearer token.

    With no token configured the gate lets everything through.
    """

    def __init__(self, token: str | None):
        self._token = token or None

    @property
    def enabled(self) -> bool:
        """True when a non-empty token is configured."""
        return self._token is not None

    async def __call__(self, request: Request) -> Response | None:
        if not self.enabled or request.method in UNAUTHENTICATED_METHODS:
            return None

        auth_header = request.headers.get("authorization")
        if auth_header is None:
            return _auth_error(status.HTTP_401_UNAUTHORIZED, "Unauthorized", "Bearer")

        scheme, _, token = auth_header.partition(" ")
        token = token.strip()
        if scheme.lower() != "bearer" or not token:
            return _auth_error(
                status.HTTP_400_BAD_REQUEST,
                "Bad Request",
                'Bearer error="invalid_request"',
            )

        if not secrets.compare_digest(token.encode(), self._token.encode()):
            return _auth_error(
                status.HTTP_401_UNAUTHORIZED,
                "Unauthorized",
                'Bearer error="invalid_token"',
            )
        return None


def print_auth_status(gate: BearerAuthGate) -> None:
    """Print whether inbound bearer authentication is active."""
    if gate.enabled:
        console.print("[green]Bearer authentication enabled[/green]")
        return
    console.print("[yellow]Warning:[/yellow] OPENAI_API_KEY is not set, authentication is DISABLED")
    console.print("[dim]Every GET/POST will be forwarded without a bearer check.[/dim]")


def _auth_error(status_code: int, message: str, challenge: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        headers={"WWW-Authenticate": challenge},
        content={"error": message},
    )
