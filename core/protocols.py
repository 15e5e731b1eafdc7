"""Shared protocol definitions."""

from typing import Protocol

from fastapi import Request, Response


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard or plain console)."""

    def log_request(self, method: str, url: str) -> None: ...
    def log_route(self, route: str, model: str | None, target_url: str) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...


class RequestStage(Protocol):
    """One step of the inbound pipeline.

    Returns a terminal Response to stop processing, or None to continue.
    """

    async def __call__(self, request: Request) -> Response | None: ...
