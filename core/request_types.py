"""Shared request data types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PreparedRequest:
    """Prepared data for an upstream request."""

    route_name: str
    method: str
    target_url: str
    headers: list[tuple[str, str]]
    body: bytes | None
    model: str | None = None
