"""Typed inspection of POST bodies.

The raw bytes are only read here, never consumed: the dispatcher forwards the
very same bytes upstream after the ``model`` field has been extracted.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError


class ModelRequest(BaseModel):
    """The part of a chat/completion body the proxy cares about."""

    model_config = ConfigDict(extra="allow")

    model: StrictStr = Field(min_length=1)


@dataclass(frozen=True)
class InvalidBody:
    """Parse failure with a human readable reason."""

    reason: str


def parse_model_request(raw_body: bytes) -> ModelRequest | InvalidBody:
    """Parse a request body into ModelRequest, or describe why it is invalid."""
    if not raw_body.strip():
        return InvalidBody("Request body is empty")

    try:
        return ModelRequest.model_validate_json(raw_body)
    except ValidationError as e:
        return InvalidBody(_describe(e))


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    if first["type"] == "json_invalid":
        return f"Invalid JSON: {first['msg']}"
    if first["type"] == "model_type":
        return "Request body must be a JSON object"
    location = ".".join(str(part) for part in first["loc"]) or "body"
    return f"Invalid field '{location}': {first['msg']}"
