"""HTTP proxying utilities for upstream requests."""

import httpx
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from core.exceptions import UpstreamConnectionError, UpstreamTimeoutError
from core.protocols import RequestLogger
from core.request_types import PreparedRequest

# Connection-scoped headers; the serving HTTP layer sets its own
HOP_BY_HOP_HEADERS = frozenset({b"connection", b"keep-alive", b"transfer-encoding"})


class UpstreamClient:
    """Forward prepared requests and stream the upstream response back as-is."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def forward(
        self,
        prepared: PreparedRequest,
        logger: RequestLogger,
    ) -> StreamingResponse:
        """Send one request upstream and relay status, headers and raw body.

        Raises:
            UpstreamTimeoutError: if the transport timed out.
            UpstreamConnectionError: for any other transport failure.
        """
        req = self._client.build_request(
            prepared.method,
            prepared.target_url,
            headers=prepared.headers,
            content=prepared.body,
        )
        try:
            response = await self._client.send(req, stream=True)
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(
                f"Upstream timeout: {e}", provider=prepared.route_name
            ) from e
        except httpx.RequestError as e:
            raise UpstreamConnectionError(
                f"Upstream connection error: {e}", provider=prepared.route_name
            ) from e

        if response.status_code >= 400:
            logger.log_error(
                prepared.route_name,
                response.status_code,
                f"{prepared.method} {prepared.target_url} -> {response.reason_phrase}",
            )

        relayed = StreamingResponse(
            response.aiter_raw(),
            status_code=response.status_code,
            background=BackgroundTask(self._cleanup_streaming, response),
        )
        relayed.raw_headers = [
            (key, value)
            for key, value in response.headers.raw
            if key.lower() not in HOP_BY_HOP_HEADERS
        ]
        return relayed

    async def _cleanup_streaming(self, response: httpx.Response) -> None:
        """Clean up streaming resources."""
        await response.aclose()
