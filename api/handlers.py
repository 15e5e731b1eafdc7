"""FastAPI route handlers."""

from fastapi import Request, Response
from fastapi.responses import StreamingResponse

from core.config import Config
from core.protocols import RequestLogger
from ui.log_utils import write_incoming_log

PREFLIGHT_HEADERS = {
    "Allow": "OPTIONS, GET, POST",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "OPTIONS, GET, POST",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def inbound_url(request: Request) -> str:
    """Rebuild the absolute inbound URL keeping the path exactly as received."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        # Some servers include the query in raw_path
        path = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        path = request.url.path
    query = request.scope.get("query_string", b"").decode("latin-1")
    url = f"{request.url.scheme}://{request.url.netloc}{path}"
    if query:
        url += f"?{query}"
    return url


async def handle_post(
    request: Request,
    config: Config,
    logger: RequestLogger,
) -> StreamingResponse:
    """Route a POST by its ``model`` field and forward it."""
    # Read once; the same bytes are inspected and then forwarded
    raw_body = await request.body()
    headers = request.headers.items()

    if config.proxy.debug:
        write_incoming_log(
            request.method,
            request.url.path,
            dict(request.headers),
            raw_body.decode("utf-8", errors="replace"),
        )

    dispatcher = request.app.state.dispatcher
    prepared = dispatcher.prepare_post(inbound_url(request), headers, raw_body)
    upstream = request.app.state.upstream_client
    return await upstream.forward(prepared, logger)


async def handle_get(
    request: Request,
    logger: RequestLogger,
) -> StreamingResponse:
    """Forward a GET to the local Ollama endpoint."""
    dispatcher = request.app.state.dispatcher
    prepared = dispatcher.prepare_get(inbound_url(request), request.headers.items())
    upstream = request.app.state.upstream_client
    return await upstream.forward(prepared, logger)


async def handle_options(_request: Request) -> Response:
    """Answer CORS preflight requests without touching any upstream."""
    return Response(status_code=204, headers=PREFLIGHT_HEADERS)
