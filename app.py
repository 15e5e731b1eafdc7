"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.handlers import handle_get, handle_options, handle_post
from auth import BearerAuthGate
from core.config import Config
from core.exceptions import BadRequest, InvalidURL, UpstreamError
from core.headers import HeaderBuilder
from core.protocols import RequestLogger, RequestStage
from core.router import RouteDecider
from core.urls import base_url_host
from services.dispatcher import RequestDispatcher
from services.upstream import UpstreamClient


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``transport`` replaces the network transport of the upstream client.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(
            max_connections=config.limits.max_connections,
            max_keepalive_connections=config.limits.max_keepalive_connections,
        )
        client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.limits.upstream_timeout),
            limits=limits,
            transport=transport,
        )
        # Forward only the caller's headers, not httpx's defaults
        client.headers.clear()
        app.state.upstream_client = UpstreamClient(client)
        app.state.dispatcher = RequestDispatcher(
            logger=logger,
            decider=RouteDecider(
                config.endpoints.openai,
                config.endpoints.ollama,
                config.routing.openai_models,
            ),
            header_builder=HeaderBuilder(
                base_url_host(config.endpoints.ollama),
                config.routing.host_header,
            ),
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="Ollama/OpenAI Proxy", version="0.1.0", lifespan=lifespan)

    async def log_request(request: Request) -> None:
        logger.log_request(request.method, str(request.url))

    # Run in order; the first stage returning a response ends the request
    stages: list[RequestStage] = [log_request, BearerAuthGate(config.auth.api_key)]

    @app.middleware("http")
    async def run_stages(request: Request, call_next):
        for stage in stages:
            response = await stage(request)
            if response is not None:
                return response
        return await call_next(request)

    @app.exception_handler(BadRequest)
    async def bad_request(request: Request, exc: BadRequest):
        return _error_response(logger, "proxy", 400, str(exc))

    @app.exception_handler(InvalidURL)
    async def invalid_url(request: Request, exc: InvalidURL):
        return _error_response(logger, "proxy", 500, str(exc))

    @app.exception_handler(UpstreamError)
    async def upstream_error(request: Request, exc: UpstreamError):
        return _error_response(
            logger, exc.provider or "upstream", exc.status_code or 502, str(exc)
        )

    @app.post("/{path:path}")
    async def proxy_post(request: Request):
        return await handle_post(request, config, logger)

    @app.get("/{path:path}")
    async def proxy_get(request: Request):
        return await handle_get(request, logger)

    @app.options("/{path:path}")
    async def proxy_options(request: Request):
        return await handle_options(request)

    return app


def _error_response(
    logger: RequestLogger,
    route: str,
    status_code: int,
    message: str,
) -> JSONResponse:
    logger.log_error(route, status_code, message)
    return JSONResponse(status_code=status_code, content={"error": message})
