"""Routing orchestration for proxy requests."""

from collections.abc import Iterable

from core.body import InvalidBody, parse_model_request
from core.exceptions import BadRequest
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import PreparedRequest
from core.router import RouteDecider, RouteDecision
from core.urls import base_url_host, rewrite_url


class RequestDispatcher:
    """Prepare inbound requests for forwarding to OpenAI or Ollama."""

    def __init__(
        self,
        logger: RequestLogger,
        decider: RouteDecider,
        header_builder: HeaderBuilder,
    ) -> None:
        self._logger = logger
        self._decider = decider
        self._headers = header_builder

    def prepare_post(
        self,
        url: str,
        headers: Iterable[tuple[str, str]],
        raw_body: bytes,
    ) -> PreparedRequest:
        """Prepare a POST request, routed by the ``model`` field of its body.

        Raises:
            BadRequest: if the body is not a JSON object with a string ``model``.
        """
        parsed = parse_model_request(raw_body)
        if isinstance(parsed, InvalidBody):
            raise BadRequest(parsed.reason)

        decision = self._decider.decide(parsed.model)
        return self._prepare("POST", url, headers, raw_body, decision, parsed.model)

    def prepare_get(
        self,
        url: str,
        headers: Iterable[tuple[str, str]],
    ) -> PreparedRequest:
        """Prepare a GET request; these always go to the local Ollama endpoint."""
        return self._prepare("GET", url, headers, None, self._decider.local(), None)

    def _prepare(
        self,
        method: str,
        url: str,
        headers: Iterable[tuple[str, str]],
        body: bytes | None,
        decision: RouteDecision,
        model: str | None,
    ) -> PreparedRequest:
        target_url = rewrite_url(url, decision.base_url)
        upstream_headers = self._headers.build_upstream_headers(
            headers, base_url_host(decision.base_url)
        )
        self._logger.log_route(decision.route, model, target_url)
        return PreparedRequest(
            route_name=decision.route,
            method=method,
            target_url=target_url,
            headers=upstream_headers,
            body=body,
            model=model,
        )
