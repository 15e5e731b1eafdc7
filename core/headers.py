"""Header construction for upstream requests."""

from collections.abc import Iterable
from typing import Literal

HostSource = Literal["ollama", "target"]

# Framing and connection-scoped headers; httpx re-frames the forwarded body
NOT_FORWARDED_HEADERS = frozenset(
    {
        "host",
        "content-length",
        "transfer-encoding",
        "connection",
        "keep-alive",
        "proxy-connection",
        "te",
        "trailer",
        "upgrade",
    }
)


class HeaderBuilder:
    """Build upstream headers from the inbound ones."""

    def __init__(self, ollama_host: str, host_source: HostSource = "ollama"):
        self.ollama_host = ollama_host
        self.host_source = host_source

    def host_for(self, target_host: str) -> str:
        """Host header value for a request bound to ``target_host``.

        By default every forwarded request carries the Ollama host, even when
        it goes to the OpenAI endpoint. ``host_source="target"`` switches to
        the host of the endpoint actually being contacted.
        """
        if self.host_source == "target":
            return target_host
        return self.ollama_host

    def build_upstream_headers(
        self,
        headers: Iterable[tuple[str, str]],
        target_host: str,
    ) -> list[tuple[str, str]]:
        """Copy the end-to-end inbound headers in order, then set ``Host``."""
        upstream = [
            (key, value) for key, value in headers if key.lower() not in NOT_FORWARDED_HEADERS
        ]
        upstream.insert(0, ("host", self.host_for(target_host)))
        return upstream
