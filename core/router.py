"""Request routing logic - determines OpenAI vs Ollama from the model name."""

from collections.abc import Iterable
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Literal

Route = Literal["openai", "ollama"]

DEFAULT_OPENAI_MODELS = (
    "gpt-*",
    "chatgpt-*",
    "o1",
    "o1-*",
    "o3",
    "o3-*",
    "o4-*",
    "text-embedding-*",
    "dall-e-*",
    "whisper-*",
    "tts-*",
    "*-moderation-*",
    "davinci-*",
    "babbage-*",
)


def classify_model(model: str, patterns: Iterable[str] = DEFAULT_OPENAI_MODELS) -> Route:
    """Return "openai" for known OpenAI model families, "ollama" otherwise."""
    if any(fnmatchcase(model, pattern) for pattern in patterns):
        return "openai"
    return "ollama"


def choose_endpoint(
    model: str,
    openai_endpoint: str,
    ollama_endpoint: str,
    patterns: Iterable[str] = DEFAULT_OPENAI_MODELS,
) -> str:
    """Pick the base URL for a model. Anything unrecognised goes to Ollama."""
    if classify_model(model, patterns) == "openai":
        return openai_endpoint
    return ollama_endpoint


@dataclass(frozen=True)
class RouteDecision:
    """Routing decision for a request."""

    route: Route
    base_url: str


class RouteDecider:
    """Decide whether a request should go to OpenAI or Ollama."""

    def __init__(
        self,
        openai_endpoint: str,
        ollama_endpoint: str,
        openai_models: Iterable[str] | None = None,
    ):
        self.openai_endpoint = openai_endpoint
        self.ollama_endpoint = ollama_endpoint
        self.openai_models = tuple(
            DEFAULT_OPENAI_MODELS if openai_models is None else openai_models
        )

    def decide(self, model: str) -> RouteDecision:
        """Return the route for a model name."""
        route = classify_model(model, self.openai_models)
        base_url = choose_endpoint(
            model, self.openai_endpoint, self.ollama_endpoint, self.openai_models
        )
        return RouteDecision(route=route, base_url=base_url)

    def local(self) -> RouteDecision:
        """Route for requests without a body to inspect (always Ollama)."""
        return RouteDecision(route="ollama", base_url=self.ollama_endpoint)
