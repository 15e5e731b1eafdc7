"""Plain line-per-event logger, for terminals where the dashboard is unwanted."""

from datetime import datetime

from rich.console import Console
from rich.markup import escape

from ui.log_utils import write_cli_log


class ConsoleLogger:
    """Print one timestamped line per request, routing decision and error."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def log_request(self, method: str, url: str) -> None:
        self.console.print(f"[dim]{_now()}[/dim] {method} {escape(url)}")
        write_cli_log("REQUEST", f"{method} {url}")

    def log_route(self, route: str, model: str | None, target_url: str) -> None:
        style = "green" if route == "openai" else "magenta"
        model_part = f" model={escape(model)}" if model else ""
        self.console.print(
            f"[dim]{_now()}[/dim] [{style}]-> {route}[/{style}]{model_part} {escape(target_url)}"
        )
        write_cli_log(route.upper(), target_url, model=model or "-")

    def log_error(self, route: str, status: int, message: str) -> None:
        self.console.print(f"[dim]{_now()}[/dim] [red]{route} {status}:[/red] {escape(message)}")
        write_cli_log("ERROR", message[:200], route=route, status=status)


def _now() -> str:
    return datetime.now().astimezone().isoformat(timespec="seconds")
