"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log

console = Console()


class RouteInfo:
    """Info about a single routed request."""

    def __init__(self, route: str, model: str | None, target_url: str, timestamp: datetime):
        self.route = route
        self.model = model or "-"
        self.target_url = target_url[:80] + "..." if len(target_url) > 80 else target_url
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing where requests are being routed."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[RouteInfo] = []
        self._max_recent = 10
        self._request_count = {"openai": 0, "ollama": 0}
        self._incoming = 0
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_request(self, method: str, url: str) -> None:
        """Count an inbound request."""
        with self._lock:
            self._incoming += 1
            self._refresh()
        write_cli_log("REQUEST", f"{method} {url}")

    def log_route(self, route: str, model: str | None, target_url: str) -> None:
        """Log a request that is about to be forwarded."""
        with self._lock:
            self._request_count[route] = self._request_count.get(route, 0) + 1
            self._recent.insert(0, RouteInfo(route, model, target_url, datetime.now()))
            self._recent = self._recent[: self._max_recent]
            self._refresh()
        write_cli_log(route.upper(), target_url, model=model or "-")

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
        write_cli_log("ERROR", message[:200], route=route, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_routes_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Ollama/OpenAI Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Requests: {self._incoming}", style="bold")
        stats.append("  |  ")
        stats.append(f"OpenAI: {self._request_count['openai']}", style="green")
        stats.append("  |  ")
        stats.append(f"Ollama: {self._request_count['ollama']}", style="magenta")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_routes_panel(self) -> Panel:
        """Build the recent routing decisions panel."""
        if not self._recent:
            content = Text("Waiting for requests...", style="dim")
            return Panel(content, title="[blue]Recent Requests[/blue]", border_style="blue")

        table = Table(show_header=True, header_style="bold", expand=True, box=None)
        table.add_column("Time", style="dim", width=8)
        table.add_column("Route", width=7)
        table.add_column("Model", width=24)
        table.add_column("Target", ratio=1)

        for info in self._recent:
            style = "green" if info.route == "openai" else "magenta"
            table.add_row(
                info.timestamp.strftime("%H:%M:%S"),
                Text(info.route, style=style),
                info.model[:24],
                info.target_url,
            )

        return Panel(table, title="[blue]Recent Requests[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            endpoints = self.config.endpoints
            content = Text(
                f"OpenAI: {endpoints.openai}\nOllama: {endpoints.ollama}",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
