"""CLI entry point for ollama-openai-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from auth import BearerAuthGate, print_auth_status
from core.config import CONFIG_FILE, load_config
from core.exceptions import ConfigurationError
from ui.console import ConsoleLogger
from ui.dashboard import Dashboard
from ui.log_utils import clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        console.print(f"[dim]Check {CONFIG_FILE} and the OPENAI_ENDPOINT/OLLAMA_ENDPOINT variables[/dim]")
        sys.exit(1)

    plain = False

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            console.print(f"[bold]OpenAI endpoint:[/bold] {config.endpoints.openai}")
            console.print(f"[bold]Ollama endpoint:[/bold] {config.endpoints.ollama}")
            print_auth_status(BearerAuthGate(config.auth.api_key))
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        if arg == "--plain":
            plain = True
        else:
            console.print(f"[red][ERROR][/red] Unknown argument: {arg}")
            _print_help()
            sys.exit(2)

    print_auth_status(BearerAuthGate(config.auth.api_key))

    # Clear previous logs and pick the request logger
    clear_logs()
    dashboard = None if plain else Dashboard(config)
    logger = ConsoleLogger(console) if dashboard is None else dashboard

    import uvicorn

    app = create_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
        timeout_keep_alive=config.limits.keep_alive_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    if dashboard is not None:
        dashboard.start()
    else:
        console.print(f"Listening on http://{config.proxy.host}:{config.proxy.port}")
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", port=config.proxy.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        if dashboard is not None:
            dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Ollama/OpenAI Proxy[/bold cyan]

Routes OpenAI models (gpt-*, o1, ...) to the OpenAI endpoint, everything else to Ollama.

[bold]Usage:[/bold]
    ollama-openai-proxy              Start with live dashboard
    ollama-openai-proxy --plain      Start with one log line per request
    ollama-openai-proxy --config     Show config location and endpoints
    ollama-openai-proxy --help       Show this help

[bold]Environment:[/bold]
    OPENAI_ENDPOINT    OpenAI-compatible base URL (default https://api.openai.com)
    OLLAMA_ENDPOINT    Ollama base URL (default http://localhost:11434)
    OPENAI_API_KEY     Bearer token required from callers; unset disables auth
    PROXY_HOST, PROXY_PORT
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
