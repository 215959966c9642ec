from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

console = Console()


def serve(
    host: Annotated[str, typer.Option("--host", help="Interface to bind")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Port to listen on")] = 8000,
) -> None:
    """Run the estimator HTTP API."""
    from landingzone_web.app import serve as run_server

    console.print(f"[cyan]Serving landing-zone estimator on http://{host}:{port}[/cyan]")
    run_server(host=host, port=port)
