"""init command: interactive setup wizard.

Writes .reviewdesk.yml so every later command knows which backend to talk
to and where to keep the session. Existing keys in the file are preserved;
the wizard only sets what it asked about.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import click
import yaml
from rich.console import Console

from reviewdesk_cli.context import AppContext
from reviewdesk_core.api import health as health_api
from reviewdesk_core.api.client import ApiClient
from reviewdesk_core.config import DEFAULT_API_BASE_URL
from reviewdesk_core.result import Ok

console = Console()


@click.command("init")
@click.option("--api-url", default=None, help="Backend API base URL. Prompted for when omitted.")
@click.option("--check/--no-check", default=True, show_default=True, help="Check the backend after writing the config.")
@click.pass_context
def init_cmd(ctx: click.Context, api_url: str | None, check: bool):
    """Set up reviewdesk for this directory.

    Creates or updates .reviewdesk.yml with the backend URL and the session
    store, then optionally checks that the backend answers.
    """
    app: AppContext = ctx.find_object(AppContext)
    config_path = Path(ctx.find_root().params.get("config_path") or ".reviewdesk.yml")

    console.print("\n[bold cyan]reviewdesk init[/bold cyan] · setup wizard\n")

    if api_url is None:
        current = app.config.get("api_base_url") if app else DEFAULT_API_BASE_URL
        api_url = click.prompt("Backend API base URL", default=current)
    api_url = api_url.rstrip("/")

    console.print("\nSession store:")
    console.print("  [bold]file[/bold]    JSON file in ~/.config/reviewdesk (default)")
    console.print("  [bold]sqlite[/bold]  local SQLite file, handy for per-project logins")
    console.print("  [bold]memory[/bold]  nothing saved; you log in on every run")
    store_type = click.prompt(
        "Session store",
        type=click.Choice(["file", "sqlite", "memory"]),
        default="file",
    )

    config: dict = {"api_base_url": api_url, "session_store": store_type}
    if store_type == "sqlite":
        db_path = click.prompt("SQLite database path", default=".reviewdesk.db")
        if db_path != ".reviewdesk.db":
            config["session_path"] = db_path

    _write_config(config_path, config)
    console.print(f"[green]Wrote {config_path}[/green]")

    if check:
        transport = app.transport if app else None
        timeout = float(app.config.get("timeout") or 30.0) if app else 30.0
        if _check_backend(api_url, timeout, transport):
            console.print(f"[green]Backend at {api_url} is reachable.[/green]")
        else:
            console.print(
                f"[yellow]Could not reach the backend at {api_url}. "
                "Fix the URL in the config file or start the server, then run [bold]reviewdesk health[/bold].[/yellow]"
            )

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Sign in with: [bold]reviewdesk login[/bold]")


def _check_backend(api_url: str, timeout: float, transport=None) -> bool:
    """One unauthenticated GET /health against the new URL."""
    async def _check():
        async with ApiClient(base_url=api_url, timeout=timeout, transport=transport) as client:
            return await health_api.check(client)

    return isinstance(asyncio.run(_check()), Ok)


def _write_config(path: Path, config: dict) -> None:
    """Write or update the config file, preserving any existing keys."""
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))
