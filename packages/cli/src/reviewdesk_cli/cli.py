"""CLI entry point for reviewdesk.

Commands:
  init       interactive setup wizard (.reviewdesk.yml)
  login      sign in and persist the session
  logout     sign out and clear the session
  whoami     show the signed-in user
  health     check that the backend is reachable
  dashboard  review statistics, trends and token usage
  repo       imported repositories, imports and webhooks
  review     review results and fix suggestions
  settings   Git platform, LLM providers and system webhook
"""

from __future__ import annotations

import importlib.metadata
import logging
import os

import click
from rich.console import Console
from rich.logging import RichHandler

from reviewdesk_cli.commands.dashboard import dashboard_cmd
from reviewdesk_cli.commands.init import init_cmd
from reviewdesk_cli.commands.login import health_cmd, login_cmd, logout_cmd, whoami_cmd
from reviewdesk_cli.commands.repo import repo_group
from reviewdesk_cli.commands.review import review_group
from reviewdesk_cli.commands.settings import settings_group
from reviewdesk_cli.context import AppContext

console = Console()


def _build_session(config: dict):
    """Instantiate the configured session backend from .reviewdesk.yml settings.

    Backend selection:
      session_store: sqlite -> SQLiteBackend (session_path or .reviewdesk.db)
      session_store: memory -> MemoryBackend (nothing written to disk)
      (default)             -> FileBackend   (session_path or ~/.config/reviewdesk/session.json)
    """
    from reviewdesk_store.session import Session

    store_type = config.get("session_store", "file")

    if store_type == "sqlite":
        from reviewdesk_store.sqlite import SQLiteBackend

        return Session(SQLiteBackend(db_path=config.get("session_path") or ".reviewdesk.db"))

    if store_type == "memory":
        from reviewdesk_store.memory import MemoryBackend

        return Session(MemoryBackend())

    if store_type != "file":
        console.print(f"[yellow]Unknown session_store {store_type!r}. Falling back to file.[/yellow]")

    from reviewdesk_store.file import FileBackend

    return Session(FileBackend(config.get("session_path")))


def _build_transport(config: dict):
    """Transport override for the API client; None selects httpx's default."""
    return None


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("reviewdesk"),
    prog_name="reviewdesk",
)
@click.option(
    "--config",
    "config_path",
    default=".reviewdesk.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="REVIEWDESK_CONFIG",
)
@click.option("--api-url", default=None, help="Backend API base URL. Overrides the config file.")
@click.option("--no-persist", is_flag=True, help="Keep the session in memory only for this run.")
@click.option("--debug", is_flag=True, help="Verbose logging and full tracebacks.")
@click.pass_context
def main(ctx: click.Context, config_path: str, api_url: str | None, no_persist: bool, debug: bool):
    """Operator console for the AI code-review service."""
    from reviewdesk_core.config import load_config

    debug = debug or os.environ.get("REVIEWDESK_DEBUG", "").lower() in ("1", "true", "yes")
    _configure_logging(debug)

    overrides = {"api_base_url": api_url, "session_store": "memory" if no_persist else None}
    config = load_config(config_path, cli_overrides=overrides)

    session = _build_session(config)
    ctx.obj = AppContext(
        config=config,
        session=session,
        transport=_build_transport(config),
        debug=debug,
    )
    ctx.call_on_close(session.close)


main.add_command(init_cmd)
main.add_command(login_cmd)
main.add_command(logout_cmd)
main.add_command(whoami_cmd)
main.add_command(health_cmd)
main.add_command(dashboard_cmd)
main.add_command(repo_group)
main.add_command(review_group)
main.add_command(settings_group)
