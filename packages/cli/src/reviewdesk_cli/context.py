"""Per-invocation application context shared by every command.

The group callback in cli.py builds one AppContext and stores it as
ctx.obj; commands receive it through @pass_app. Everything a command needs
(config, session, router, notifier, result handler, a client factory) hangs
off it, so tests can build one around a MemoryBackend session and an
httpx.MockTransport.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Coroutine

import click
import httpx
from rich.console import Console

from reviewdesk_core.api.client import ApiClient
from reviewdesk_core.effects import ResultHandler
from reviewdesk_core.exceptions import ApiError, AuthExpiredError, ReviewdeskError
from reviewdesk_core.notify import Notifier
from reviewdesk_core.routes import Router, Routes
from reviewdesk_store.session import Session

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    config: dict
    session: Session
    console: Console = field(default_factory=Console)
    notifier: Notifier = field(default_factory=Notifier)
    router: Router = field(default_factory=Router)
    transport: httpx.AsyncBaseTransport | None = None
    debug: bool = False

    def __post_init__(self):
        self.handler = ResultHandler(self.session, self.router, self.notifier)
        self.router.on_navigate(self._announce_redirect)

    def _announce_redirect(self, previous: str, target: str, replaced: bool) -> None:
        if replaced and target == Routes.LOGIN and previous != Routes.LOGIN:
            self.console.print("[dim]Run [bold]reviewdesk login[/bold] to sign in.[/dim]")

    def client(self) -> ApiClient:
        return ApiClient(
            base_url=self.config["api_base_url"],
            timeout=float(self.config.get("timeout") or 30.0),
            token_provider=lambda: self.session.token,
            transport=self.transport,
        )

    def run(self, coro: Coroutine[Any, Any, Any]) -> Any:
        """Drive one command's coroutine to completion and map failures to exit codes.

        API failures were already shown to the user by the result handler, so
        they only set the exit status here.
        """
        try:
            return asyncio.run(coro)
        except (ApiError, AuthExpiredError):
            raise click.exceptions.Exit(1)
        except ReviewdeskError as e:
            raise click.ClickException(str(e))
        except (click.ClickException, click.Abort):
            raise
        except Exception as e:
            if self.debug:
                raise
            logger.error("Unexpected error: %s", e, exc_info=logger.isEnabledFor(logging.DEBUG))
            self.notifier.error("Unexpected error, rerun with --debug for details")
            raise click.exceptions.Exit(1)


pass_app = click.make_pass_decorator(AppContext)
