"""Route guard for commands that need a signed-in session."""

from __future__ import annotations

import functools

import click

from reviewdesk_cli.context import AppContext
from reviewdesk_core.routes import guard


def requires_route(path: str):
    """Enter `path` before running the command; without a token, redirect to login and exit 1.

    Apply below @pass_app so the wrapped function receives the AppContext first.
    """

    def decorator(f):
        @functools.wraps(f)
        def wrapper(app: AppContext, *args, **kwargs):
            if not guard(app.session, app.router, path):
                app.notifier.error("Not logged in")
                raise click.exceptions.Exit(1)
            return f(app, *args, **kwargs)

        return wrapper

    return decorator
