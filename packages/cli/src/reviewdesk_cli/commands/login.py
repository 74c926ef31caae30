"""Session commands: login, logout, whoami, health."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape

from reviewdesk_cli.auth import resolve_credentials
from reviewdesk_cli.context import AppContext, pass_app
from reviewdesk_cli.guard import requires_route
from reviewdesk_core.api import auth as auth_api
from reviewdesk_core.api import health as health_api
from reviewdesk_core.routes import Routes
from reviewdesk_core.utils.formatting import format_time

console = Console()


@click.command("login")
@click.option("--username", "-u", default=None, help="Account name. Falls back to REVIEWDESK_USERNAME, then a prompt.")
@click.option("--password", "-p", default=None, help="Password. Falls back to REVIEWDESK_PASSWORD, then a prompt.")
@pass_app
def login_cmd(app: AppContext, username: str | None, password: str | None):
    """Sign in and store the session token."""
    # On the login route a 401 means bad credentials, not an expired session.
    app.router.navigate(Routes.LOGIN)
    username, password = resolve_credentials(username, password)

    async def _login():
        async with app.client() as client:
            return app.handler.handle(await auth_api.login(client, app.session, username, password))

    response = app.run(_login())
    app.router.navigate(Routes.HOME)
    app.notifier.success(f"Logged in as {response.user.username}")


@click.command("logout")
@pass_app
def logout_cmd(app: AppContext):
    """Sign out. The local session is cleared even if the backend call fails."""
    if not app.session.is_authenticated():
        app.notifier.info("Not logged in")
        return

    async def _logout():
        async with app.client() as client:
            return await auth_api.logout(client, app.session)

    result = app.run(_logout())
    if not result.ok:
        app.notifier.warning("The server did not confirm the logout; local session cleared anyway")
    app.router.navigate(Routes.LOGIN)
    app.notifier.success("Logged out")


@click.command("whoami")
@pass_app
@requires_route(Routes.HOME)
def whoami_cmd(app: AppContext):
    """Show the signed-in user as the backend sees it."""

    async def _whoami():
        async with app.client() as client:
            return app.handler.handle(await auth_api.get_current_user(client))

    user = app.run(_whoami())
    console.print(f"[bold]{escape(user.username)}[/bold] <{escape(user.email or '-')}>")
    console.print(f"  id:      {user.id}")
    console.print(f"  active:  {'yes' if user.is_active else 'no'}")
    console.print(f"  since:   {format_time(user.created_at)}")
    console.print(f"  backend: {escape(app.config['api_base_url'])}")


@click.command("health")
@pass_app
def health_cmd(app: AppContext):
    """Check that the backend is up and can reach its database."""

    async def _check():
        async with app.client() as client:
            return app.handler.handle(await health_api.check(client))

    status = app.run(_check())
    style = "green" if status.status in ("ok", "healthy") else "red"
    console.print(f"[{style}]{escape(status.status)}[/{style}]  {escape(app.config['api_base_url'])}")
    if status.database:
        console.print(f"  database: {escape(status.database)}")
    if status.version:
        console.print(f"  version:  {escape(status.version)}")
    if style == "red":
        raise click.exceptions.Exit(1)
