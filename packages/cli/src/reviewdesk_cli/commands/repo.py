"""repo commands: imported repositories, imports from the Git host, webhooks."""

from __future__ import annotations

import asyncio

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from reviewdesk_cli.context import AppContext, pass_app
from reviewdesk_cli.guard import requires_route
from reviewdesk_cli.render import webhook_tag
from reviewdesk_core.api import repository as repository_api
from reviewdesk_core.models import Repository
from reviewdesk_core.routes import Routes
from reviewdesk_core.status import WEBHOOK_STATUS_CONFIG, webhook_status
from reviewdesk_core.utils.formatting import format_time
from reviewdesk_core.views.importer import ImportView
from reviewdesk_core.views.repositories import RepositoryListView

console = Console()

_PICKER_HELP = (
    "[dim]Enter ids to toggle (e.g. 3,7), [bold]/text[/bold] to search, [bold]/[/bold] to clear, "
    "[bold]n[/bold]/[bold]p[/bold] next/previous page, [bold]i[/bold] import, [bold]q[/bold] quit[/dim]"
)


def _parse_ids(value: str) -> list[int]:
    try:
        return [int(part) for part in value.replace(" ", "").split(",") if part]
    except ValueError:
        raise click.BadParameter(f"expected comma-separated ids, got {value!r}")


def _provider_text(repository: Repository) -> str:
    if repository.llm_provider is not None:
        return f"{escape(repository.llm_provider.name)} [dim]({escape(repository.llm_provider.model)})[/dim]"
    if repository.llm_provider_id:
        return f"#{repository.llm_provider_id}"
    return "[dim]default[/dim]"


@click.group("repo")
def repo_group():
    """Manage repositories registered for automatic review."""


@repo_group.command("list")
@click.option("--page", default=1, show_default=True, type=click.IntRange(min=1))
@click.option("--search", default="", help="Filter the current page by name or path.")
@pass_app
@requires_route(Routes.REPOSITORIES)
def list_cmd(app: AppContext, page: int, search: str):
    """List imported repositories."""

    async def _load():
        async with app.client() as client:
            view = RepositoryListView(client, app.handler, page_size=app.config["page_size"])
            await view.load(page)
            return view

    view = app.run(_load())
    view.search_text = search
    rows = view.filtered

    if not rows:
        console.print("[dim]No repositories found.[/dim]")
        if not search:
            console.print("Import some with: [bold]reviewdesk repo import[/bold]")
        return

    table = Table(title=f"Repositories (page {view.page}, {view.total} total)")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Path")
    table.add_column("LLM provider")
    table.add_column("Webhook")
    table.add_column("Imported")
    for repository in rows:
        table.add_row(
            str(repository.id),
            escape(repository.name),
            escape(repository.full_path),
            _provider_text(repository),
            webhook_tag(repository.webhook_id, repository.last_webhook_test_status),
            format_time(repository.created_at),
        )
    console.print(table)


@repo_group.command("show")
@click.argument("repository_id", type=int)
@pass_app
@requires_route(Routes.REPOSITORIES)
def show_cmd(app: AppContext, repository_id: int):
    """Show one repository and its webhook state."""

    async def _get():
        async with app.client() as client:
            return app.handler.handle(await repository_api.get_repository(client, repository_id))

    repository = app.run(_get())
    state = webhook_status(repository.webhook_id, repository.last_webhook_test_status)
    action = WEBHOOK_STATUS_CONFIG[state].action

    console.print(f"[bold]{escape(repository.full_path)}[/bold] [dim]#{repository.id}[/dim]")
    console.print(f"  branch:       {escape(repository.default_branch or '-')}")
    console.print(f"  clone:        {escape(repository.http_url or '-')}")
    console.print(f"  LLM provider: {_provider_text(repository)}")
    console.print(f"  webhook:      {webhook_tag(repository.webhook_id, repository.last_webhook_test_status)}")
    if repository.webhook_url:
        console.print(f"  webhook url:  {escape(repository.webhook_url)}")
    if repository.last_webhook_test_at:
        console.print(f"  last test:    {format_time(repository.last_webhook_test_at)}")
    if repository.last_webhook_test_error:
        console.print(f"  last error:   [red]{escape(repository.last_webhook_test_error)}[/red]")
    if action == "test":
        console.print(f"\n[dim]Run [bold]reviewdesk repo test-webhook {repository.id}[/bold] to verify it.[/dim]")
    elif action in ("recreate", "configure"):
        console.print(f"\n[dim]Run [bold]reviewdesk repo recreate-webhook {repository.id}[/bold] to fix it.[/dim]")


@repo_group.command("import")
@click.option("--search", default="", help="Initial search on the Git host.")
@click.option("--page", default=1, show_default=True, type=click.IntRange(min=1))
@click.option("--ids", default=None, help="Comma-separated Git host project ids. Skips the interactive picker.")
@pass_app
@requires_route(Routes.REPOSITORIES)
def import_cmd(app: AppContext, search: str, page: int, ids: str | None):
    """Import projects from the Git host and create their webhooks."""
    selected = _parse_ids(ids) if ids is not None else None

    async def _import():
        async with app.client() as client:
            view = ImportView(
                client,
                app.handler,
                page_size=app.config["page_size"],
                debounce=float(app.config["search_debounce"]),
            )
            try:
                await view.open()
                if search or page > 1:
                    view.search_text = search
                    await view.load(page, search)
                if selected is not None:
                    view.selected.update(selected)
                    return await view.import_selected()
                return await _pick(view)
            finally:
                view.close()

    if not app.run(_import()):
        raise click.exceptions.Exit(1)


async def _pick(view: ImportView) -> bool:
    """Interactive picker loop. Returns True once an import succeeded, False on quit."""
    while True:
        _print_remote_page(view)
        console.print(_PICKER_HELP)
        answer = (await asyncio.to_thread(click.prompt, ">", default="", show_default=False)).strip()

        if answer == "q":
            return False
        if answer == "i":
            if await view.import_selected():
                return True
        elif answer == "n":
            if view.page < view.total_pages:
                await view.load(view.page + 1, view.search_text)
        elif answer == "p":
            if view.page > 1:
                await view.load(view.page - 1, view.search_text)
        elif answer.startswith("/"):
            view.set_search(answer[1:].strip())
            await view.settle()
        elif answer:
            try:
                for repository_id in _parse_ids(answer):
                    view.toggle(repository_id)
            except click.BadParameter as e:
                console.print(f"[red]{escape(e.message)}[/red]")


def _print_remote_page(view: ImportView) -> None:
    title = f"Git host projects (page {view.page}/{view.total_pages})"
    if view.search_text:
        title += f" matching {view.search_text!r}"
    table = Table(title=escape(title))
    table.add_column("", width=1)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Path", style="bold")
    table.add_column("Branch")
    table.add_column("Description", overflow="ellipsis", max_width=50)
    for repository in view.repositories:
        table.add_row(
            "[green]✓[/green]" if repository.id in view.selected else "",
            str(repository.id),
            escape(repository.full_path),
            escape(repository.default_branch or "-"),
            escape(repository.description),
        )
    console.print(table)
    console.print(f"[dim]{len(view.selected)} selected[/dim]")


@repo_group.command("delete")
@click.argument("repository_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@pass_app
@requires_route(Routes.REPOSITORIES)
def delete_cmd(app: AppContext, repository_id: int, yes: bool):
    """Remove a repository and its webhook."""
    if not yes:
        click.confirm(f"Delete repository {repository_id}? Its webhook is removed too", abort=True)

    async def _delete():
        async with app.client() as client:
            view = RepositoryListView(client, app.handler)
            return await view.delete(repository_id)

    if not app.run(_delete()):
        raise click.exceptions.Exit(1)


@repo_group.command("test-webhook")
@click.argument("repository_id", type=int)
@pass_app
@requires_route(Routes.REPOSITORIES)
def test_webhook_cmd(app: AppContext, repository_id: int):
    """Ask the Git host to deliver a test event to the repository's webhook."""

    async def _test():
        async with app.client() as client:
            view = RepositoryListView(client, app.handler, page_size=app.config["page_size"])
            return await view.test_webhook(repository_id)

    outcome = app.run(_test())
    if outcome is None or not outcome.success:
        raise click.exceptions.Exit(1)


@repo_group.command("recreate-webhook")
@click.argument("repository_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@pass_app
@requires_route(Routes.REPOSITORIES)
def recreate_webhook_cmd(app: AppContext, repository_id: int, yes: bool):
    """Delete and recreate the webhook from the system webhook settings."""
    if not yes:
        click.confirm(f"Recreate the webhook of repository {repository_id}?", abort=True)

    async def _recreate():
        async with app.client() as client:
            view = RepositoryListView(client, app.handler, page_size=app.config["page_size"])
            return await view.recreate_webhook(repository_id)

    if not app.run(_recreate()):
        raise click.exceptions.Exit(1)


@repo_group.command("set-llm")
@click.argument("repository_id", type=int)
@click.option("--provider", "provider_id", type=int, default=None, help="LLM provider id to review this repository with.")
@click.option("--clear", is_flag=True, help="Fall back to the default provider.")
@pass_app
@requires_route(Routes.REPOSITORIES)
def set_llm_cmd(app: AppContext, repository_id: int, provider_id: int | None, clear: bool):
    """Choose which LLM provider reviews a repository."""
    if (provider_id is None) == (not clear):
        raise click.UsageError("Pass exactly one of --provider or --clear.")

    async def _set():
        async with app.client() as client:
            view = RepositoryListView(client, app.handler)
            return await view.set_llm_provider(repository_id, None if clear else provider_id)

    if not app.run(_set()):
        raise click.exceptions.Exit(1)
