"""settings commands: Git platform, LLM providers and the system webhook."""

from __future__ import annotations

import importlib.metadata

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from reviewdesk_cli.context import AppContext, pass_app
from reviewdesk_cli.guard import requires_route
from reviewdesk_core.api import llm as llm_api
from reviewdesk_core.api import platform as platform_api
from reviewdesk_core.api import system as system_api
from reviewdesk_core.exceptions import ApiError
from reviewdesk_core.models import GitPlatformConfig, LLMProvider, SystemWebhookConfig, TestResult
from reviewdesk_core.routes import Routes
from reviewdesk_core.utils.formatting import format_time

console = Console()

PLATFORM_TYPES = ("gitlab",)


def _http_url(ctx, param, value):
    """click callback: accept only absolute http(s) URLs."""
    if value is None:
        return value
    value = value.strip()
    if not value.startswith(("http://", "https://")) or len(value.split("://", 1)[1]) == 0:
        raise click.BadParameter("must be an http:// or https:// URL")
    return value.rstrip("/")


def _report(app: AppContext, outcome: TestResult, success_message: str, failure_message: str) -> None:
    if outcome.success:
        app.notifier.success(outcome.message or success_message)
    else:
        app.notifier.error(outcome.message or failure_message)
        raise click.exceptions.Exit(1)


def _test_tag(status: str | None, tested_at: str | None) -> str:
    if status == "success":
        return f"[green]passed[/green] [dim]{format_time(tested_at)}[/dim]"
    if status == "failed":
        return f"[red]failed[/red] [dim]{format_time(tested_at)}[/dim]"
    return "[dim]never tested[/dim]"


@click.group("settings")
def settings_group():
    """Configure the review service."""


# --------------------------------------------------------------------------- #
# Git platform                                                                 #
# --------------------------------------------------------------------------- #


@settings_group.group("platform")
def platform_group():
    """Git hosting platform connection."""


@platform_group.command("show")
@pass_app
@requires_route(Routes.SETTINGS)
def platform_show(app: AppContext):
    """Show the saved platform connection. The access token is never displayed."""

    async def _get():
        async with app.client() as client:
            return app.handler.handle(await platform_api.get_config(client))

    config = app.run(_get())
    if config is None:
        console.print("[dim]No Git platform configured.[/dim]")
        console.print("Set one with: [bold]reviewdesk settings platform set --base-url URL --access-token TOKEN[/bold]")
        return

    console.print(f"[bold]{escape(config.platform_type)}[/bold] {escape(config.base_url)}")
    console.print(f"  active:    {'yes' if config.is_active else 'no'}")
    console.print(f"  last test: {_test_tag(config.last_test_status, config.last_tested_at)}")
    if config.last_test_status == "failed" and config.last_test_message:
        console.print(f"  message:   [red]{escape(config.last_test_message)}[/red]")


@platform_group.command("set")
@click.option("--type", "platform_type", type=click.Choice(PLATFORM_TYPES), default="gitlab", show_default=True)
@click.option("--base-url", required=True, callback=_http_url, help="Platform URL, e.g. https://gitlab.com")
@click.option(
    "--access-token",
    default="",
    help="API token. Leave out to keep the stored one.",
)
@pass_app
@requires_route(Routes.SETTINGS)
def platform_set(app: AppContext, platform_type: str, base_url: str, access_token: str):
    """Save the platform connection."""
    config = GitPlatformConfig(platform_type=platform_type, base_url=base_url, access_token=access_token)

    async def _save():
        async with app.client() as client:
            return app.handler.handle(await platform_api.update_config(client, config))

    app.run(_save())
    app.notifier.success("Git platform configuration saved")


@platform_group.command("test")
@click.option("--type", "platform_type", type=click.Choice(PLATFORM_TYPES), default="gitlab", show_default=True)
@click.option("--base-url", required=True, callback=_http_url)
@click.option("--access-token", required=True, help="Token to test with. Tests run before saving, so it is required.")
@pass_app
@requires_route(Routes.SETTINGS)
def platform_test(app: AppContext, platform_type: str, base_url: str, access_token: str):
    """Check that the platform accepts the given URL and token, without saving them."""

    async def _test():
        async with app.client() as client:
            return app.handler.handle(await platform_api.test_connection(client, platform_type, base_url, access_token))

    _report(app, app.run(_test()), "Connection succeeded", "Connection test failed")


# --------------------------------------------------------------------------- #
# LLM providers                                                                #
# --------------------------------------------------------------------------- #


@settings_group.group("provider")
def provider_group():
    """OpenAI-compatible LLM providers used for reviews."""


@provider_group.command("list")
@pass_app
@requires_route(Routes.SETTINGS)
def provider_list(app: AppContext):
    """List providers."""

    async def _list():
        async with app.client() as client:
            return app.handler.handle(await llm_api.list_providers(client))

    providers = app.run(_list())
    if not providers:
        console.print("[dim]No LLM providers yet.[/dim]")
        console.print("Add one with: [bold]reviewdesk settings provider add[/bold]")
        return

    table = Table(title="LLM providers")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Base URL")
    table.add_column("Model")
    table.add_column("Active")
    table.add_column("Last test")
    for provider in providers:
        table.add_row(
            str(provider.id),
            escape(provider.name),
            escape(provider.base_url),
            escape(provider.model),
            "[green]yes[/green]" if provider.is_active else "[dim]no[/dim]",
            _test_tag(provider.last_test_status, provider.last_tested_at),
        )
    console.print(table)


@provider_group.command("add")
@click.option("--name", required=True)
@click.option("--base-url", required=True, callback=_http_url, help="OpenAI-compatible endpoint, e.g. https://api.openai.com/v1")
@click.option("--api-key", required=True, envvar="REVIEWDESK_LLM_API_KEY", help="Also read from REVIEWDESK_LLM_API_KEY.")
@click.option("--model", default=None, help="Model name. Without it, pick from the endpoint's model list.")
@click.option("--inactive", is_flag=True, help="Create the provider disabled.")
@pass_app
@requires_route(Routes.SETTINGS)
def provider_add(app: AppContext, name: str, base_url: str, api_key: str, model: str | None, inactive: bool):
    """Register a provider."""

    async def _add():
        async with app.client() as client:
            chosen = model
            if not chosen:
                models = app.handler.handle(await llm_api.fetch_models(client, base_url, api_key))
                chosen = _choose_model(models)
            provider = LLMProvider(name=name, base_url=base_url, model=chosen, api_key=api_key, is_active=not inactive)
            return app.handler.handle(await llm_api.create_provider(client, provider))

    created = app.run(_add())
    app.notifier.success(f"Provider {created.name} created (id {created.id})")


def _choose_model(models: list[str]) -> str:
    if not models:
        raise click.UsageError("The endpoint returned no models; pass --model explicitly.")
    for index, name in enumerate(models, start=1):
        console.print(f"  [dim]{index:>3}[/dim] {escape(name)}")
    choice = click.prompt("Model", type=click.IntRange(1, len(models)), default=1)
    return models[choice - 1]


@provider_group.command("update")
@click.argument("provider_id", type=int)
@click.option("--name", default=None)
@click.option("--base-url", default=None, callback=_http_url)
@click.option("--api-key", default=None, help="New key. Leave out to keep the stored one.")
@click.option("--model", default=None)
@click.option("--active/--inactive", "is_active", default=None)
@pass_app
@requires_route(Routes.SETTINGS)
def provider_update(
    app: AppContext,
    provider_id: int,
    name: str | None,
    base_url: str | None,
    api_key: str | None,
    model: str | None,
    is_active: bool | None,
):
    """Change some fields of a provider."""
    changes = {"name": name, "base_url": base_url, "api_key": api_key, "model": model, "is_active": is_active}
    if all(value is None for value in changes.values()):
        raise click.UsageError("Nothing to update.")

    async def _update():
        async with app.client() as client:
            return app.handler.handle(await llm_api.update_provider(client, provider_id, changes))

    updated = app.run(_update())
    app.notifier.success(f"Provider {updated.name} updated")


@provider_group.command("delete")
@click.argument("provider_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@pass_app
@requires_route(Routes.SETTINGS)
def provider_delete(app: AppContext, provider_id: int, yes: bool):
    """Delete a provider."""
    if not yes:
        click.confirm(f"Delete provider {provider_id}?", abort=True)

    async def _delete():
        async with app.client() as client:
            return app.handler.handle(await llm_api.delete_provider(client, provider_id))

    app.run(_delete())
    app.notifier.success("Provider deleted")


@provider_group.command("test")
@click.argument("provider_id", type=int)
@pass_app
@requires_route(Routes.SETTINGS)
def provider_test(app: AppContext, provider_id: int):
    """Send a test prompt through a saved provider."""

    async def _test():
        async with app.client() as client:
            return app.handler.handle(await llm_api.test_provider(client, provider_id))

    _report(app, app.run(_test()), "Provider test succeeded", "Provider test failed")


@provider_group.command("models")
@click.argument("provider_id", type=int, required=False)
@click.option("--base-url", default=None, callback=_http_url, help="Query an unsaved endpoint instead of a provider.")
@click.option("--api-key", default=None, envvar="REVIEWDESK_LLM_API_KEY")
@pass_app
@requires_route(Routes.SETTINGS)
def provider_models(app: AppContext, provider_id: int | None, base_url: str | None, api_key: str | None):
    """List the models a provider (or an unsaved endpoint) offers."""
    if provider_id is None and not (base_url and api_key):
        raise click.UsageError("Pass a PROVIDER_ID, or --base-url together with --api-key.")

    async def _models():
        async with app.client() as client:
            if provider_id is not None:
                return app.handler.handle(await llm_api.fetch_provider_models(client, provider_id))
            return app.handler.handle(await llm_api.fetch_models(client, base_url, api_key))

    models = app.run(_models())
    if not models:
        console.print("[dim]No models returned.[/dim]")
        return
    for name in models:
        console.print(escape(name))
    app.notifier.success(f"Fetched {len(models)} models")


@provider_group.command("test-model")
@click.option("--base-url", required=True, callback=_http_url)
@click.option("--api-key", required=True, envvar="REVIEWDESK_LLM_API_KEY")
@click.option("--model", required=True)
@pass_app
@requires_route(Routes.SETTINGS)
def provider_test_model(app: AppContext, base_url: str, api_key: str, model: str):
    """Try one model on an endpoint before saving it as a provider."""

    async def _test():
        async with app.client() as client:
            return app.handler.handle(await llm_api.test_model(client, base_url, api_key, model))

    _report(app, app.run(_test()), f"Model {model} works", f"Model {model} test failed")


# --------------------------------------------------------------------------- #
# System webhook                                                               #
# --------------------------------------------------------------------------- #


@settings_group.group("webhook")
def webhook_group():
    """Callback URL the Git platform delivers merge request events to."""


@webhook_group.command("show")
@pass_app
@requires_route(Routes.SETTINGS)
def webhook_show(app: AppContext):
    """Show the system webhook callback URL."""

    async def _get():
        async with app.client() as client:
            return app.handler.handle(await system_api.get_webhook_config(client))

    config = app.run(_get())
    if not config.webhook_callback_url:
        console.print("[dim]No webhook callback URL configured.[/dim]")
        return
    console.print(escape(config.webhook_callback_url))
    console.print(f"  secret: {'set' if config.webhook_secret else '[dim]not set[/dim]'}")


@webhook_group.command("set")
@click.option("--url", required=True, callback=_http_url, help="Public URL of the backend's webhook endpoint.")
@click.option("--secret", default="", help="Shared secret. Leave out to keep the stored one.")
@pass_app
@requires_route(Routes.SETTINGS)
def webhook_set(app: AppContext, url: str, secret: str):
    """Save the system webhook callback URL used when importing repositories."""
    config = SystemWebhookConfig(webhook_callback_url=url, webhook_secret=secret)

    async def _save():
        async with app.client() as client:
            return app.handler.handle(await system_api.update_webhook_config(client, config))

    app.run(_save())
    app.notifier.success("Webhook configuration saved")


# --------------------------------------------------------------------------- #
# Info                                                                         #
# --------------------------------------------------------------------------- #


@settings_group.command("info")
@pass_app
@requires_route(Routes.SETTINGS)
def info_cmd(app: AppContext):
    """Show client version, backend address and the webhook URL in use."""

    async def _webhook_url():
        async with app.client() as client:
            try:
                return app.handler.handle(await system_api.get_webhook_config(client)).webhook_callback_url
            except ApiError:
                return ""

    webhook_url = app.run(_webhook_url())
    user = app.session.current_user() or {}

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="bold")
    table.add_column("Value")
    table.add_row("Version", importlib.metadata.version("reviewdesk"))
    table.add_row("API address", escape(app.config["api_base_url"]))
    table.add_row("Session store", escape(str(app.config["session_store"])))
    table.add_row("Signed in as", escape(user.get("username") or "-"))
    table.add_row("Webhook URL", escape(webhook_url) if webhook_url else "[dim]not configured[/dim]")
    console.print(table)
