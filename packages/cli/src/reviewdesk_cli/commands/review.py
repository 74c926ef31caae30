"""review commands: browse review results and their fix suggestions."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from reviewdesk_cli.context import AppContext, pass_app
from reviewdesk_cli.guard import requires_route
from reviewdesk_cli.render import score_text, severity_tag, status_tag, tokens_text
from reviewdesk_core.api import review as review_api
from reviewdesk_core.models import Review
from reviewdesk_core.routes import Routes
from reviewdesk_core.utils.formatting import format_duration, format_time
from reviewdesk_core.views.reviews import SEVERITY_FILTERS, ReviewListView, ReviewTab, filter_suggestions

console = Console()


@click.group("review")
def review_group():
    """Inspect merge request reviews."""


@review_group.command("list")
@click.option(
    "--tab",
    type=click.Choice([t.value for t in ReviewTab]),
    default=ReviewTab.ALL.value,
    show_default=True,
    help="Preset filter: failed reviews, reviews with critical issues, or scores of 80 and up.",
)
@click.option("--status", default="", help="Only reviews in this status.")
@click.option("--author", default="", help="Only merge requests by this author.")
@click.option("--page", default=1, show_default=True, type=click.IntRange(min=1))
@pass_app
@requires_route(Routes.REVIEWS)
def list_cmd(app: AppContext, tab: str, status: str, author: str, page: int):
    """List reviews, newest first."""

    async def _load():
        async with app.client() as client:
            view = ReviewListView(
                client,
                app.handler,
                page_size=app.config["page_size"],
                page=page,
                tab=ReviewTab(tab),
                status=status,
                author=author,
            )
            await view.load()
            return view

    view = app.run(_load())
    if not view.reviews:
        console.print("[dim]No reviews found.[/dim]")
        return

    pages = max(1, -(-view.total // view.page_size))
    table = Table(title=f"Reviews (page {view.page}/{pages}, {view.total} total)")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Repository")
    table.add_column("MR")
    table.add_column("Author")
    table.add_column("Status")
    table.add_column("Score", justify="right")
    table.add_column("Issues", justify="right")
    table.add_column("Tokens", justify="right")
    table.add_column("Created")
    for review in view.reviews:
        table.add_row(
            str(review.id),
            escape(review.repository.name or "-"),
            f"!{review.mr_iid} {escape(review.mr_title)}",
            escape(review.mr_author or "-"),
            status_tag(review.status),
            score_text(review),
            _issues_text(review),
            tokens_text(review),
            format_time(review.created_at),
        )
    console.print(table)


def _issues_text(review: Review) -> str:
    if review.critical_issues_count:
        return f"{review.issues_found} [bold red]({review.critical_issues_count} critical)[/bold red]"
    return str(review.issues_found)


@review_group.command("show")
@click.argument("review_id", type=int)
@click.option(
    "--severity",
    type=click.Choice(SEVERITY_FILTERS),
    default="all",
    show_default=True,
    help="Only show fix suggestions of this severity.",
)
@pass_app
@requires_route(Routes.REVIEWS)
def show_cmd(app: AppContext, review_id: int, severity: str):
    """Show one review: summary, issue counts, token usage and fix suggestions."""
    app.router.navigate(Routes.REVIEW_DETAIL.format(id=review_id))

    async def _get():
        async with app.client() as client:
            return app.handler.handle(await review_api.get_review(client, review_id))

    review = app.run(_get())
    _print_header(review)
    _print_counts(review)
    if review.summary:
        console.print(Panel(escape(review.summary), title="Summary", expand=False))
    _print_suggestions(review, severity)


def _print_header(review: Review) -> None:
    console.print(
        f"[bold]!{review.mr_iid} {escape(review.mr_title)}[/bold]  {status_tag(review.status)}  "
        f"score {score_text(review)}"
    )
    console.print(
        f"[dim]{escape(review.repository.full_path or review.repository.name)} · "
        f"{escape(review.source_branch)} → {escape(review.target_branch)} · "
        f"by {escape(review.mr_author or '-')}[/dim]"
    )
    if review.mr_web_url:
        console.print(f"[dim]{escape(review.mr_web_url)}[/dim]")
    console.print(f"[dim]created {format_time(review.created_at)} · reviewed {format_time(review.reviewed_at)}[/dim]")
    if review.comment_posted and review.comment_url:
        console.print(f"[dim]comment: {escape(review.comment_url)}[/dim]")
    if review.error_message:
        console.print(f"[red]Error: {escape(review.error_message)}[/red]")


def _print_counts(review: Review) -> None:
    table = Table(show_header=True, box=None, padding=(0, 2))
    for column in ("Critical", "High", "Medium", "Low", "Security", "Performance", "Quality", "Tokens", "LLM time"):
        table.add_column(column, justify="right")
    table.add_row(
        f"[bold red]{review.critical_issues_count}[/bold red]",
        str(review.high_issues_count),
        str(review.medium_issues_count),
        str(review.low_issues_count),
        str(review.security_issues_count),
        str(review.performance_issues_count),
        str(review.quality_issues_count),
        tokens_text(review),
        format_duration(review.llm_duration_ms) if review.llm_duration_ms else "-",
    )
    console.print(table)


def _print_suggestions(review: Review, severity: str) -> None:
    suggestions = filter_suggestions(review, severity)
    if not suggestions:
        console.print("[dim]No fix suggestions.[/dim]")
        return

    console.print(f"\n[bold]Fix suggestions[/bold] ({len(suggestions)})")
    for suggestion in suggestions:
        category = f" [dim]{escape(suggestion.category)}[/dim]" if suggestion.category else ""
        console.print(
            f"\n{severity_tag(suggestion.severity)}{category}  "
            f"[bold]{escape(suggestion.file_path)}:{suggestion.line_range}[/bold]"
        )
        console.print(f"  {escape(suggestion.description)}")
        if suggestion.suggestion:
            console.print(f"  [green]→ {escape(suggestion.suggestion)}[/green]")
        if suggestion.code_snippet:
            console.print(Syntax(suggestion.code_snippet, _lexer_for(suggestion.file_path), line_numbers=False))


def _lexer_for(path: str) -> str:
    suffix = path.rsplit(".", 1)[-1].lower() if "." in path else ""
    return {
        "py": "python",
        "go": "go",
        "js": "javascript",
        "ts": "typescript",
        "tsx": "tsx",
        "java": "java",
        "rb": "ruby",
        "rs": "rust",
        "sql": "sql",
        "yml": "yaml",
        "yaml": "yaml",
    }.get(suffix, "text")
