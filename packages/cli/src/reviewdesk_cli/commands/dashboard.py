"""dashboard command: statistics, trends and token usage on one screen."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from reviewdesk_cli.context import AppContext, pass_app
from reviewdesk_cli.guard import requires_route
from reviewdesk_cli.render import bar_chart, score_text, status_tag, tokens_text
from reviewdesk_core.routes import Routes
from reviewdesk_core.utils.formatting import (
    format_date,
    format_duration,
    format_time,
    format_tokens,
    score_color,
    success_rate_color,
)
from reviewdesk_core.views.dashboard import TREND_DAYS, DashboardView

console = Console()

_EMPTY = "[dim]No data yet[/dim]"


@click.command("dashboard")
@pass_app
@requires_route(Routes.HOME)
def dashboard_cmd(app: AppContext):
    """Show review statistics, the last 30 days of activity and LLM token usage."""

    async def _load():
        async with app.client() as client:
            view = DashboardView(client, app.handler)
            await view.load()
            return view

    view = app.run(_load())
    _print_stats(view)
    _print_distributions(view)
    _print_trends(view)
    _print_token_usage(view)
    _print_recent(view)


def _print_stats(view: DashboardView) -> None:
    stats = view.stats
    table = Table(title="Reviews", show_header=False, box=None, padding=(0, 2))
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total", str(stats.total_reviews))
    table.add_row("Completed", f"[green]{stats.completed_reviews}[/green]")
    table.add_row("Pending", str(stats.pending_reviews))
    table.add_row("Failed", f"[red]{stats.failed_reviews}[/red]")
    color = score_color(stats.average_score)
    table.add_row("Average score", f"[{color}]{stats.average_score:.1f}[/{color}]")
    table.add_row("Issues found", str(stats.total_issues_found))
    console.print(table)


def _print_distributions(view: DashboardView) -> None:
    stats = view.stats
    console.print()
    if view.has_issue_distribution:
        console.print(
            bar_chart(
                "Issues by severity",
                [
                    ("Critical", stats.critical_issues, "bold red"),
                    ("High", stats.high_issues, "dark_orange"),
                    ("Medium", stats.medium_issues, "yellow"),
                    ("Low", stats.low_issues, "green"),
                ],
            )
        )
    else:
        console.print("[bold]Issues by severity[/bold]  " + _EMPTY)

    console.print()
    if view.has_category_distribution:
        console.print(
            bar_chart(
                "Issues by category",
                [
                    ("Security", stats.security_issues, "red"),
                    ("Performance", stats.performance_issues, "yellow"),
                    ("Quality", stats.quality_issues, "blue"),
                ],
            )
        )
    else:
        console.print("[bold]Issues by category[/bold]  " + _EMPTY)


def _print_trends(view: DashboardView) -> None:
    console.print()
    if not view.has_trends:
        console.print(f"[bold]Review trend ({TREND_DAYS} days)[/bold]  " + _EMPTY)
        return
    console.print(
        bar_chart(
            f"Review trend ({TREND_DAYS} days)",
            [(format_date(p.date), p.review_count, "cyan") for p in view.trends],
        )
    )


def _print_token_usage(view: DashboardView) -> None:
    usage = view.token_usage
    summary = usage.summary
    console.print()
    table = Table(title="LLM usage", show_header=False, box=None, padding=(0, 2))
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Calls", f"{summary.total_calls} ({summary.failed_calls} failed)")
    rate_color = success_rate_color(summary.success_rate)
    table.add_row("Success rate", f"[{rate_color}]{summary.success_rate:.1f}%[/{rate_color}]")
    table.add_row("Total tokens", format_tokens(summary.total_tokens))
    table.add_row("Prompt / completion", f"{format_tokens(summary.prompt_tokens)} / {format_tokens(summary.completion_tokens)}")
    table.add_row("Average duration", format_duration(summary.avg_duration_ms))
    console.print(table)

    console.print()
    if view.has_token_trend:
        console.print(
            bar_chart(
                "Daily tokens",
                [(format_date(d.date), d.total_tokens, "magenta") for d in usage.daily_trend],
                value_format=format_tokens,
            )
        )
    else:
        console.print("[bold]Daily tokens[/bold]  " + _EMPTY)

    console.print()
    if view.has_top_repositories:
        console.print(
            bar_chart(
                "Top repositories by tokens",
                [(escape(r.display_name), r.total_tokens, "magenta") for r in usage.top_repositories],
                value_format=format_tokens,
            )
        )
    else:
        console.print("[bold]Top repositories by tokens[/bold]  " + _EMPTY)


def _print_recent(view: DashboardView) -> None:
    console.print()
    if not view.recent:
        console.print("[bold]Recent reviews[/bold]  [dim]No reviews yet[/dim]")
        return
    table = Table(title="Recent reviews", show_lines=False)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Repository")
    table.add_column("MR")
    table.add_column("Author")
    table.add_column("Status")
    table.add_column("Score", justify="right")
    table.add_column("Tokens", justify="right")
    table.add_column("Created")
    for review in view.recent:
        table.add_row(
            str(review.id),
            escape(review.repository.name or "-"),
            f"!{review.mr_iid} {escape(review.mr_title)}",
            escape(review.mr_author or "-"),
            status_tag(review.status),
            score_text(review),
            tokens_text(review),
            format_time(review.created_at),
        )
    console.print(table)
