"""Rendering helpers: status tags, scores and text bar charts."""

from __future__ import annotations

import logging

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from reviewdesk_core.exceptions import UnknownStatusError
from reviewdesk_core.models import Review
from reviewdesk_core.status import (
    SEVERITY_CONFIG,
    WEBHOOK_STATUS_CONFIG,
    Severity,
    get_status_config,
    webhook_status,
)
from reviewdesk_core.utils.formatting import format_tokens, score_color

logger = logging.getLogger(__name__)

BAR_WIDTH = 30


def status_tag(status: str) -> str:
    try:
        config = get_status_config(status)
    except UnknownStatusError:
        logger.warning("Unknown review status %r", status)
        return f"[bold red]? {escape(status)}[/bold red]"
    return f"[{config.style}]{config.icon} {config.text}[/{config.style}]"


def severity_tag(severity: str) -> str:
    try:
        config = SEVERITY_CONFIG[Severity.parse(severity)]
    except UnknownStatusError:
        logger.warning("Unknown severity %r", severity)
        return f"[bold red]? {escape(severity)}[/bold red]"
    return f"[{config.style}]{config.text}[/{config.style}]"


def webhook_tag(webhook_id: int | None, last_test_status: str | None) -> str:
    config = WEBHOOK_STATUS_CONFIG[webhook_status(webhook_id, last_test_status)]
    return f"[{config.style}]{config.text}[/{config.style}]"


def score_text(review: Review) -> str:
    """Score for a finished review, "-" otherwise."""
    if review.status != "completed" or review.score == 0:
        return "[dim]-[/dim]"
    color = score_color(review.score)
    return f"[bold {color}]{review.score}[/bold {color}]"


def tokens_text(review: Review) -> str:
    if review.status != "completed" or review.total_tokens == 0:
        return "[dim]-[/dim]"
    return format_tokens(review.total_tokens)


def bar(value: float, maximum: float, style: str = "cyan", width: int = BAR_WIDTH) -> Text:
    filled = 0 if maximum <= 0 else round(width * value / maximum)
    return Text("█" * max(0, min(width, filled)), style=style)


def bar_chart(title: str, rows: list[tuple[str, float, str]], value_format=str) -> Table:
    """Horizontal bar chart: one (label, value, style) row per bar."""
    maximum = max((value for _, value, _ in rows), default=0)
    table = Table(title=title, show_header=False, box=None, padding=(0, 1))
    table.add_column("Label", style="bold")
    table.add_column("Bar")
    table.add_column("Value", justify="right")
    for label, value, style in rows:
        table.add_row(label, bar(value, maximum, style), value_format(value))
    return table
