"""Display helpers shared by every command that prints numbers or times."""

from __future__ import annotations

from datetime import datetime

SCORE_GOOD = 80
SCORE_FAIR = 60


def format_tokens(tokens: int) -> str:
    """1234 -> "1.2k", 1234567 -> "1.2M"."""
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}M"
    if tokens >= 1_000:
        return f"{tokens / 1_000:.1f}k"
    return str(tokens)


def format_duration(ms: float) -> str:
    """1500 -> "1.50s", 500 -> "500ms"."""
    if ms >= 1000:
        return f"{ms / 1000:.2f}s"
    return f"{ms:g}ms"


def score_color(score: float) -> str:
    if score >= SCORE_GOOD:
        return "green"
    if score >= SCORE_FAIR:
        return "yellow"
    return "red"


def success_rate_color(rate: float) -> str:
    if rate >= 95:
        return "green"
    if rate >= 80:
        return "yellow"
    return "red"


def format_time(value: str | None, fmt: str = "%Y-%m-%d %H:%M") -> str:
    """Render an ISO-8601 timestamp; "-" when absent, the raw string when unparseable."""
    if not value:
        return "-"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime(fmt)


def format_date(value: str) -> str:
    """Short month-day label for chart axes."""
    return format_time(value, "%m-%d") if value else ""
