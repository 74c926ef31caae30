"""User-visible notifications, the terminal counterpart of toast messages."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape


class Notifier:
    def __init__(self, console: Console | None = None):
        self.console = console or Console(stderr=True)

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓ {escape(message)}[/green]")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗ {escape(message)}[/red]")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]! {escape(message)}[/yellow]")

    def info(self, message: str) -> None:
        self.console.print(f"[cyan]{escape(message)}[/cyan]")
