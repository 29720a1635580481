"""User-facing status reporting.

Core logic only talks to the small ``Reporter`` protocol; the CLI injects a
Rich-backed console implementation.
"""

from __future__ import annotations

from typing import Protocol

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fnm_setup.types import ShellOutcome


class Reporter(Protocol):
    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ConsoleReporter:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False)

    def info(self, message: str) -> None:
        self.console.print(f"[cyan]-[/cyan] {escape(message)}")

    def success(self, message: str) -> None:
        self.console.print(f"[green]OK[/green] {escape(message)}")

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]WARN[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]ERROR[/red] {escape(message)}")

    def heading(self, title: str) -> None:
        self.console.rule(escape(title))

    def summary(self, shells: list[ShellOutcome]) -> None:
        table = Table(title="Shell configuration")
        table.add_column("Shell", style="cyan")
        table.add_column("Target")
        table.add_column("Result")
        for outcome in shells:
            for item in outcome.results:
                table.add_row(outcome.shell.value, escape(item.target), item.outcome.value)
        self.console.print(table)
