"""fnm-setup CLI: install fnm and wire it into PowerShell, Bash and cmd.

Flags:
- --shells NAME (repeatable or comma-separated; default: all)
- --node-version VERSION (e.g. 22, v20.11.1, lts, latest)
- --detect-only (inspect only, never change anything)
- --dry-run (print every change without applying it)
- --verbose (debug logs on stderr)
"""

from __future__ import annotations

import typer

from fnm_setup.config import Settings
from fnm_setup.core import run_setup
from fnm_setup.errors import SetupError
from fnm_setup.host import Host
from fnm_setup.logging import set_verbose
from fnm_setup.report import ConsoleReporter
from fnm_setup.types import SHELL_ALIASES, ExecutionContext, ExecutionMode, Shell

app = typer.Typer(add_completion=False, help="Install fnm and enable automatic Node.js switching")


def parse_shells(values: list[str] | None) -> tuple[Shell, ...]:
    if not values:
        return tuple(Shell)
    shells: list[Shell] = []
    for value in values:
        for name in value.split(","):
            name = name.strip().lower()
            if not name:
                continue
            if name not in SHELL_ALIASES:
                choices = ", ".join(s.value for s in Shell)
                raise typer.BadParameter(f"unknown shell {name!r} (choose from {choices})")
            shells.append(SHELL_ALIASES[name])
    if not shells:
        raise typer.BadParameter("at least one shell is required")
    return tuple(shells)


def select_mode(detect_only: bool, dry_run: bool) -> ExecutionMode:
    if detect_only:
        return ExecutionMode.detect_only
    if dry_run:
        return ExecutionMode.dry_run
    return ExecutionMode.apply


@app.command()
def setup(
    shells: list[str] | None = typer.Option(
        None, "--shells", "-s", help="powershell, bash, cmd (repeatable or comma-separated)"
    ),
    node_version: str | None = typer.Option(
        None, "--node-version", help='Node.js version to install: "22", "lts", "latest"'
    ),
    detect_only: bool = typer.Option(
        False, "--detect-only", help="Only inspect the environment; change nothing"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show every change without applying"),
    verbose: bool = typer.Option(False, "--verbose", help="Debug logs on stderr"),
) -> None:
    set_verbose(verbose)
    try:
        selected = parse_shells(shells)
    except typer.BadParameter as exc:
        raise typer.BadParameter(str(exc), param_hint="--shells") from exc

    reporter = ConsoleReporter()
    host = Host.current(reporter)
    settings = Settings.from_env(host.environ, host.user_store)
    context = ExecutionContext(
        shells=selected, mode=select_mode(detect_only, dry_run), node_version=node_version
    )

    reporter.heading(f"fnm setup ({context.mode.value})")
    try:
        result = run_setup(context, settings, host)
    except SetupError as exc:
        reporter.error(str(exc))
        raise typer.Exit(code=1) from exc

    if result.shells:
        reporter.summary(result.shells)
    raise typer.Exit(code=result.exit_code)


if __name__ == "__main__":
    app()
