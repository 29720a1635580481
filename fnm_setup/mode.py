"""Execution-mode gates shared by every mutating operation."""

from __future__ import annotations

from fnm_setup.report import Reporter
from fnm_setup.types import ExecutionMode

DRY_RUN_TAG = "[dry-run]"


def should_apply(mode: ExecutionMode) -> bool:
    """True when external state may actually be written."""
    return mode is ExecutionMode.apply


def should_mutate(mode: ExecutionMode) -> bool:
    """True when the mutation path runs at all (for real or as a preview)."""
    return mode is not ExecutionMode.detect_only


def report_action(reporter: Reporter, mode: ExecutionMode, action: str) -> None:
    """Report *action* as done (apply) or as a preview line (dry-run)."""
    if mode is ExecutionMode.dry_run:
        reporter.info(f"{DRY_RUN_TAG} {action}")
    else:
        reporter.success(action)
