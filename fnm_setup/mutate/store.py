"""Merge-not-overwrite updates of a key/value store entry."""

from __future__ import annotations

from fnm_setup.mode import report_action, should_apply
from fnm_setup.registry import KeyValueStore
from fnm_setup.report import Reporter
from fnm_setup.types import ExecutionMode, MutationOutcome


def merged_value(current: str | None, value: str, separator: str) -> str | None:
    """Return the new entry content, or ``None`` when *value* is already there.

    Containment is a plain substring test, so a value embedded in an unrelated
    longer entry is also treated as present.
    """
    existing = current or ""
    if not existing.strip():
        return value
    if value in existing:
        return None
    return f"{existing.rstrip()}{separator}{value}"


def ensure_value_in_store(
    store: KeyValueStore,
    key: str,
    name: str,
    value: str,
    *,
    separator: str,
    mode: ExecutionMode,
    reporter: Reporter,
) -> MutationOutcome:
    current = store.get(key, name)
    new = merged_value(current, value, separator)
    label = f"{key}\\{name}"
    if new is None:
        reporter.info(f"{label} already contains {value}")
        return MutationOutcome.unchanged

    if current and current.strip():
        report_action(reporter, mode, f"append {value} to {label} (keeping existing entries)")
    else:
        report_action(reporter, mode, f"set {label} to {value}")
    if not should_apply(mode):
        return MutationOutcome.planned

    store.set(key, name, new)
    return MutationOutcome.applied
