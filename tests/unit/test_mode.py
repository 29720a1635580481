from __future__ import annotations

import pytest

from fnm_setup.mode import report_action, should_apply, should_mutate
from fnm_setup.types import ExecutionMode


@pytest.mark.parametrize(
    ("mode", "apply", "mutate"),
    [
        (ExecutionMode.apply, True, True),
        (ExecutionMode.dry_run, False, True),
        (ExecutionMode.detect_only, False, False),
    ],
)
def test_mode_gates(mode, apply, mutate) -> None:
    assert should_apply(mode) is apply
    assert should_mutate(mode) is mutate


def test_report_action_shapes_match(reporter) -> None:
    report_action(reporter, ExecutionMode.apply, "append to x")
    report_action(reporter, ExecutionMode.dry_run, "append to x")

    assert reporter.messages == [("success", "append to x"), ("info", "[dry-run] append to x")]
