"""winget collaborator: install a package by identifier."""

from __future__ import annotations

from fnm_setup.host import Host
from fnm_setup.mode import report_action, should_apply
from fnm_setup.types import ExecutionMode


def winget_install_argv(executable: str, package_id: str) -> list[str]:
    return [
        executable,
        "install",
        "--id",
        package_id,
        "--exact",
        "--source",
        "winget",
        "--accept-source-agreements",
        "--accept-package-agreements",
        "--disable-interactivity",
    ]


def install_package(executable: str, package_id: str, *, host: Host, mode: ExecutionMode) -> None:
    """Install *package_id*; raises ``CommandFailedError`` when winget fails."""
    argv = winget_install_argv(executable, package_id)
    report_action(host.reporter, mode, f"run {' '.join(argv)}")
    if should_apply(mode):
        host.execute(argv, timeout=None)
