"""fnm collaborator: install, set default and activate Node.js versions."""

from __future__ import annotations

from fnm_setup.host import Host
from fnm_setup.mode import report_action, should_apply
from fnm_setup.types import ExecutionMode, VersionRequest


class VersionManager:
    """Thin wrapper over the fnm binary.

    Every method raises ``CommandFailedError`` on failure; callers decide
    whether that is fatal.
    """

    def __init__(self, executable: str, *, host: Host, mode: ExecutionMode) -> None:
        self.executable = executable
        self.host = host
        self.mode = mode

    def _call(self, args: list[str], *, timeout: float | None = 600) -> str | None:
        argv = [self.executable, *args]
        report_action(self.host.reporter, self.mode, f"run {' '.join(argv)}")
        if not should_apply(self.mode):
            return None
        return self.host.execute(argv, timeout=timeout)

    def install(self, request: VersionRequest) -> None:
        self._call(request.install_args, timeout=None)

    def set_default(self, request: VersionRequest) -> None:
        self._call(["default", request.selector])

    def use(self, request: VersionRequest) -> None:
        self._call(["use", request.selector])

    def version(self) -> str:
        return self.host.execute([self.executable, "--version"], timeout=30)
