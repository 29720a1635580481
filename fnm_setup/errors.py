"""Error taxonomy.

Blocking errors stop the run with exit code 1; everything else is caught where
the collaborator was invoked and downgraded to a warning.
"""

from __future__ import annotations


class SetupError(Exception):
    pass


class InstallerUnavailableError(SetupError):
    """The package manager needed to install fnm is not invocable."""


class ToolUnusableError(SetupError):
    """fnm was installed but still cannot be invoked in this session."""


class CommandFailedError(SetupError):
    def __init__(self, argv: list[str], returncode: int | None, output: str = "") -> None:
        self.argv = argv
        self.returncode = returncode
        self.output = output
        detail = f"exit code {returncode}" if returncode is not None else "could not start"
        super().__init__(f"{' '.join(argv)} failed ({detail})")
