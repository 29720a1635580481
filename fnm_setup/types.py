"""Shared Pydantic models and enums."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Shell(str, Enum):
    powershell = "powershell"
    bash = "bash"
    cmd = "cmd"


SHELL_ALIASES: dict[str, Shell] = {
    "powershell": Shell.powershell,
    "pwsh": Shell.powershell,
    "ps": Shell.powershell,
    "bash": Shell.bash,
    "sh": Shell.bash,
    "git-bash": Shell.bash,
    "cmd": Shell.cmd,
}


class ExecutionMode(str, Enum):
    apply = "apply"
    dry_run = "dry-run"
    detect_only = "detect-only"


class Severity(str, Enum):
    info = "info"
    warning = "warning"


class FindingSource(str, Enum):
    other_version_manager = "other-version-manager"
    system_runtime = "system-runtime"


class PostApply(str, Enum):
    no_reload = "no-reload"
    in_place_reload = "in-place-reload"
    registry_autorun = "registry-autorun"


class MutationOutcome(str, Enum):
    unchanged = "unchanged"
    applied = "applied"
    planned = "planned"
    skipped = "skipped"


class ExecutionContext(BaseModel):
    """Per-invocation choices, immutable once built."""

    model_config = ConfigDict(frozen=True)

    shells: tuple[Shell, ...]
    mode: ExecutionMode = ExecutionMode.apply
    node_version: str | None = None

    @field_validator("shells")
    @classmethod
    def _dedupe_shells(cls, value: tuple[Shell, ...]) -> tuple[Shell, ...]:
        if not value:
            raise ValueError("at least one shell must be selected")
        return tuple(dict.fromkeys(value))

    @field_validator("node_version")
    @classmethod
    def _blank_version_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class ToolPresence(BaseModel):
    present: bool = False
    path: str | None = None
    version: str | None = None


class FileLineTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["line"] = "line"
    path: Path
    line: str


class FileContentTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["content"] = "content"
    path: Path
    content: str


class StoreValueTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["store"] = "store"
    key: str
    name: str
    value: str
    separator: str


MutationTarget = Union[FileLineTarget, FileContentTarget, StoreValueTarget]


class ConflictFinding(BaseModel):
    source: FindingSource
    severity: Severity = Severity.warning
    message: str
    remedy: str | None = None


class TargetResult(BaseModel):
    target: str
    outcome: MutationOutcome


class ShellOutcome(BaseModel):
    shell: Shell
    results: list[TargetResult] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)


class VersionRequest(BaseModel):
    """A requested Node.js version, normalized for fnm subcommands.

    ``lts`` and ``latest`` map onto fnm's ``--lts`` / ``--latest`` install flags
    and the aliases fnm creates for them; anything else is passed through.
    """

    model_config = ConfigDict(frozen=True)

    raw: str

    @property
    def selector(self) -> str:
        token = self.raw.strip().lstrip("-").lower()
        if token in {"lts", "lts-latest", "lts/*"}:
            return "lts-latest"
        if token in {"latest", "current", "node"}:
            return "latest"
        return self.raw.strip().removeprefix("v")

    @property
    def install_args(self) -> list[str]:
        if self.selector == "lts-latest":
            return ["install", "--lts"]
        if self.selector == "latest":
            return ["install", "--latest"]
        return ["install", self.selector]
