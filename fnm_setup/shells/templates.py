"""Per-shell activation templates.

Each entry names the startup files (or store entry) a shell reads, the exact
text that activates fnm there, and what to do after the files are written.
Adding a shell means adding a table entry.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from fnm_setup.config import Settings
from fnm_setup.types import (
    FileContentTarget,
    FileLineTarget,
    MutationTarget,
    PostApply,
    Shell,
    StoreValueTarget,
)

ENV_FLAGS = "--use-on-cd --version-file-strategy=recursive"
GUARD_VAR = "FNM_AUTORUN_GUARD"

# (profile directory under Documents, PowerShell host that loads it)
POWERSHELL_PROFILES: tuple[tuple[str, str], ...] = (
    ("WindowsPowerShell", "powershell"),
    ("PowerShell", "pwsh"),
)
POWERSHELL_PROFILE_NAME = "Microsoft.PowerShell_profile.ps1"


def powershell_snippet(tool: str) -> str:
    return f"{tool} env {ENV_FLAGS} | Out-String | Invoke-Expression"


def bash_snippet(tool: str) -> str:
    return f'eval "$({tool} env {ENV_FLAGS} --shell bash)"'


def cmd_launcher(tool: str) -> str:
    """Batch file run by every new cmd.exe through the AutoRun value.

    Lines are ``@``-prefixed rather than using ``echo off``, which would hide
    the interactive prompt. The guard variable stops the ``for /f`` child
    shell from re-entering the launcher.
    """
    lines = [
        f"@if defined {GUARD_VAR} goto :eof",
        f'@set "{GUARD_VAR}=1"',
        f"@where {tool} >nul 2>nul || goto :eof",
        f"@for /f \"tokens=*\" %%z in ('{tool} env {ENV_FLAGS} --shell cmd') do @call %%z",
    ]
    return "\r\n".join(lines) + "\r\n"


def autorun_entry(settings: Settings) -> str:
    path = str(settings.launcher_path)
    return f'"{path}"' if any(c.isspace() for c in path) else path


def _plan_powershell(settings: Settings) -> list[MutationTarget]:
    line = powershell_snippet(settings.tool)
    return [
        FileLineTarget(path=settings.documents / folder / POWERSHELL_PROFILE_NAME, line=line)
        for folder, _ in POWERSHELL_PROFILES
    ]


def _plan_bash(settings: Settings) -> list[MutationTarget]:
    return [FileLineTarget(path=settings.home / ".bashrc", line=bash_snippet(settings.tool))]


def _plan_cmd(settings: Settings) -> list[MutationTarget]:
    return [
        FileContentTarget(path=settings.launcher_path, content=cmd_launcher(settings.tool)),
        StoreValueTarget(
            key=settings.autorun_key,
            name=settings.autorun_name,
            value=autorun_entry(settings),
            separator=settings.autorun_separator,
        ),
    ]


@dataclass(frozen=True)
class ShellTemplate:
    shell: Shell
    title: str
    post_apply: PostApply
    plan: Callable[[Settings], list[MutationTarget]] = field(repr=False)


TEMPLATES: dict[Shell, ShellTemplate] = {
    Shell.powershell: ShellTemplate(
        Shell.powershell, "PowerShell", PostApply.in_place_reload, _plan_powershell
    ),
    Shell.bash: ShellTemplate(Shell.bash, "Bash", PostApply.no_reload, _plan_bash),
    Shell.cmd: ShellTemplate(Shell.cmd, "cmd", PostApply.registry_autorun, _plan_cmd),
}
