"""Immutable run settings built once from the process environment."""

from __future__ import annotations

import re
import sys
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from fnm_setup.registry import KeyValueStore

TOOL = "fnm"
PACKAGE_ID = "Schniz.fnm"
INSTALLER = "winget"
RUNTIME = "node"

USER_SHELL_FOLDERS_KEY = r"Software\Microsoft\Windows\CurrentVersion\Explorer\User Shell Folders"
AUTORUN_KEY = r"Software\Microsoft\Command Processor"
AUTORUN_NAME = "AutoRun"
AUTORUN_SEPARATOR = " & "
LAUNCHER_NAME = "fnm_init.cmd"

_VAR_PATTERN = re.compile(r"%([^%]+)%")


def expand_vars(value: str, environ: Mapping[str, str]) -> str:
    """Expand ``%NAME%`` references; unknown names are left as-is."""

    def _sub(match: re.Match[str]) -> str:
        name = match.group(1)
        for key, val in environ.items():
            if key.upper() == name.upper():
                return val
        return match.group(0)

    return _VAR_PATTERN.sub(_sub, value)


def _home(environ: Mapping[str, str]) -> Path:
    for var in ("USERPROFILE", "HOME"):
        if environ.get(var):
            return Path(environ[var])
    return Path.home()


def documents_dir(
    home: Path, environ: Mapping[str, str], user_store: KeyValueStore | None
) -> Path:
    """Return the current user's Documents folder.

    The per-user shell-folder registration is authoritative (OneDrive can
    redirect it); ``~/Documents`` is used only when that lookup yields nothing.
    """
    if user_store is not None:
        raw = user_store.get(USER_SHELL_FOLDERS_KEY, "Personal")
        if raw:
            expanded = expand_vars(raw, environ).strip()
            if expanded:
                return Path(expanded)
    return home / "Documents"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    home: Path
    documents: Path
    tool: str = TOOL
    package_id: str = PACKAGE_ID
    installer: str = INSTALLER
    runtime: str = RUNTIME
    tool_locations: tuple[Path, ...] = ()
    installer_locations: tuple[Path, ...] = ()
    alternate_manager_env: tuple[str, ...] = ("NVM_HOME", "NVM_SYMLINK")
    alternate_manager_paths: tuple[Path, ...] = ()
    launcher_path: Path
    autorun_key: str = AUTORUN_KEY
    autorun_name: str = AUTORUN_NAME
    autorun_separator: str = AUTORUN_SEPARATOR

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str],
        user_store: KeyValueStore | None = None,
        *,
        windows: bool | None = None,
    ) -> Settings:
        windows = sys.platform == "win32" if windows is None else windows
        home = _home(environ)
        local = Path(environ.get("LOCALAPPDATA") or home / "AppData" / "Local")
        roaming = Path(environ.get("APPDATA") or home / "AppData" / "Roaming")
        program_files = Path(environ.get("ProgramFiles") or r"C:\Program Files")
        program_data = Path(environ.get("ProgramData") or r"C:\ProgramData")

        if windows:
            tool_locations = (
                local / "Microsoft" / "WinGet" / "Links" / "fnm.exe",
                local
                / "Microsoft"
                / "WinGet"
                / "Packages"
                / "Schniz.fnm_Microsoft.Winget.Source_8wekyb3d8bbwe"
                / "fnm.exe",
                home / "scoop" / "shims" / "fnm.exe",
                home / ".cargo" / "bin" / "fnm.exe",
                program_data / "chocolatey" / "bin" / "fnm.exe",
            )
            installer_locations = (
                local / "Microsoft" / "WindowsApps" / "winget.exe",
            )
        else:
            tool_locations = (
                home / ".local" / "share" / "fnm" / "fnm",
                home / ".cargo" / "bin" / "fnm",
                Path("/opt/homebrew/bin/fnm"),
                Path("/usr/local/bin/fnm"),
            )
            installer_locations = ()

        return cls(
            home=home,
            documents=documents_dir(home, environ, user_store),
            tool_locations=tool_locations,
            installer_locations=installer_locations,
            alternate_manager_paths=(
                roaming / "nvm" / "nvm.exe",
                program_files / "nvm" / "nvm.exe",
                local / "nvm" / "nvm.exe",
            ),
            launcher_path=home / LAUNCHER_NAME,
        )
