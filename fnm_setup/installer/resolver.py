"""Command lookup with well-known-location fallback.

A package-manager install usually leaves the running process with a stale
``PATH``. The resolver therefore falls back to a fixed list of install
locations and, when one matches, prepends its directory to the in-process
``PATH`` so later calls in the same run find the tool. Nothing here is
persisted.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Sequence
from pathlib import Path

from fnm_setup.config import expand_vars
from fnm_setup.errors import CommandFailedError
from fnm_setup.host import Host
from fnm_setup.logging import get_logger
from fnm_setup.mode import report_action, should_apply, should_mutate
from fnm_setup.types import ExecutionMode, ToolPresence

log = get_logger(__name__)

MACHINE_ENV_KEY = r"SYSTEM\CurrentControlSet\Control\Session Manager\Environment"
USER_ENV_KEY = "Environment"


def _norm(entry: str) -> str:
    return os.path.normcase(os.path.normpath(entry.strip().strip('"')))


class CommandResolver:
    def __init__(self, host: Host, mode: ExecutionMode) -> None:
        self.host = host
        self.mode = mode

    @property
    def search_path(self) -> list[str]:
        raw = self.host.environ.get("PATH", "")
        return [p for p in raw.split(os.pathsep) if p]

    def which(self, name: str) -> str | None:
        return shutil.which(name, path=os.pathsep.join(self.search_path))

    def is_invocable(self, name: str) -> bool:
        return self.which(name) is not None

    def resolve_fallback_path(self, name: str, candidates: Sequence[Path]) -> Path | None:
        """Return *name*'s location, probing *candidates* in order if needed."""
        found = self.which(name)
        if found:
            return Path(found)
        for candidate in candidates:
            if candidate.is_file():
                log.debug("fallback location matched", extra={"tool": name, "path": str(candidate)})
                self.extend_search_path(candidate.parent)
                return candidate
        return None

    def extend_search_path(self, directory: Path) -> None:
        if not should_mutate(self.mode):
            return
        entries = self.search_path
        if _norm(str(directory)) in {_norm(p) for p in entries}:
            return
        if should_apply(self.mode):
            self.host.environ["PATH"] = os.pathsep.join([str(directory), *entries])
        report_action(
            self.host.reporter, self.mode, f"prepend {directory} to PATH for this session"
        )

    def refresh_search_path(self) -> list[str]:
        """Merge the persisted machine and user ``Path`` values into ``PATH``.

        Returns the entries that were appended. Hosts without a registry have
        nothing to merge.
        """
        persisted: list[str] = []
        for store, key in (
            (self.host.machine_store, MACHINE_ENV_KEY),
            (self.host.user_store, USER_ENV_KEY),
        ):
            if store is None:
                continue
            raw = store.get(key, "Path") or ""
            persisted.extend(
                expand_vars(p, self.host.environ) for p in raw.split(";") if p.strip()
            )

        current = self.search_path
        seen = {_norm(p) for p in current}
        added: list[str] = []
        for entry in persisted:
            if _norm(entry) not in seen:
                seen.add(_norm(entry))
                added.append(entry)
        if added and should_apply(self.mode):
            self.host.environ["PATH"] = os.pathsep.join([*current, *added])
            log.debug("search path refreshed", extra={"added": added})
        return added

    def probe(self, name: str, candidates: Sequence[Path] = ()) -> ToolPresence:
        """Locate *name* and read its ``--version`` output."""
        path = self.resolve_fallback_path(name, candidates)
        if path is None:
            return ToolPresence(present=False)
        try:
            version = self.host.execute([str(path), "--version"], timeout=30)
        except CommandFailedError:
            version = None
        return ToolPresence(present=True, path=str(path), version=version or None)
