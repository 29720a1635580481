"""Alternate version-manager detection.

nvm-for-Windows may prompt on first run, so it is never executed here: only
its environment markers and well-known install paths are inspected.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from fnm_setup.types import ConflictFinding, FindingSource, Severity


def detect_alternate_manager(
    environ: Mapping[str, str],
    marker_vars: Sequence[str],
    candidate_paths: Sequence[Path],
) -> ConflictFinding | None:
    hits = [f"${var}" for var in marker_vars if environ.get(var)]
    hits.extend(str(p) for p in candidate_paths if p.exists())
    if not hits:
        return None
    return ConflictFinding(
        source=FindingSource.other_version_manager,
        severity=Severity.warning,
        message=f"nvm-windows detected ({', '.join(hits)})",
        remedy="Uninstall nvm-windows so it does not shadow the fnm-managed node",
    )
