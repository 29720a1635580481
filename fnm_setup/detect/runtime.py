"""System-wide Node.js detection."""

from __future__ import annotations

from fnm_setup.errors import CommandFailedError
from fnm_setup.host import Host
from fnm_setup.installer.resolver import CommandResolver
from fnm_setup.types import ConflictFinding, FindingSource, Severity


def detect_system_runtime(
    runtime: str, resolver: CommandResolver, host: Host
) -> ConflictFinding | None:
    path = resolver.which(runtime)
    if path is None:
        return None
    try:
        version = host.execute([path, "--version"], timeout=30)
    except CommandFailedError:
        version = "unknown version"
    return ConflictFinding(
        source=FindingSource.system_runtime,
        severity=Severity.warning,
        message=f"System-wide {runtime} {version} found at {path}",
        remedy=f"Uninstall the system-wide {runtime} to avoid conflicts with fnm-managed versions",
    )
