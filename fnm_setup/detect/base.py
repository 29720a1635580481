"""Read-only environment inspection.

Runs the target-tool probe plus two independent conflict checks and returns a
single report. Nothing in this module writes to disk, the registry or ``PATH``
beyond what the resolver's mode allows, and no finding ever aborts the run.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from fnm_setup.config import Settings
from fnm_setup.host import Host
from fnm_setup.installer.resolver import CommandResolver
from fnm_setup.types import ConflictFinding, Severity, ToolPresence


class DetectReport(BaseModel):
    """Normalized detection result.

    Attributes
    ----------
    tool: ToolPresence
        Whether fnm is reachable, where, and its reported version.
    findings: list[ConflictFinding]
        Advisory conflicts (other version managers, system Node.js).
    """

    tool: ToolPresence = Field(default_factory=ToolPresence)
    findings: list[ConflictFinding] = []


def detect_environment(settings: Settings, host: Host, resolver: CommandResolver) -> DetectReport:
    from .runtime import detect_system_runtime
    from .version_managers import detect_alternate_manager

    report = DetectReport(tool=resolver.probe(settings.tool, settings.tool_locations))

    alternate = detect_alternate_manager(
        host.environ, settings.alternate_manager_env, settings.alternate_manager_paths
    )
    if alternate:
        report.findings.append(alternate)

    # A system node next to an installed fnm is not a conflict.
    if not report.tool.present:
        runtime = detect_system_runtime(settings.runtime, resolver, host)
        if runtime:
            report.findings.append(runtime)
    return report


def print_findings(report: DetectReport, host: Host) -> None:
    reporter = host.reporter
    tool = report.tool
    if tool.present:
        reporter.success(f"fnm found at {tool.path} ({tool.version or 'version unknown'})")
    else:
        reporter.info("fnm is not installed")
    for finding in report.findings:
        text = finding.message if not finding.remedy else f"{finding.message}. {finding.remedy}."
        if finding.severity is Severity.warning:
            reporter.warn(text)
        else:
            reporter.info(text)
    if not report.findings:
        reporter.info("No conflicting Node.js installations detected")
