"""Setup orchestration: detect → install → configure shells → node → validate."""

from __future__ import annotations

from dataclasses import dataclass, field

from fnm_setup.config import Settings
from fnm_setup.detect.base import DetectReport, detect_environment, print_findings
from fnm_setup.errors import CommandFailedError, InstallerUnavailableError, ToolUnusableError
from fnm_setup.host import Host
from fnm_setup.installer.fnm import VersionManager
from fnm_setup.installer.packages import install_package
from fnm_setup.installer.resolver import CommandResolver
from fnm_setup.logging import get_logger
from fnm_setup.mode import report_action, should_apply
from fnm_setup.shells.configure import configure_shell, shell_guidance
from fnm_setup.types import ExecutionContext, ExecutionMode, ShellOutcome, VersionRequest

log = get_logger(__name__)


@dataclass
class RunResult:
    exit_code: int
    detection: DetectReport
    shells: list[ShellOutcome] = field(default_factory=list)
    tool_version: str | None = None


def _ensure_tool(
    context: ExecutionContext,
    settings: Settings,
    host: Host,
    resolver: CommandResolver,
    detection: DetectReport,
) -> str:
    """Return the fnm executable to use, installing it through winget if absent."""
    if detection.tool.present and detection.tool.path:
        return detection.tool.path

    installer = resolver.resolve_fallback_path(settings.installer, settings.installer_locations)
    if installer is None:
        raise InstallerUnavailableError(
            f"{settings.tool} is not installed and {settings.installer} is not available. "
            f"Install App Installer from the Microsoft Store (it provides {settings.installer}) "
            f"or install {settings.tool} manually, then re-run."
        )

    host.reporter.info(f"Installing {settings.tool} ({settings.package_id}) with {settings.installer}")
    try:
        install_package(str(installer), settings.package_id, host=host, mode=context.mode)
    except CommandFailedError as exc:
        # winget also exits non-zero when the package is already present;
        # the re-resolve below decides whether this is fatal.
        host.reporter.warn(f"{settings.installer} reported a problem: {exc}")

    if not should_apply(context.mode):
        return settings.tool

    added = resolver.refresh_search_path()
    if added:
        host.reporter.info(f"Refreshed PATH from the registry: {', '.join(added)}")
    path = resolver.resolve_fallback_path(settings.tool, settings.tool_locations)
    if path is None:
        raise ToolUnusableError(
            f"{settings.tool} was installed but cannot be found in this session. "
            "Open a new terminal window and re-run this command."
        )
    host.reporter.success(f"{settings.tool} installed at {path}")
    return str(path)


def _install_node(request: VersionRequest, manager: VersionManager, host: Host) -> None:
    reporter = host.reporter
    steps = (
        ("install", manager.install, "Check your network connection and retry"),
        ("set default", manager.set_default, "Run `fnm default` manually in a new window"),
    )
    for label, step, remedy in steps:
        try:
            step(request)
        except CommandFailedError as exc:
            reporter.warn(f"Node.js {request.raw} {label} failed ({exc}). {remedy}.")

    try:
        manager.use(request)
    except CommandFailedError:
        reporter.info(
            f"Node.js {request.raw} becomes active in new sessions; "
            "open a new terminal window to use it"
        )


def _validate(
    context: ExecutionContext, settings: Settings, manager: VersionManager, host: Host
) -> str | None:
    if not should_apply(context.mode):
        report_action(host.reporter, context.mode, f"check {settings.tool} --version")
        return None
    try:
        version = manager.version()
    except CommandFailedError as exc:
        host.reporter.warn(
            f"Could not query {settings.tool} --version ({exc}); "
            "open a new terminal window and run it there"
        )
        return None
    host.reporter.success(f"{settings.tool} is ready: {version}")
    return version


def run_setup(context: ExecutionContext, settings: Settings, host: Host) -> RunResult:
    """Run the full setup sequence.

    Raises ``InstallerUnavailableError`` or ``ToolUnusableError`` for the two
    blocking cases; every other failure is reported and the run completes
    with exit code 0.
    """
    log.debug(
        "setup started",
        extra={"mode": context.mode.value, "shells": [s.value for s in context.shells]},
    )
    resolver = CommandResolver(host, context.mode)

    detection = detect_environment(settings, host, resolver)
    print_findings(detection, host)
    result = RunResult(exit_code=0, detection=detection, tool_version=detection.tool.version)

    if context.mode is ExecutionMode.detect_only:
        for shell in context.shells:
            for line in shell_guidance(shell, settings):
                host.reporter.info(line)
        host.reporter.info("Detect-only mode: no changes were made")
        return result

    executable = _ensure_tool(context, settings, host, resolver, detection)

    for shell in context.shells:
        result.shells.append(configure_shell(shell, context, settings, host))

    manager = VersionManager(executable, host=host, mode=context.mode)
    if context.node_version:
        _install_node(VersionRequest(raw=context.node_version), manager, host)

    result.tool_version = _validate(context, settings, manager, host) or result.tool_version
    return result
