"""Shell configurators.

``plan_shell`` is a pure function of the settings; ``configure_shell`` feeds
the planned targets through the idempotent mutators and then runs the shell's
post-apply step. Configurators share no state, so any order or subset of
shells converges on the same files and store entries.
"""

from __future__ import annotations

from pathlib import Path

from fnm_setup.config import Settings
from fnm_setup.errors import CommandFailedError
from fnm_setup.host import Host
from fnm_setup.installer.resolver import CommandResolver
from fnm_setup.mode import report_action, should_apply, should_mutate
from fnm_setup.mutate.lines import ensure_file_content, ensure_line_in_file
from fnm_setup.mutate.store import ensure_value_in_store
from fnm_setup.shells.templates import (
    POWERSHELL_PROFILE_NAME,
    POWERSHELL_PROFILES,
    TEMPLATES,
    ShellTemplate,
)
from fnm_setup.types import (
    ExecutionContext,
    FileContentTarget,
    FileLineTarget,
    MutationOutcome,
    MutationTarget,
    PostApply,
    Shell,
    ShellOutcome,
    StoreValueTarget,
    TargetResult,
)


def plan_shell(shell: Shell, settings: Settings) -> list[MutationTarget]:
    return TEMPLATES[shell].plan(settings)


def describe_target(target: MutationTarget) -> str:
    if isinstance(target, StoreValueTarget):
        return f"{target.key}\\{target.name}"
    return str(target.path)


def apply_target(target: MutationTarget, context: ExecutionContext, host: Host) -> MutationOutcome:
    mode = context.mode
    reporter = host.reporter
    if isinstance(target, FileLineTarget):
        return ensure_line_in_file(target.path, target.line, mode=mode, reporter=reporter)
    if isinstance(target, FileContentTarget):
        return ensure_file_content(target.path, target.content, mode=mode, reporter=reporter)

    if host.user_store is None:
        reporter.warn(
            f"No registry on this host; add {target.value} to "
            f"{describe_target(target)} manually on Windows"
        )
        return MutationOutcome.skipped
    return ensure_value_in_store(
        host.user_store,
        target.key,
        target.name,
        target.value,
        separator=target.separator,
        mode=mode,
        reporter=reporter,
    )


def _reload_profiles(
    template: ShellTemplate, settings: Settings, context: ExecutionContext, host: Host
) -> list[str]:
    resolver = CommandResolver(host, context.mode)
    notes: list[str] = []
    for folder, executable in POWERSHELL_PROFILES:
        profile = settings.documents / folder / POWERSHELL_PROFILE_NAME
        if not should_apply(context.mode):
            action = f"check that {profile} loads in {executable}"
            report_action(host.reporter, context.mode, action)
            continue
        if not profile.is_file():
            continue
        found = resolver.which(executable)
        if found is None:
            notes.append(f"{executable} not found; {profile} loads in the next session")
            host.reporter.info(notes[-1])
            continue
        notes.append(_check_profile_loads(Path(found), profile, template, host))
    return notes


def _check_profile_loads(
    executable: Path, profile: Path, template: ShellTemplate, host: Host
) -> str:
    """Dot-source *profile* in a throwaway host; open windows still need a manual reload."""
    quoted = str(profile).replace("'", "''")
    argv = [str(executable), "-NoLogo", "-NoProfile", "-Command", f". '{quoted}'"]
    try:
        host.execute(argv, timeout=60)
    except CommandFailedError as exc:
        note = f"{profile} failed to load ({exc}); fix it, then open a new {template.title} window"
        host.reporter.warn(note)
        return note
    host.reporter.success(f"{profile} loads cleanly in {executable.stem}")
    note = f"Run `. $PROFILE` in open {template.title} windows or open a new one"
    host.reporter.info(note)
    return note


def _post_apply(
    template: ShellTemplate, settings: Settings, context: ExecutionContext, host: Host
) -> list[str]:
    if template.post_apply is PostApply.in_place_reload:
        return _reload_profiles(template, settings, context, host)
    if template.post_apply is PostApply.registry_autorun:
        note = f"New {template.title} windows run {settings.launcher_path} automatically"
    else:
        note = f"Open a new {template.title} session to pick up fnm"
    host.reporter.info(note)
    return [note]


def configure_shell(
    shell: Shell, context: ExecutionContext, settings: Settings, host: Host
) -> ShellOutcome:
    template = TEMPLATES[shell]
    outcome = ShellOutcome(shell=shell)
    if not should_mutate(context.mode):
        return outcome
    host.reporter.info(f"Configuring {template.title}")
    for target in template.plan(settings):
        result = apply_target(target, context, host)
        outcome.results.append(TargetResult(target=describe_target(target), outcome=result))
    outcome.notes.extend(_post_apply(template, settings, context, host))
    return outcome


def shell_guidance(shell: Shell, settings: Settings) -> list[str]:
    """Human-readable description of what configuring *shell* would touch."""
    template = TEMPLATES[shell]
    lines = []
    for target in template.plan(settings):
        if isinstance(target, FileLineTarget):
            lines.append(f"{template.title}: add `{target.line}` to {target.path}")
        elif isinstance(target, FileContentTarget):
            lines.append(f"{template.title}: write launcher {target.path}")
        else:
            lines.append(
                f"{template.title}: register {target.value} in HKCU\\{describe_target(target)}"
            )
    return lines
