from __future__ import annotations

import os
from pathlib import Path

from conftest import MemoryStore, make_executable

from fnm_setup.installer.resolver import MACHINE_ENV_KEY, USER_ENV_KEY, CommandResolver
from fnm_setup.types import ExecutionMode


def test_is_invocable_uses_host_path(host, bin_dir: Path) -> None:
    resolver = CommandResolver(host, ExecutionMode.apply)
    assert not resolver.is_invocable("fnm")

    make_executable(bin_dir, "fnm")

    assert resolver.is_invocable("fnm")


def test_fallback_returns_first_existing_candidate_and_prepends(host, tmp_path: Path) -> None:
    first = tmp_path / "missing" / "fnm"
    second = make_executable(tmp_path / "links", "fnm")
    third = make_executable(tmp_path / "cargo", "fnm")
    resolver = CommandResolver(host, ExecutionMode.apply)

    found = resolver.resolve_fallback_path("fnm", [first, second, third])

    assert found == second
    assert host.environ["PATH"].split(os.pathsep)[0] == str(second.parent)
    assert resolver.is_invocable("fnm")


def test_fallback_does_not_duplicate_path_entry(host, tmp_path: Path) -> None:
    exe = make_executable(tmp_path / "links", "fnm")
    exe.chmod(0o644)  # present on disk but not picked up by which()
    host.environ["PATH"] = os.pathsep.join([str(exe.parent), host.environ["PATH"]])
    before = host.environ["PATH"]

    CommandResolver(host, ExecutionMode.apply).resolve_fallback_path("fnm", [exe])

    assert host.environ["PATH"] == before


def test_fallback_dry_run_reports_without_touching_path(host, tmp_path: Path, reporter) -> None:
    exe = make_executable(tmp_path / "links", "fnm")
    before = host.environ["PATH"]

    found = CommandResolver(host, ExecutionMode.dry_run).resolve_fallback_path("fnm", [exe])

    assert found == exe
    assert host.environ["PATH"] == before
    assert f"[dry-run] prepend {exe.parent} to PATH" in reporter.text("info")


def test_fallback_detect_only_is_silent(host, tmp_path: Path, reporter) -> None:
    exe = make_executable(tmp_path / "links", "fnm")
    before = host.environ["PATH"]

    CommandResolver(host, ExecutionMode.detect_only).resolve_fallback_path("fnm", [exe])

    assert host.environ["PATH"] == before
    assert reporter.messages == []


def test_fallback_returns_none_when_nothing_exists(host, tmp_path: Path) -> None:
    resolver = CommandResolver(host, ExecutionMode.apply)
    assert resolver.resolve_fallback_path("fnm", [tmp_path / "a" / "fnm"]) is None


def test_probe_reads_version(host, runner, bin_dir: Path) -> None:
    make_executable(bin_dir, "fnm")
    runner.on("fnm", lambda argv: (0, "fnm 1.38.1\n"))

    presence = CommandResolver(host, ExecutionMode.apply).probe("fnm")

    assert presence.present
    assert presence.version == "fnm 1.38.1"
    assert runner.calls[0][1:] == ["--version"]


def test_refresh_merges_persisted_paths(host, tmp_path: Path) -> None:
    host.environ["USERPROFILE"] = str(tmp_path / "user")
    host.machine_store = MemoryStore({(MACHINE_ENV_KEY, "Path"): r"C:\Windows;C:\Windows\System32"})
    host.user_store = MemoryStore({(USER_ENV_KEY, "Path"): "%USERPROFILE%\\links;C:\\Windows"})
    original = host.environ["PATH"]

    added = CommandResolver(host, ExecutionMode.apply).refresh_search_path()

    assert added == [r"C:\Windows", r"C:\Windows\System32", str(tmp_path / "user") + "\\links"]
    assert host.environ["PATH"] == os.pathsep.join([original, *added])


def test_refresh_without_registry_is_noop(host) -> None:
    host.user_store = None
    before = host.environ["PATH"]

    assert CommandResolver(host, ExecutionMode.apply).refresh_search_path() == []
    assert host.environ["PATH"] == before
