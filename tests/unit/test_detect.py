from __future__ import annotations

from pathlib import Path

from conftest import make_executable

from fnm_setup.detect.base import detect_environment, print_findings
from fnm_setup.detect.version_managers import detect_alternate_manager
from fnm_setup.installer.resolver import CommandResolver
from fnm_setup.types import ExecutionMode, FindingSource, Severity


def test_alternate_manager_from_env_var(tmp_path: Path) -> None:
    finding = detect_alternate_manager(
        {"NVM_HOME": r"C:\nvm"}, ("NVM_HOME", "NVM_SYMLINK"), (tmp_path / "nvm.exe",)
    )
    assert finding is not None
    assert finding.source is FindingSource.other_version_manager
    assert finding.severity is Severity.warning
    assert "$NVM_HOME" in finding.message
    assert finding.remedy and "Uninstall" in finding.remedy


def test_alternate_manager_from_install_path(tmp_path: Path) -> None:
    exe = tmp_path / "nvm" / "nvm.exe"
    exe.parent.mkdir()
    exe.touch()

    finding = detect_alternate_manager({}, ("NVM_HOME",), (exe,))

    assert finding is not None
    assert str(exe) in finding.message


def test_no_alternate_manager(tmp_path: Path) -> None:
    assert detect_alternate_manager({"NVM_HOME": ""}, ("NVM_HOME",), (tmp_path / "x",)) is None


def test_alternate_manager_is_never_executed(settings, host, runner, bin_dir) -> None:
    make_executable(bin_dir, "nvm")
    host.environ["NVM_HOME"] = str(bin_dir)

    report = detect_environment(settings, host, CommandResolver(host, ExecutionMode.detect_only))

    assert any(f.source is FindingSource.other_version_manager for f in report.findings)
    assert "nvm" not in runner.programs()


def test_system_node_reported_when_fnm_absent(settings, host, runner, bin_dir) -> None:
    make_executable(bin_dir, "node")
    runner.on("node", lambda argv: (0, "v18.19.0\n"))

    report = detect_environment(settings, host, CommandResolver(host, ExecutionMode.apply))

    assert not report.tool.present
    [finding] = report.findings
    assert finding.source is FindingSource.system_runtime
    assert "v18.19.0" in finding.message


def test_system_node_ignored_when_fnm_present(settings, host, runner, bin_dir) -> None:
    make_executable(bin_dir, "node")
    make_executable(bin_dir, "fnm")
    runner.on("fnm", lambda argv: (0, "fnm 1.38.1"))
    runner.on("node", lambda argv: (0, "v18.19.0"))

    report = detect_environment(settings, host, CommandResolver(host, ExecutionMode.apply))

    assert report.tool.present
    assert report.findings == []
    assert "node" not in runner.programs()


def test_print_findings_warns_with_remedy(settings, host, reporter, runner, bin_dir) -> None:
    make_executable(bin_dir, "node")
    runner.on("node", lambda argv: (1, "broken"))

    report = detect_environment(settings, host, CommandResolver(host, ExecutionMode.apply))
    print_findings(report, host)

    warnings = reporter.text("warn")
    assert "unknown version" in warnings
    assert "Uninstall the system-wide node" in warnings
