from __future__ import annotations

import os
import stat
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

from fnm_setup.config import Settings
from fnm_setup.host import Host


class RecordingReporter:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def warn(self, message: str) -> None:
        self.messages.append(("warn", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def text(self, level: str | None = None) -> str:
        return "\n".join(m for lvl, m in self.messages if level in (None, lvl))


class MemoryStore:
    """In-memory stand-in for a registry hive."""

    def __init__(self, values: dict[tuple[str, str], str] | None = None) -> None:
        self.values: dict[tuple[str, str], str] = dict(values or {})
        self.writes = 0

    def get(self, key: str, name: str) -> str | None:
        return self.values.get((key, name))

    def set(self, key: str, name: str, value: str) -> None:
        self.writes += 1
        self.values[(key, name)] = value


class FakeRunner:
    """Records argv lists and answers from a handler keyed on the program name."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.handlers: dict[str, Callable[[list[str]], tuple[int, str]]] = {}

    def on(self, program: str, handler: Callable[[list[str]], tuple[int, str]]) -> None:
        self.handlers[program] = handler

    def __call__(self, argv: list[str], **kwargs) -> subprocess.CompletedProcess:
        self.calls.append(list(argv))
        program = Path(argv[0]).stem
        handler = self.handlers.get(program)
        if handler is None:
            raise FileNotFoundError(argv[0])
        code, out = handler(argv)
        return subprocess.CompletedProcess(argv, code, stdout=out, stderr="" if code == 0 else out)

    def programs(self) -> list[str]:
        return [Path(argv[0]).stem for argv in self.calls]


def make_executable(directory: Path, name: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    exe = directory / (f"{name}.exe" if os.name == "nt" else name)
    exe.write_text("", encoding="utf-8")
    exe.chmod(exe.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return exe


def snapshot(root: Path, store: MemoryStore) -> dict:
    files = {
        str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()
    }
    return {"files": files, "store": dict(store.values)}


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture
def settings(home: Path, tmp_path: Path) -> Settings:
    return Settings(
        home=home,
        documents=home / "Documents",
        tool_locations=(tmp_path / "winget-links" / "fnm",),
        installer_locations=(),
        alternate_manager_paths=(tmp_path / "nvm" / "nvm.exe",),
        launcher_path=home / "fnm_init.cmd",
    )


@pytest.fixture
def host(reporter: RecordingReporter, store: MemoryStore, runner: FakeRunner, bin_dir: Path) -> Host:
    return Host(
        reporter=reporter,
        environ={"PATH": str(bin_dir)},
        run=runner,
        user_store=store,
        machine_store=None,
    )
