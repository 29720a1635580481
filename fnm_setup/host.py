"""The side-effect surface handed to every component.

Bundling the process environment, the subprocess runner and the registry
stores in one value keeps the core free of ambient globals and lets tests swap
each piece out.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Callable, MutableMapping
from dataclasses import dataclass, field

from fnm_setup.errors import CommandFailedError
from fnm_setup.logging import get_logger
from fnm_setup.registry import KeyValueStore, open_store
from fnm_setup.report import Reporter

log = get_logger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]


@dataclass
class Host:
    reporter: Reporter
    environ: MutableMapping[str, str] = field(default_factory=lambda: os.environ)
    run: Runner = subprocess.run
    user_store: KeyValueStore | None = None
    machine_store: KeyValueStore | None = None

    @classmethod
    def current(cls, reporter: Reporter) -> Host:
        return cls(
            reporter=reporter,
            user_store=open_store("HKEY_CURRENT_USER"),
            machine_store=open_store("HKEY_LOCAL_MACHINE"),
        )

    def execute(self, argv: list[str], *, timeout: float | None = 600) -> str:
        """Run *argv* to completion and return its stripped stdout.

        Raises ``CommandFailedError`` when the process cannot start, times out
        or exits non-zero.
        """
        log.debug("running command", extra={"argv": argv})
        try:
            proc = self.run(
                argv,
                capture_output=True,
                text=True,
                timeout=timeout,
                env=dict(self.environ),
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            log.debug("command did not run", extra={"argv": argv, "error": str(exc)})
            raise CommandFailedError(argv, None, str(exc)) from exc
        log.debug("command finished", extra={"argv": argv, "returncode": proc.returncode})
        if proc.returncode != 0:
            raise CommandFailedError(argv, proc.returncode, (proc.stderr or proc.stdout or "").strip())
        return (proc.stdout or "").strip()
