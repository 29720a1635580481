"""Persistent key/value store access (the Windows registry).

Only the per-user and machine hives are used, and only string values are read
or written. ``open_store`` returns ``None`` on hosts without a registry.
"""

from __future__ import annotations

import sys
from typing import Protocol

from fnm_setup.logging import get_logger

log = get_logger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str, name: str) -> str | None: ...

    def set(self, key: str, name: str, value: str) -> None: ...


class RegistryStore:
    def __init__(self, hive: str = "HKEY_CURRENT_USER") -> None:
        import winreg

        self._winreg = winreg
        self._hive = getattr(winreg, hive)
        self.hive = hive

    def _query(self, key: str, name: str) -> tuple[str | None, int | None]:
        winreg = self._winreg
        try:
            with winreg.OpenKey(self._hive, key) as handle:
                value, kind = winreg.QueryValueEx(handle, name)
        except FileNotFoundError:
            return None, None
        return (str(value) if value else None), kind

    def get(self, key: str, name: str) -> str | None:
        return self._query(key, name)[0]

    def set(self, key: str, name: str, value: str) -> None:
        winreg = self._winreg
        _, kind = self._query(key, name)
        if kind not in (winreg.REG_SZ, winreg.REG_EXPAND_SZ):
            kind = winreg.REG_SZ
        with winreg.CreateKeyEx(self._hive, key, 0, winreg.KEY_SET_VALUE) as handle:
            winreg.SetValueEx(handle, name, 0, kind, value)
        log.debug("registry value written", extra={"hive": self.hive, "key": key, "value_name": name})


def open_store(hive: str = "HKEY_CURRENT_USER") -> KeyValueStore | None:
    if sys.platform != "win32":
        return None
    return RegistryStore(hive)
