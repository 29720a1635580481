"""Idempotent text-file mutators.

Presence is a literal substring test against the whole file, not a parse of
line boundaries: two snippets that differ only in flag order count as
different lines.

Existing files keep their encoding. Windows PowerShell writes profiles as
UTF-16 (``Out-File``) or in the ANSI code page (``Set-Content``), so the
file is decoded by BOM first, then by trying UTF-8, the locale encoding and
cp1252, and new lines are appended in whatever encoding was found.
"""

from __future__ import annotations

import codecs
import locale
from pathlib import Path

from fnm_setup.mode import report_action, should_apply
from fnm_setup.report import Reporter
from fnm_setup.types import ExecutionMode, MutationOutcome

# (bom, codec to decode the whole file, codec to append without a second BOM)
_BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig", "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16", "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16", "utf-16-be"),
)


def read_text(path: Path) -> tuple[str, str]:
    """Return ``(text, encoding)`` for *path*; a missing file is empty UTF-8."""
    if not path.exists():
        return "", "utf-8"
    data = path.read_bytes()
    for bom, decoder, appender in _BOMS:
        if data.startswith(bom):
            return data.decode(decoder), appender
    for encoding in ("utf-8", locale.getpreferredencoding(False), "cp1252"):
        try:
            return data.decode(encoding), encoding
        except (LookupError, UnicodeDecodeError):
            continue
    # latin-1 maps every byte, so the original bytes survive the append
    return data.decode("latin-1"), "latin-1"


def _announce_creation(path: Path, mode: ExecutionMode, reporter: Reporter) -> None:
    if not path.parent.exists():
        report_action(reporter, mode, f"create directory {path.parent}")
    if not path.exists():
        report_action(reporter, mode, f"create file {path}")


def ensure_line_in_file(
    path: Path, line: str, *, mode: ExecutionMode, reporter: Reporter
) -> MutationOutcome:
    """Append *line* to *path* unless it already occurs verbatim.

    A missing file counts as empty. In dry-run mode the would-be directory
    and file creation plus the appended line are reported, nothing is written.
    """
    content, encoding = read_text(path)
    if line in content:
        reporter.info(f"{path} already configured")
        return MutationOutcome.unchanged

    _announce_creation(path, mode, reporter)
    report_action(reporter, mode, f"append to {path}: {line}")
    if not should_apply(mode):
        return MutationOutcome.planned

    path.parent.mkdir(parents=True, exist_ok=True)
    prefix = "\n" if content and not content.endswith("\n") else ""
    with open(path, "ab") as fh:
        fh.write(f"{prefix}{line}\n".encode(encoding))
    return MutationOutcome.applied


def ensure_file_content(
    path: Path, content: str, *, mode: ExecutionMode, reporter: Reporter
) -> MutationOutcome:
    """Write *content* to *path* only when the file's bytes differ."""
    desired = content.encode("utf-8")
    if path.is_file() and path.read_bytes() == desired:
        reporter.info(f"{path} already up to date")
        return MutationOutcome.unchanged

    _announce_creation(path, mode, reporter)
    report_action(reporter, mode, f"write {path} ({len(desired)} bytes)")
    if not should_apply(mode):
        return MutationOutcome.planned

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(desired)
    return MutationOutcome.applied
