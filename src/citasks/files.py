# files.py
from __future__ import annotations

import difflib
from dataclasses import dataclass
from pathlib import Path

from .runner import CIError
from .ui.console import get_console


@dataclass(eq=False)
class FileOutOfDate(CIError):
    path: str = ""
    diff: str = ""

    def __str__(self) -> str:
        lines = [f"{self.path} is out of date, regenerate it without --check"]
        if self.diff:
            lines.append(self.diff)
        return "\n".join(lines)


def _read_bytes(path: Path) -> bytes | None:
    if not path.exists():
        return None
    return path.read_bytes()


def _diff(path: Path, existing: bytes | None, content: str) -> str:
    # only for display: undecodable bytes show up as U+FFFD, and "\r" stays
    # visible because keepends keeps it on each line
    old = (existing or b"").decode("utf-8", errors="replace")
    return "".join(
        difflib.unified_diff(
            old.splitlines(keepends=True),
            content.splitlines(keepends=True),
            fromfile=f"{path} (on disk)",
            tofile=f"{path} (generated)",
        )
    )


def update_file(path: str | Path, content: str, check: bool) -> bool:
    """
    Make `path` hold exactly the UTF-8 bytes of `content`.

    The comparison is byte for byte: a file with CRLF line endings or
    invalid UTF-8 counts as different. With `check` nothing is written and
    a missing or different file raises FileOutOfDate. Otherwise the file
    (and its parent dirs) is written only when the bytes differ.

    Returns:
        True if the file was (or in check mode would have been) changed.
    """
    path = Path(path)
    console = get_console()
    expected = content.encode("utf-8")
    existing = _read_bytes(path)

    if existing == expected:
        console.print_debug(f"{path}: up to date")
        return False

    if check:
        raise FileOutOfDate(
            kind="out_of_date",
            message=f"{path} differs from the generated workflow",
            path=str(path),
            diff=_diff(path, existing, content),
        )

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(expected)
    console.print_info(f"Wrote {path}")
    return True
