# runner.py
from __future__ import annotations

import platform
import subprocess
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .ui.console import get_console

# A process runner takes argv and an optional working directory and blocks
# until the process exits. It raises on failure and returns nothing.
ProcessRunner = Callable[[List[str], Optional[str]], None]

RUSTUP = "rustup"
NIGHTLY_CHANNEL = "nightly"


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

@dataclass(eq=False)
class CIError(Exception):
    """
    Structured CI error with enough context for:
      - clean CLI output
      - debugging without full tracebacks
    """
    kind: str
    message: str
    job: str | None = None
    step: str | None = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}"]
        if self.job:
            lines.append(f"job={self.job}")
        if self.step:
            lines.append(f"step={self.step}")
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


@dataclass(eq=False)
class StepFailure(CIError):
    cmd: str = ""
    exit_code: int = 1

    def __str__(self) -> str:
        where = f"[{self.job}] " if self.job else ""
        return f"{where}command failed (exit={self.exit_code}): {self.cmd}"


TOOL_HINTS = {
    "cargo": "Install Rust via rustup (https://rustup.rs) or fix PATH.",
    "rustup": "Install rustup (https://rustup.rs) or fix PATH.",
}


# ----------------------------------------------------------------------
# Host detection
# ----------------------------------------------------------------------

def host_os() -> str:
    """Name of the running OS: 'linux', 'darwin' or 'windows'."""
    return platform.system().lower()


# ----------------------------------------------------------------------
# Process runners
# ----------------------------------------------------------------------

def subprocess_runner(argv: List[str], cwd: Optional[str] = None) -> None:
    """Run argv with inherited stdio, raising on spawn failure or non-zero exit."""
    try:
        proc = subprocess.run(argv, cwd=cwd, shell=False)
    except OSError as e:
        hint = TOOL_HINTS.get(argv[0], f"Install {argv[0]} or fix PATH.")
        raise CIError(
            kind="spawn_failed",
            message=f"could not start {argv[0]}",
            details={"error": str(e), "hint": hint},
        ) from e

    if proc.returncode != 0:
        raise StepFailure(
            kind="step_failed",
            message=f"{argv[0]} exited with {proc.returncode}",
            cmd=" ".join(argv),
            exit_code=proc.returncode,
        )


def nightly(runner: ProcessRunner) -> ProcessRunner:
    """Wrap `runner` so every command runs under `rustup run nightly`."""

    def run_nightly(argv: List[str], cwd: Optional[str] = None) -> None:
        runner([RUSTUP, "run", NIGHTLY_CHANNEL, *argv], cwd)

    return run_nightly


def echoing(runner: ProcessRunner) -> ProcessRunner:
    """Wrap `runner` so each argv it receives is shown as a STEP line first."""

    def run_echoed(argv: List[str], cwd: Optional[str] = None) -> None:
        get_console().print_step(argv, cwd)
        runner(argv, cwd)

    return run_echoed
