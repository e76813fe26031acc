"""What a local pipeline run shows on the terminal."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import click

# job statuses returned by Tasks.run / CI.run
STATUS_OK = "ok"
STATUS_SKIPPED = "skipped(platform)"


class Console:
    """
    Output for `citasks run` and `citasks write`.

    Everything goes through click.echo; errors and debug lines go to stderr.
    Jobs for other platforms produce nothing unless `debug` is set.
    """

    def __init__(self, debug: bool = False):
        self.debug = debug

    def print_job_start(self, identity: str) -> None:
        click.echo(f"\nJOB: {identity}")

    def print_step(self, argv: Sequence[str], cwd: Optional[str] = None) -> None:
        """Show the exact argv handed to the process runner."""
        where = f" (in {cwd})" if cwd else ""
        click.echo(f"STEP: {' '.join(argv)}{where}")

    def print_success(self, identity: str) -> None:
        click.echo(f"PASSED: {identity}")

    def print_failure(
        self,
        identity: str,
        reason: str,
        exit_code: Optional[int] = None,
        hint: Optional[str] = None,
    ) -> None:
        click.echo(f"FAILED: {identity}", err=True)
        if exit_code is not None:
            click.echo(f"Exit code: {exit_code}", err=True)
        if hint:
            click.echo(f"Hint: {hint}", err=True)
        # full CIError text only in debug mode, its first line otherwise
        shown = reason if self.debug else (reason.splitlines() or ["unknown error"])[0]
        click.echo(f"Error: {shown}", err=True)

    def print_summary(self, results: Dict[str, str]) -> None:
        """
        Summarize a finished run.

        Only jobs that actually ran on this host are listed; jobs for other
        platforms are folded into a single count.
        """
        ran = [identity for identity, status in results.items() if status == STATUS_OK]
        skipped = sum(1 for status in results.values() if status == STATUS_SKIPPED)

        click.echo("")
        if ran:
            click.echo(f"{len(ran)} job(s) passed on this host:")
            for identity in ran:
                click.echo(f"  {identity}")
        else:
            click.echo("No job targets this host.")
        if skipped:
            click.echo(f"{skipped} job(s) target other platforms and were not run.")

    def print_error(self, title: str, message: str, details: Optional[List[str]] = None) -> None:
        click.echo(f"ERROR: {title}", err=True)
        click.echo(message, err=True)
        for detail in details or []:
            click.echo(detail, err=True)

    def print_info(self, message: str) -> None:
        click.echo(message)

    def print_debug(self, message: str) -> None:
        if self.debug:
            click.echo(f"[debug] {message}", err=True)


_console: Optional[Console] = None


def get_console() -> Console:
    """The console set by the CLI, or a non-debug one for library use."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    global _console
    _console = console
