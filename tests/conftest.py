"""
Shared pytest fixtures for citasks tests.

Provides:
- A recording process runner so no real toolchain is needed
- A fresh Console per test
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import pytest

from citasks.runner import StepFailure
from citasks.ui.console import Console, set_console


class RecordingRunner:
    """Stands in for subprocess_runner: records argv/cwd, fails on request."""

    def __init__(self, fail_on: Optional[List[str]] = None, exit_code: int = 1):
        self.calls: List[Tuple[List[str], Optional[str]]] = []
        self.fail_on = fail_on
        self.exit_code = exit_code

    def __call__(self, argv: List[str], cwd: Optional[str] = None) -> None:
        self.calls.append((list(argv), cwd))
        if self.fail_on is not None and list(argv) == self.fail_on:
            raise StepFailure(
                kind="step_failed",
                message="fake failure",
                cmd=" ".join(argv),
                exit_code=self.exit_code,
            )

    @property
    def argvs(self) -> List[List[str]]:
        return [argv for argv, _cwd in self.calls]


@pytest.fixture
def recorder():
    return RecordingRunner()


@pytest.fixture
def failing_recorder():
    def make(fail_on: List[str], exit_code: int = 1) -> RecordingRunner:
        return RecordingRunner(fail_on=fail_on, exit_code=exit_code)

    return make


@pytest.fixture(autouse=True)
def quiet_console():
    console = Console(debug=False)
    set_console(console)
    yield console
