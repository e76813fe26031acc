# ci.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from .dsl import cmd, install, install_rust, pull_request, push, rust_toolchain, script, workflow
from .model import Platform, Rust, Step, Workflow
from .runner import CIError, ProcessRunner
from .ui.console import STATUS_OK, STATUS_SKIPPED, get_console

WORKFLOW_NAME = "ci-tests"

STANDARD_RUSTC = "1.73"
STANDARD_LINT_RUSTC = "nightly-2023-10-14"
STANDARD_UDEPS = "0.1.43"


class Tasks:
    """
    The steps of one job on one platform, before they become a Job.

    Every Tasks starts with checkout + toolchain install + cargo cache;
    everything else is appended by the builder methods, which return self.
    """

    def __init__(self, name: str, platform: Platform, rust: Rust):
        self.name = name
        self.platform = platform
        self.is_nightly = rust.is_nightly()
        self.steps: List[Step] = []
        self.step(install_rust(rust))

    @property
    def identity(self) -> str:
        return f"{self.name}-{self.platform.as_str()}"

    def step(self, step: Step) -> "Tasks":
        self.steps.append(step)
        return self

    def cmd(self, program: str, args: Iterable[str] = ()) -> "Tasks":
        return self.step(cmd(program, args))

    def script(self, lines: Iterable[Iterable[str]]) -> "Tasks":
        return self.step(script(lines))

    # ---- standard verification policies ----

    def tests(self) -> "Tasks":
        return (
            self.cmd("cargo", ["xtask", "codegen", "--check"])
            .cmd(
                "cargo",
                ["clippy", "--all-targets", "--", "-D", "warnings", "-D", "clippy::all"],
            )
            .cmd("cargo", ["test"])
            .cmd("cargo", ["build", "--all-targets"])
            .cmd("cargo", ["doc"])
        )

    def release_tests(self) -> "Tasks":
        return self.cmd("cargo", ["test", "--benches", "--tests", "--release"])

    def lints(self, udeps_version: str) -> "Tasks":
        return (
            self.cmd("cargo", ["fmt", "--all", "--", "--check"])
            .step(install("cargo-udeps", udeps_version))
            .cmd("cargo", ["udeps", "--all-targets"])
        )

    # ---- local execution ----

    def run(self, runner: ProcessRunner | None = None, host: str | None = None) -> str:
        """
        Execute the run steps on this machine.

        Returns "ok", or "skipped(platform)" when the host is not this
        Tasks' platform. The first failing command raises and stops the job.
        """
        console = get_console()

        if not self.platform.is_current(host):
            console.print_debug(f"{self.identity}: not the current platform, skipping")
            return STATUS_SKIPPED

        console.print_job_start(self.identity)
        try:
            for step in self.steps:
                step.execute(self.is_nightly, runner)
        except CIError as e:
            if e.job is None:
                e.job = self.identity
            raise

        console.print_success(self.identity)
        return STATUS_OK


class CI:
    """An ordered set of Tasks that can be written as a workflow or run locally."""

    def __init__(self, tasks: Optional[Iterable[Tasks]] = None):
        self._tasks: List[Tasks] = list(tasks or [])

    @classmethod
    def standard_workflow(cls) -> "CI":
        return (
            cls()
            .standard_tests(STANDARD_RUSTC)
            .standard_release_tests(STANDARD_RUSTC)
            .standard_lints(STANDARD_LINT_RUSTC, STANDARD_UDEPS)
        )

    def standard_lints(self, rustc_version: str, udeps_version: str) -> "CI":
        return self.job(
            Tasks(
                "lints",
                Platform.UBUNTU_LATEST,
                rust_toolchain(rustc_version).minimal().default().rustfmt(),
            ).lints(udeps_version)
        )

    def standard_tests(self, rustc_version: str) -> "CI":
        for platform in Platform.latest():
            self.add_job(
                Tasks(
                    "tests",
                    platform,
                    rust_toolchain(rustc_version).minimal().default().clippy(),
                ).tests()
            )
        return self

    def standard_release_tests(self, rustc_version: str) -> "CI":
        for platform in Platform.latest():
            self.add_job(
                Tasks(
                    "release-tests",
                    platform,
                    rust_toolchain(rustc_version).minimal().default(),
                ).release_tests()
            )
        return self

    def job(self, tasks: Tasks) -> "CI":
        self.add_job(tasks)
        return self

    def add_job(self, tasks: Tasks) -> None:
        self._tasks.append(tasks)

    def __iter__(self) -> Iterator[Tasks]:
        return iter(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def into_workflow(self) -> Workflow:
        wf = workflow(WORKFLOW_NAME).on(push(), pull_request())
        for tasks in self._tasks:
            wf.add_job(tasks.name, tasks.platform, tasks.steps)
        return wf

    def write(self, check: bool, root: str | Path = ".") -> bool:
        return self.into_workflow().write(check, root)

    def run(self, runner: ProcessRunner | None = None, host: str | None = None) -> Dict[str, str]:
        """Run every Tasks in order; the first failure aborts the rest."""
        results: Dict[str, str] = {}
        for tasks in self._tasks:
            results[tasks.identity] = tasks.run(runner, host)
        return results
