# model.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .runner import ProcessRunner, echoing, host_os, nightly, subprocess_runner


# ---------------------------------------------------------------------
# Platforms and triggers
# ---------------------------------------------------------------------

class Platform(Enum):
    """A runner image a job can target."""
    UBUNTU_LATEST = "ubuntu-latest"
    MACOS_LATEST = "macos-latest"
    WINDOWS_LATEST = "windows-latest"

    @classmethod
    def latest(cls) -> List["Platform"]:
        return [cls.UBUNTU_LATEST, cls.MACOS_LATEST, cls.WINDOWS_LATEST]

    def is_current(self, host: str | None = None) -> bool:
        """True when `host` (defaults to the running OS) is this platform's OS."""
        if host is None:
            host = host_os()
        host = _HOST_ALIASES.get(host, host)
        return _PLATFORM_OS[self] == host

    def as_str(self) -> str:
        return self.value


_PLATFORM_OS = {
    Platform.UBUNTU_LATEST: "linux",
    Platform.MACOS_LATEST: "darwin",
    Platform.WINDOWS_LATEST: "windows",
}

# sys.platform / rust-style names people pass in tests and configs
_HOST_ALIASES = {
    "macos": "darwin",
    "win32": "windows",
}


@dataclass(frozen=True)
class Event:
    """A workflow trigger such as `push`."""
    name: str


# ---------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class Cmd:
    """
    One program invocation.

    Rendering joins program and args with single spaces. Arguments are not
    quoted, so an argument containing spaces or shell metacharacters renders
    ambiguously; callers that need quoting must do it themselves.
    """
    program: str
    args: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.program:
            raise ValueError("Cmd needs a non-empty program name")
        # accept any iterable of strings, store a tuple so the Cmd stays hashable
        object.__setattr__(self, "args", tuple(str(a) for a in self.args))

    @classmethod
    def from_argv(cls, argv: Iterable[str]) -> "Cmd":
        argv = [str(a) for a in argv]
        if not argv:
            raise ValueError("Can't extract executable from empty argument list")
        return cls(argv[0], tuple(argv[1:]))

    def argv(self) -> List[str]:
        return [self.program, *self.args]

    def render(self) -> str:
        return " ".join(self.argv())

    def execute(
        self,
        is_nightly: bool,
        directory: str | None = None,
        runner: ProcessRunner | None = None,
    ) -> None:
        """
        Run the command and block until it exits.

        With `is_nightly` the invocation goes through `rustup run nightly`; the
        console shows the argv after that rewrite.
        Raises StepFailure on a non-zero exit and CIError on spawn errors.
        """
        run = echoing(runner or subprocess_runner)
        if is_nightly:
            run = nightly(run)
        run(self.argv(), directory)

    def __str__(self) -> str:
        return self.render()


# ---------------------------------------------------------------------
# Steps: Empty | MultiStep | Action | Run
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class Empty:
    """Renders nothing and runs nothing. Used by `when(False, ...)`."""

    def execute(self, is_nightly: bool, runner: ProcessRunner | None = None) -> None:
        return None


@dataclass(frozen=True)
class MultiStep:
    """Several steps emitted back to back."""
    steps: Tuple["Step", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))

    def execute(self, is_nightly: bool, runner: ProcessRunner | None = None) -> None:
        for step in self.steps:
            step.execute(is_nightly, runner)


@dataclass(frozen=True)
class Action:
    """A reference to a reusable action (`uses:`) with its `with:` inputs."""
    uses: str
    with_params: Tuple[Tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "with_params", tuple(self.with_params))

    def with_(self, key: str, value: object) -> "Action":
        return replace(self, with_params=self.with_params + ((key, _format_value(value)),))

    def execute(self, is_nightly: bool, runner: ProcessRunner | None = None) -> None:
        # the external runner performs actions; local replay assumes the
        # developer machine already has what they would install
        return None


@dataclass(frozen=True)
class Run:
    """One command (`run: cmd`) or a script of commands (`run: |`)."""
    commands: Tuple[Cmd, ...]
    multi: bool = False
    directory: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "commands", tuple(self.commands))
        if not self.multi and len(self.commands) != 1:
            raise ValueError("a single-command Run needs exactly one Cmd")

    def in_directory(self, directory: str) -> "Run":
        return replace(self, directory=directory)

    def execute(self, is_nightly: bool, runner: ProcessRunner | None = None) -> None:
        for command in self.commands:
            command.execute(is_nightly, self.directory, runner)


Step = Union[Empty, MultiStep, Action, Run]


def _format_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# ---------------------------------------------------------------------
# Toolchain descriptor
# ---------------------------------------------------------------------

TOOLCHAIN_ACTION = "ructions/toolchain@v2"
WASM_TARGET = "wasm32-unknown-unknown"


@dataclass(frozen=True)
class Rust:
    """
    Which Rust toolchain a job installs.

    Builder methods only ever add settings and return a new descriptor, so
    a shared base such as `rust_toolchain("1.73").minimal()` can be extended
    per job without leaking components between jobs.
    """
    toolchain: str
    profile: Optional[str] = None
    install_default: bool = False
    components: Tuple[str, ...] = ()
    targets: Optional[Tuple[str, ...]] = None

    def is_nightly(self) -> bool:
        return self.toolchain.startswith("nightly")

    def minimal(self) -> "Rust":
        return replace(self, profile="minimal")

    def default(self) -> "Rust":
        return replace(self, install_default=True)

    def component(self, name: str) -> "Rust":
        if name in self.components:
            return self
        return replace(self, components=self.components + (name,))

    def clippy(self) -> "Rust":
        return self.component("clippy")

    def rustfmt(self) -> "Rust":
        return self.component("rustfmt")

    def target(self, triple: str) -> "Rust":
        targets = self.targets or ()
        if triple in targets:
            return self
        return replace(self, targets=targets + (triple,))

    def wasm(self) -> "Rust":
        return self.target(WASM_TARGET)

    def to_step(self) -> Action:
        action = Action(TOOLCHAIN_ACTION).with_("toolchain", self.toolchain)

        if self.profile is not None:
            action = action.with_("profile", self.profile)
        if self.install_default:
            action = action.with_("default", True)
        if self.components:
            action = action.with_("components", ", ".join(self.components))
        if self.targets is not None:
            action = action.with_("targets", ", ".join(self.targets))

        return action


# ---------------------------------------------------------------------
# Workflow document
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class Job:
    """A rendered job: `<name>-<platform>` with its steps."""
    name: str
    runs_on: Platform
    steps: Tuple[Step, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))

    @property
    def identity(self) -> str:
        # the platform suffix keeps one task on several platforms unique
        return f"{self.name}-{self.runs_on.as_str()}"


@dataclass
class Workflow:
    name: str
    triggers: List[Event] = field(default_factory=list)
    jobs: List[Job] = field(default_factory=list)

    def on(self, *events: Event) -> "Workflow":
        self.triggers.extend(events)
        return self

    def add_job(self, name: str, runs_on: Platform, steps: Sequence[Step]) -> None:
        self.jobs.append(Job(name, runs_on, tuple(steps)))

    def job(self, name: str, runs_on: Platform, steps: Sequence[Step]) -> "Workflow":
        self.add_job(name, runs_on, steps)
        return self

    def path(self, root: str | Path = ".") -> Path:
        return Path(root) / ".github" / "workflows" / f"{self.name}.yml"

    def render(self) -> str:
        # Import here to avoid circular import
        from .render import render_workflow

        return render_workflow(self)

    def write(self, check: bool, root: str | Path = ".") -> bool:
        """Persist the rendered document; see files.update_file for `check`."""
        from .files import update_file

        return update_file(self.path(root), self.render(), check)

    def __str__(self) -> str:
        return self.render()
