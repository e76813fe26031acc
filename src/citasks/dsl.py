# src/citasks/dsl.py
from __future__ import annotations

from typing import Iterable

from .model import Action, Cmd, Empty, Event, MultiStep, Run, Rust, Step, Workflow


# ---------------------------------------------------------------------
# Run helpers
# ---------------------------------------------------------------------

def cmd(program: str, args: Iterable[str] = ()) -> Run:
    """A single-command run step: `run: program args...`."""
    return Run((Cmd(program, tuple(args)),))


def script(lines: Iterable[Iterable[str]]) -> Run:
    """
    A multi-line run step. Each line is an argv list.

    Example:
        script([["cargo", "fmt"], ["cargo", "test"]])
    """
    return Run(tuple(Cmd.from_argv(line) for line in lines), multi=True)


def install(crate_name: str, version: str) -> Run:
    """`cargo install` a pinned tool. Unlike actions this also runs locally."""
    return cmd("cargo", ["install", crate_name, "--locked", "--version", version])


# ---------------------------------------------------------------------
# Action helpers
# ---------------------------------------------------------------------

def action(uses: str) -> Action:
    return Action(uses)


def checkout() -> Action:
    return action("actions/checkout@v3")


def rust_cache() -> Action:
    return action("Swatinem/rust-cache@v2")


def upload_artifact(name: str, path: str) -> Action:
    return action("actions/upload-artifact@v3").with_("name", name).with_("path", path)


def rust_toolchain(version: str) -> Rust:
    return Rust(toolchain=version)


def install_rust(rust: Rust) -> MultiStep:
    """Checkout, install the toolchain, restore the cargo cache."""
    return MultiStep((checkout(), rust.to_step(), rust_cache()))


# ---------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------

def multi_step(*steps: Step) -> MultiStep:
    return MultiStep(steps)


def when(condition: bool, step: Step) -> Step:
    """`step` if `condition`, otherwise a step that does nothing."""
    return step if condition else Empty()


# ---------------------------------------------------------------------
# Workflow helpers
# ---------------------------------------------------------------------

def workflow(name: str) -> Workflow:
    return Workflow(name=name)


def push() -> Event:
    return Event("push")


def pull_request() -> Event:
    return Event("pull_request")
