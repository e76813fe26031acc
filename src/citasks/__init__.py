from .ci import CI, Tasks
from .dsl import (
    action,
    checkout,
    cmd,
    install,
    install_rust,
    multi_step,
    pull_request,
    push,
    rust_cache,
    rust_toolchain,
    script,
    upload_artifact,
    when,
    workflow,
)
from .model import Action, Cmd, Empty, Event, Job, MultiStep, Platform, Run, Rust, Workflow
from .runner import CIError, StepFailure

__all__ = [
    "CI", "Tasks",
    "action", "checkout", "cmd", "install", "install_rust", "multi_step", "pull_request",
    "push", "rust_cache", "rust_toolchain", "script", "upload_artifact", "when", "workflow",
    "Action", "Cmd", "Empty", "Event", "Job", "MultiStep", "Platform", "Run", "Rust", "Workflow",
    "CIError", "StepFailure",
]
