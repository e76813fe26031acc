# render.py
# Turns a Workflow into GitHub Actions YAML text.
# Output must stay byte-for-byte stable: `write --check` diffs it against the
# committed copy.
from __future__ import annotations

from typing import List

from .model import Action, Empty, Job, MultiStep, Run, Step, Workflow

STEP_PREFIX = "    - "
STEP_BODY = "      "
STEP_NESTED = "        "


def render_workflow(workflow: Workflow) -> str:
    out: List[str] = []
    out.append(f"name: {workflow.name}\n")
    events = ", ".join(ev.name for ev in workflow.triggers)
    out.append(f"on: [{events}]\n")
    out.append("jobs:\n")

    for job in workflow.jobs:
        render_job(job, out)

    return "".join(out)


def render_job(job: Job, out: List[str]) -> None:
    runs_on = job.runs_on.as_str()
    out.append(f"  {job.identity}:\n")
    out.append(f"    runs-on: {runs_on}\n")
    out.append("    steps:\n")

    for step in job.steps:
        render_step(step, out)


def render_step(step: Step, out: List[str]) -> None:
    if isinstance(step, Empty):
        return
    if isinstance(step, MultiStep):
        for child in step.steps:
            render_step(child, out)
        return
    if isinstance(step, Action):
        render_action(step, out)
        return
    if isinstance(step, Run):
        render_run(step, out)
        return

    raise TypeError(f"Not a step: {step!r}")


def render_action(action: Action, out: List[str]) -> None:
    out.append(f"{STEP_PREFIX}uses: {action.uses}\n")

    if action.with_params:
        out.append(f"{STEP_BODY}with:\n")
        for key, value in action.with_params:
            out.append(f"{STEP_NESTED}{key}: {value}\n")


def render_run(run: Run, out: List[str]) -> None:
    out.append(STEP_PREFIX)

    if run.directory is not None:
        out.append(f"working-directory: {run.directory}\n")
        out.append(STEP_BODY)

    if not run.multi:
        out.append(f"run: {run.commands[0].render()}\n")
        return

    out.append("run: |\n")
    for cmd in run.commands:
        out.append(f"{STEP_NESTED}{cmd.render()}\n")


def render_step_text(step: Step) -> str:
    """Render a single step on its own, mostly useful for `show` and tests."""
    out: List[str] = []
    render_step(step, out)
    return "".join(out)
