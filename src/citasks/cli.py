# cli.py
from __future__ import annotations

import sys

import click

from citasks.config import resolve_pipeline
from citasks.files import FileOutOfDate
from citasks.runner import CIError, StepFailure
from citasks.ui.console import Console, get_console, set_console

pipeline_option = click.option(
    "--pipeline",
    default=None,
    help="Pipeline file path (defaults to ci_pipeline.py if present, else the standard workflow)",
)
root_option = click.option(
    "--root",
    default=".",
    show_default=True,
    type=click.Path(file_okay=False),
    help="Repository root containing .github/workflows",
)


def _load(ctx, pipeline, root):
    console = get_console()
    try:
        return resolve_pipeline(pipeline, root)
    except (FileNotFoundError, TypeError, ValueError) as e:
        console.print_error(
            "Failed to load pipeline",
            str(e),
            details=["Define pipeline() -> CI in ci_pipeline.py or pass --pipeline"],
        )
        if ctx.obj.get("debug", False):
            import traceback
            traceback.print_exc()
        sys.exit(1)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """citasks: describe CI once, write it as a workflow or run it locally."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.option("--check", is_flag=True, default=False, help="Fail if the workflow file is out of date instead of writing it")
@pipeline_option
@root_option
@click.pass_context
def write(ctx, check, pipeline, root):
    """Render the pipeline to .github/workflows."""
    console = get_console()
    ci = _load(ctx, pipeline, root)

    try:
        changed = ci.write(check, root)
    except FileOutOfDate as e:
        console.print_error("Workflow out of date", e.message, details=[e.diff] if e.diff else None)
        sys.exit(1)
    except OSError as e:
        console.print_error("Could not write workflow", str(e))
        sys.exit(1)

    if check:
        console.print_info("Workflow is up to date")
    elif not changed:
        console.print_info("Workflow unchanged")


@cli.command()
@pipeline_option
@root_option
@click.pass_context
def run(ctx, pipeline, root):
    """Run the pipeline's jobs for this platform locally."""
    console = get_console()
    ci = _load(ctx, pipeline, root)

    try:
        results = ci.run()
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except StepFailure as e:
        console.print_failure(e.job or "?", str(e), exit_code=e.exit_code)
        sys.exit(1)
    except CIError as e:
        console.print_failure(e.job or "?", str(e), hint=e.details.get("hint"))
        sys.exit(1)

    console.print_summary(results)


@cli.command()
@pipeline_option
@root_option
@click.pass_context
def show(ctx, pipeline, root):
    """Print the rendered workflow to stdout."""
    ci = _load(ctx, pipeline, root)
    click.echo(ci.into_workflow().render(), nl=False)


if __name__ == "__main__":
    cli()
