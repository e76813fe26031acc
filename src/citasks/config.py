# config.py
# Finding and loading the pipeline definition.
#
# A repository may define its own pipeline in ci_pipeline.py:
#
#     from citasks import CI, Tasks, Platform, rust_toolchain
#
#     def pipeline():
#         return CI.standard_workflow().job(Tasks(...).cmd(...))
#
# Without such a file the standard workflow is used.
from __future__ import annotations

import runpy
from pathlib import Path
from typing import Optional

from .ci import CI

DEFAULT_PIPELINE_FILE = "ci_pipeline.py"


def discover_pipeline(pipeline_arg: str | None, root: str | Path = ".") -> Optional[Path]:
    """
    Locate the pipeline file.

    Args:
        pipeline_arg: Explicit path from the CLI (".py" may be omitted)
        root: Repository root searched for DEFAULT_PIPELINE_FILE

    Returns:
        Path to the pipeline file, or None if no default file exists

    Raises:
        FileNotFoundError: If an explicit path does not exist
    """
    if pipeline_arg:
        path = Path(pipeline_arg)
        if not path.exists() and path.suffix != ".py":
            path = Path(str(path) + ".py")
        if not path.exists():
            raise FileNotFoundError(f"Pipeline file not found: {pipeline_arg}")
        return path

    default = Path(root) / DEFAULT_PIPELINE_FILE
    return default if default.exists() else None


def load_pipeline(path: str | Path) -> CI:
    """
    Load a pipeline from a python file path.

    The file must define either:
      - pipeline() -> CI
      - PIPELINE = CI(...)
    """
    pl_path = Path(path).expanduser().resolve()
    if not pl_path.exists():
        raise FileNotFoundError(f"Pipeline file not found: {pl_path}")
    if pl_path.suffix != ".py":
        raise ValueError(f"Pipeline must be a .py file, got: {pl_path.name}")

    globals_dict = runpy.run_path(str(pl_path), run_name=f"citasks_pipeline_{pl_path.stem}")

    ci = None
    if "pipeline" in globals_dict and callable(globals_dict["pipeline"]):
        ci = globals_dict["pipeline"]()
    elif "PIPELINE" in globals_dict:
        ci = globals_dict["PIPELINE"]

    if not isinstance(ci, CI):
        raise TypeError(
            "Pipeline must return/define a CI. "
            "Define pipeline() -> CI or PIPELINE = CI(...)."
        )

    return ci


def resolve_pipeline(pipeline_arg: str | None, root: str | Path = ".") -> CI:
    path = discover_pipeline(pipeline_arg, root)
    if path is None:
        return CI.standard_workflow()
    return load_pipeline(path)
