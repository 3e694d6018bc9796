"""
In-process sandbox for generated analysis code.

Runs a source string in a fresh namespace while its stdout is written to a
per-task text file and, when the code looks like it plots, its last matplotlib
figure is written to a per-task PNG.
"""
import contextlib
import copy
import os
import re
from typing import Any, Dict, Iterator, Optional

import pandas as pd

from auto_eda.utils.eda_types import ExecutionResult
from auto_eda.utils.run_workspace import task_artifact_paths

# Keyword scan, not analysis: any mention of the plotting stack turns the surface on.
PLOT_MARKER_PATTERN = re.compile(r"matplotlib|plt\.|seaborn|sns\.")

PLOT_WIDTH_PX = 800
PLOT_HEIGHT_PX = 600
PLOT_DPI = 100


def likely_produces_plot(code: str) -> bool:
    return bool(PLOT_MARKER_PATTERN.search(code or ""))


@contextlib.contextmanager
def stdout_capture(output_file: str) -> Iterator[str]:
    with open(output_file, "w", encoding="utf-8") as handle:
        with contextlib.redirect_stdout(handle):
            yield output_file


@contextlib.contextmanager
def plot_capture(plot_file: str) -> Iterator[str]:
    """
    Binds matplotlib to an off-screen surface for the duration of the block.

    On exit the current figure, if any was created, is saved to plot_file and
    every figure is closed, whether or not the block raised.
    """
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    plt.close("all")
    rc = {
        "figure.figsize": (PLOT_WIDTH_PX / PLOT_DPI, PLOT_HEIGHT_PX / PLOT_DPI),
        "figure.dpi": PLOT_DPI,
    }
    try:
        with matplotlib.rc_context(rc):
            yield plot_file
    finally:
        try:
            if plt.get_fignums():
                plt.gcf().savefig(plot_file, dpi=PLOT_DPI)
        finally:
            plt.close("all")


def _build_namespace(code_file: str, scope: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    namespace: Dict[str, Any] = {"__name__": "__main__", "__file__": code_file}
    for key, value in (scope or {}).items():
        if isinstance(value, pd.DataFrame):
            namespace[key] = value.copy(deep=True)
        else:
            namespace[key] = copy.deepcopy(value)
    return namespace


def execute_with_capture(
    code: str,
    output_dir: str,
    task_index: int,
    scope: Optional[Dict[str, Any]] = None,
) -> ExecutionResult:
    """
    Executes generated code and captures its outputs.

    The source file is written before execution so it survives failures.
    Any fault raised by the code (including syntax errors and sys.exit) is
    returned as a failed ExecutionResult carrying "<Type>: <message>";
    output and plot paths are only reported on success, and a plot saved by
    a failed run is removed.

    Args:
        code: Python source to run.
        output_dir: Run directory for the task artifacts.
        task_index: 1-based task ordinal used in artifact names.
        scope: Names pre-bound in the execution namespace (copied, never shared).
    """
    if code is None or not str(code).strip():
        return ExecutionResult(success=False, error="Generated code is empty")

    paths = task_artifact_paths(output_dir, task_index)
    code_file = paths["code_file"]
    # Model text may carry lone surrogates; the artifact escapes them instead of failing.
    with open(code_file, "w", encoding="utf-8", errors="backslashreplace") as f:
        f.write(code)
    # A plot left by an earlier attempt must not be credited to this one.
    if os.path.exists(paths["plot_file"]):
        os.remove(paths["plot_file"])

    try:
        with contextlib.ExitStack() as stack:
            stack.enter_context(stdout_capture(paths["output_file"]))
            if likely_produces_plot(code):
                stack.enter_context(plot_capture(paths["plot_file"]))
            namespace = _build_namespace(code_file, scope)
            exec(compile(code, code_file, "exec"), namespace)
    except (Exception, SystemExit) as exc:
        if os.path.exists(paths["plot_file"]):
            os.remove(paths["plot_file"])
        return ExecutionResult(
            success=False,
            code_file=code_file,
            error=f"{type(exc).__name__}: {exc}",
        )

    plot_file = paths["plot_file"] if os.path.exists(paths["plot_file"]) else None
    return ExecutionResult(
        success=True,
        code_file=code_file,
        output_file=paths["output_file"],
        plot_file=plot_file,
    )
