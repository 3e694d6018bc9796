from datetime import datetime

from auto_eda.utils.eda_types import EXECUTION_ERROR, AnalysisTask, TaskResult, WorkflowRun
from auto_eda.utils.run_summary import build_run_summary, create_summary_report, render_summary_markdown


def _run(output_dir):
    tasks = (AnalysisTask(1, "Histogram of age"), AnalysisTask(2, "Correlation matrix"))
    results = (
        TaskResult(
            task=tasks[0],
            success=True,
            attempts_used=1,
            code_file=f"{output_dir}/task_1_code.py",
            output_file=f"{output_dir}/task_1_output.txt",
            plot_file=f"{output_dir}/task_1_plot.png",
        ),
        TaskResult(
            task=tasks[1],
            success=False,
            attempts_used=3,
            code_file=f"{output_dir}/task_2_code.py",
            error="KeyError: 'age'",
            error_kind=EXECUTION_ERROR,
        ),
    )
    return WorkflowRun(
        data_name="people",
        output_dir=str(output_dir),
        tasks=tasks,
        results=results,
        generation_model="claude",
        review_model="gpt-4o",
    )


def test_summary_counts_and_relative_names(tmp_path):
    summary = build_run_summary(_run(tmp_path))
    assert (summary["total"], summary["successful"], summary["failed"]) == (2, 1, 1)
    first, second = summary["tasks"]
    assert first["plot_file"] == "task_1_plot.png"
    assert second["output_file"] is None
    assert second["error_kind"] == EXECUTION_ERROR


def test_markdown_layout(tmp_path):
    text = render_summary_markdown(build_run_summary(_run(tmp_path)), datetime(2024, 5, 1, 9, 30, 0))
    lines = text.splitlines()
    assert lines[0] == "# Auto-EDA Report: people"
    assert lines[1] == "Generated on: 2024-05-01 09:30:00"
    assert "generation=claude" in lines[2] and "review=gpt-4o" in lines[2]
    assert "- Plot: `task_1_plot.png`" in lines
    assert "- Code: `task_2_code.py`" in lines
    assert "- Error: KeyError: 'age'" in lines
    failed_section = text.split("### Task 2: Correlation matrix")[1]
    assert "- Output:" not in failed_section
    assert "- Status: ❌ Failed" in failed_section


def test_report_written_to_run_dir(tmp_path):
    path = create_summary_report(_run(tmp_path))
    assert path == str(tmp_path / "analysis_summary.md")
    assert "## Task Details" in (tmp_path / "analysis_summary.md").read_text(encoding="utf-8")
