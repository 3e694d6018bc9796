import os
from datetime import datetime
from typing import Any, Dict, List, Optional

from auto_eda.utils.eda_types import WorkflowRun
from auto_eda.utils.run_workspace import REPORT_FILE


def _basename(path: Optional[str]) -> Optional[str]:
    return os.path.basename(path) if path else None


def build_run_summary(run: WorkflowRun) -> Dict[str, Any]:
    """
    Report data contract: counts plus one entry per task with artifact file
    names (relative to the run directory) and the final error, if any.
    """
    tasks: List[Dict[str, Any]] = []
    for task, result in zip(run.tasks, run.results):
        tasks.append(
            {
                "index": task.index,
                "description": task.description,
                "success": result.success,
                "attempts_used": result.attempts_used,
                "code_file": _basename(result.code_file),
                "output_file": _basename(result.output_file),
                "plot_file": _basename(result.plot_file),
                "error": result.error,
                "error_kind": result.error_kind,
            }
        )
    return {
        "data_name": run.data_name,
        "output_dir": run.output_dir,
        "generation_model": run.generation_model,
        "review_model": run.review_model,
        "total": run.total,
        "successful": run.successful,
        "failed": run.failed,
        "tasks": tasks,
    }


def render_summary_markdown(summary: Dict[str, Any], generated_on: Optional[datetime] = None) -> str:
    stamp = (generated_on or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    lines = [
        f"# Auto-EDA Report: {summary['data_name']}",
        f"Generated on: {stamp}",
        f"Models: generation={summary.get('generation_model') or 'n/a'}, review={summary.get('review_model') or 'n/a'}",
        "",
        "## Summary",
        f"- Total tasks: {summary['total']}",
        f"- Successful: {summary['successful']}",
        f"- Failed: {summary['failed']}",
        "",
        "## Task Details",
        "",
    ]
    for item in summary["tasks"]:
        lines.append(f"### Task {item['index']}: {item['description']}")
        lines.append(f"- Status: {'✅ Success' if item['success'] else '❌ Failed'}")
        lines.append(f"- Attempts: {item['attempts_used']}")
        if item.get("code_file"):
            lines.append(f"- Code: `{item['code_file']}`")
        if item.get("output_file"):
            lines.append(f"- Output: `{item['output_file']}`")
        if item.get("plot_file"):
            lines.append(f"- Plot: `{item['plot_file']}`")
        if item.get("error"):
            lines.append(f"- Error: {item['error']}")
        lines.append("")
    return "\n".join(lines)


def create_summary_report(run: WorkflowRun, generated_on: Optional[datetime] = None) -> str:
    report_file = os.path.join(run.output_dir, REPORT_FILE)
    with open(report_file, "w", encoding="utf-8", errors="backslashreplace") as f:
        f.write(render_summary_markdown(build_run_summary(run), generated_on))
    return report_file
