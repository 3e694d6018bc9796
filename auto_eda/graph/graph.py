"""
Auto-EDA workflow.

Plans an exploratory analysis for a DataFrame, then drives every planned task
through the generate -> review -> execute attempt loop and writes a markdown
report of the outcomes.
"""
import re
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Optional, Sequence, Tuple

import pandas as pd

from auto_eda.agents.code_generator import CodeGeneratorAgent
from auto_eda.agents.planner import PlannerAgent
from auto_eda.agents.reviewer import ReviewerAgent
from auto_eda.graph.task_graph import build_task_graph, run_task_attempts
from auto_eda.utils.dataset_summary import build_data_summary
from auto_eda.utils.eda_types import AnalysisTask, ExecutionResult, TaskResult, WorkflowRun
from auto_eda.utils.errors import EmptyPlanError
from auto_eda.utils.plan_parser import parse_plan_tasks
from auto_eda.utils.run_logger import finalize_run_log, init_run_log, log_run_event
from auto_eda.utils.run_summary import build_run_summary, create_summary_report
from auto_eda.utils.run_workspace import (
    PLAN_FILE,
    SUMMARY_FILE,
    init_output_dir,
    save_dataset_snapshot,
    write_text_artifact,
)
from auto_eda.utils.sandbox_deps import get_installed_packages
from auto_eda.utils.sandbox_executor import execute_with_capture

DEFAULT_DATA_NAME = "dataset"


def dataset_variable_name(name: str) -> str:
    """Python identifier under which the dataset is bound for generated code."""
    ident = re.sub(r"\W+", "_", str(name or "")).strip("_")
    if not ident:
        return DEFAULT_DATA_NAME
    if ident[0].isdigit():
        ident = f"data_{ident}"
    return ident


def run_tasks(
    tasks: Sequence[AnalysisTask],
    task_graph: Any,
    data_name: str,
    output_dir: str,
    max_attempts: int = 3,
) -> Tuple[TaskResult, ...]:
    """
    Runs each task through the attempt loop in plan order.

    A task that exhausts its attempts is recorded and the next task starts.
    """
    results: Tuple[TaskResult, ...] = ()
    for task in tasks:
        print(f"\n🔍 Task {task.index}/{len(tasks)}: {task.description}")
        result = run_task_attempts(task_graph, task, data_name, output_dir, max_attempts)
        for record in result.attempts:
            log_run_event(
                output_dir,
                "attempt_complete",
                {
                    "task": task.index,
                    "attempt": record.attempt,
                    "outcome": record.outcome,
                    "verdict": record.verdict.status,
                    "error": record.error,
                },
            )
        log_run_event(
            output_dir,
            "task_complete",
            {
                "task": task.index,
                "success": result.success,
                "attempts_used": result.attempts_used,
                "error_kind": result.error_kind,
            },
        )
        results = results + (result,)
    return results


def run_auto_eda(
    data: pd.DataFrame,
    data_name: Optional[str] = None,
    max_attempts: int = 3,
    generation_model: str = "claude",
    review_model: str = "gpt-4o",
    output_dir: Optional[str] = None,
    debug: bool = False,
    auto_install: bool = True,
    planner: Any = None,
    generator: Any = None,
    reviewer: Any = None,
    executor: Callable[..., ExecutionResult] = execute_with_capture,
    llm: Optional[Callable[[str, str], str]] = None,
) -> Optional[WorkflowRun]:
    """
    Runs the full auto-EDA workflow on a DataFrame.

    Args:
        data: Dataset to analyse. Generated code only ever sees copies.
        data_name: Display name; defaults to data.attrs["name"] or "dataset".
        max_attempts: Attempts allowed per task (>= 1).
        generation_model: Model alias for planning and code generation.
        review_model: Model alias for code review.
        output_dir: Explicit run directory; a timestamped one is created otherwise.
        debug: Echo generated code to the console.
        auto_install: Let the generator suggest installing missing packages.
        planner, generator, reviewer: Agent overrides (mainly for tests).
        executor: SandboxExecutor-compatible callable.
        llm: text-in/text-out callable shared by the default agents.

    Returns:
        The completed WorkflowRun, or None when the plan has no tasks.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    if data_name is None:
        data_name = data.attrs.get("name") or DEFAULT_DATA_NAME
    var_name = dataset_variable_name(data_name)
    started_at = datetime.now().isoformat(timespec="seconds")

    print("🚀 Starting Multi-Model Auto-EDA Workflow")
    print("=" * 50)

    output_dir = init_output_dir(data_name, output_dir)
    print(f"📁 Output directory: {output_dir}")
    init_run_log(
        output_dir,
        {
            "data_name": data_name,
            "rows": int(data.shape[0]),
            "columns": int(data.shape[1]),
            "generation_model": generation_model,
            "review_model": review_model,
            "max_attempts": max_attempts,
        },
    )
    save_dataset_snapshot(data, output_dir)

    print("\n📊 Step 1: Generating data summary...")
    data_summary = build_data_summary(data, data_name)
    print(data_summary)
    write_text_artifact(output_dir, SUMMARY_FILE, data_summary)

    print("\n📦 Checking installed packages...")
    installed = get_installed_packages()
    print(f"Found {len(installed)} installed packages")

    planner = planner or PlannerAgent(model=generation_model, llm=llm)
    generator = generator or CodeGeneratorAgent(
        model=generation_model,
        llm=llm,
        installed_packages=installed,
        auto_install=auto_install,
    )
    reviewer = reviewer or ReviewerAgent(model=review_model, llm=llm)

    print(f"\n📋 Step 2: Creating analysis plan with {generation_model}...")
    plan = planner.generate_eda_plan(data_summary)
    print(plan)
    write_text_artifact(output_dir, PLAN_FILE, plan)

    try:
        tasks = parse_plan_tasks(plan)
    except EmptyPlanError as exc:
        print(f"⚠️  {exc}")
        log_run_event(output_dir, "plan_empty", {"plan": plan})
        finalize_run_log(output_dir, {"status": "empty_plan"})
        return None
    log_run_event(output_dir, "plan_parsed", {"tasks": [t.description for t in tasks]})

    print(f"\n🔄 Step 3: Executing {len(tasks)} analysis tasks...")
    task_graph = build_task_graph(
        generator,
        reviewer,
        executor=executor,
        scope={var_name: data, "df": data},
        debug=debug,
    )
    results = run_tasks(tasks, task_graph, var_name, output_dir, max_attempts)

    run = WorkflowRun(
        data_name=data_name,
        output_dir=output_dir,
        tasks=tuple(tasks),
        results=results,
        generation_model=generation_model,
        review_model=review_model,
        started_at=started_at,
    )

    print("\n📝 Step 4: Creating summary report...")
    run = replace(run, report_file=create_summary_report(run))

    summary = build_run_summary(run)
    finalize_run_log(
        output_dir,
        {"status": "complete", "total": summary["total"], "successful": summary["successful"], "failed": summary["failed"]},
    )

    print("\n✨ Workflow complete!")
    print(f"📁 All outputs saved to: {output_dir}")
    print(f"✅ Successful tasks: {run.successful}/{run.total}")
    return run
