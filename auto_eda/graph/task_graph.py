"""
Per-task attempt loop.

Each task runs through a small LangGraph state machine:

    generate_code -> review_code -> execute_code -> END (success)
          |               |              |
          +-------> retry_check <--------+
                      |       |
          generate_code       END (exhausted)

Every failing gate stores its message as `last_error`; the next generation
attempt only ever sees that latest message.
"""
import operator
import os
from typing import Annotated, Any, Callable, Dict, List, Optional, TypedDict

from langgraph.graph import END, StateGraph

from auto_eda.utils.code_extract import extract_code_block
from auto_eda.utils.eda_types import (
    EMPTY_GENERATION,
    EXECUTION_ERROR,
    REJECTED,
    REVIEW_REJECTED,
    SUCCESS,
    AnalysisTask,
    AttemptRecord,
    ExecutionResult,
    ReviewVerdict,
    TaskResult,
)
from auto_eda.utils.review_status import review_gate
from auto_eda.utils.sandbox_executor import execute_with_capture

NO_CODE_GENERATED = "No code was generated by the model"

STATUS_RUNNING = "running"
STATUS_SUCCESS = "success"
STATUS_EXHAUSTED = "exhausted"


class TaskAttemptState(TypedDict, total=False):
    task_index: int
    task: str
    data_name: str
    output_dir: str
    max_attempts: int
    attempt: int
    code: Optional[str]
    verdict: ReviewVerdict
    execution: ExecutionResult
    last_error: Optional[str]
    last_error_kind: Optional[str]
    last_code_file: Optional[str]
    status: str
    attempts: Annotated[List[AttemptRecord], operator.add]


def check_generation(state: TaskAttemptState) -> str:
    return "generated" if state.get("code") else "empty"


def check_review(state: TaskAttemptState) -> str:
    verdict = state.get("verdict")
    if verdict is not None and verdict.approved:
        return "approved"
    return "rejected"


def check_execution(state: TaskAttemptState) -> str:
    return "success" if state.get("status") == STATUS_SUCCESS else "failed"


def check_retry(state: TaskAttemptState) -> str:
    return "exhausted" if state.get("status") == STATUS_EXHAUSTED else "retry"


def build_task_graph(
    generator: Any,
    reviewer: Any,
    executor: Callable[..., ExecutionResult] = execute_with_capture,
    scope: Optional[Dict[str, Any]] = None,
    debug: bool = False,
):
    """
    Compiles the attempt loop for one run.

    Args:
        generator: exposes generate_analysis_code(task, data_name, previous_error) -> str.
        reviewer: exposes review_code(code, task) -> str.
        executor: execute_with_capture-compatible callable.
        scope: Names pre-bound for the executed code (e.g. the dataset).
        debug: Echo generated code to the console.
    """
    review_model = getattr(reviewer, "model", "reviewer")

    def generate_code(state: TaskAttemptState) -> Dict[str, Any]:
        attempt = state.get("attempt", 0) + 1
        print(f"  Attempt {attempt} - Generating code...")
        previous_error = state.get("last_error") if attempt > 1 else None
        failure = None
        try:
            raw = generator.generate_analysis_code(state["task"], state["data_name"], previous_error)
        except Exception as exc:
            raw = None
            failure = f"Code generation failed: {exc}"
        code = extract_code_block(raw)
        if code is None:
            error = failure or NO_CODE_GENERATED
            print(f"  ❌ {error}")
            record = AttemptRecord(attempt=attempt, outcome=EMPTY_GENERATION, error=error)
            return {
                "attempt": attempt,
                "code": None,
                "last_error": error,
                "last_error_kind": EMPTY_GENERATION,
                "attempts": [record],
            }
        if debug:
            print("  📝 Generated code:")
            print(code)
        return {"attempt": attempt, "code": code}

    def review_code(state: TaskAttemptState) -> Dict[str, Any]:
        print(f"  Reviewing code with {review_model}...")
        code = state.get("code")
        try:
            verdict = review_gate(code, state["task"], reviewer)
        except Exception as exc:
            verdict = ReviewVerdict(REJECTED, reason=f"Code review failed: {exc}")
        if verdict.approved:
            print("  ✓ Code approved. Executing...")
            return {"verdict": verdict}
        print(f"  ❌ Code review failed: {verdict.reason}")
        record = AttemptRecord(
            attempt=state["attempt"],
            outcome=REVIEW_REJECTED,
            code=code,
            verdict=verdict,
            error=verdict.reason,
        )
        return {
            "verdict": verdict,
            "last_error": verdict.reason,
            "last_error_kind": REVIEW_REJECTED,
            "attempts": [record],
        }

    def execute_code(state: TaskAttemptState) -> Dict[str, Any]:
        code = state["code"]
        try:
            result = executor(code, state["output_dir"], state["task_index"], scope)
        except Exception as exc:
            result = ExecutionResult(success=False, error=f"Code execution failed: {type(exc).__name__}: {exc}")
        if result.success:
            print("  ✅ Success!")
            if result.output_file:
                print(f"  📄 Output saved to: {os.path.basename(result.output_file)}")
            if result.plot_file:
                print(f"  📊 Plot saved to: {os.path.basename(result.plot_file)}")
            record = AttemptRecord(
                attempt=state["attempt"],
                outcome=SUCCESS,
                code=code,
                verdict=state["verdict"],
                code_file=result.code_file,
                output_file=result.output_file,
                plot_file=result.plot_file,
            )
            return {
                "execution": result,
                "status": STATUS_SUCCESS,
                "last_code_file": result.code_file,
                "attempts": [record],
            }
        print(f"  ❌ Error: {result.error}")
        record = AttemptRecord(
            attempt=state["attempt"],
            outcome=EXECUTION_ERROR,
            code=code,
            verdict=state["verdict"],
            error=result.error,
            code_file=result.code_file,
        )
        return {
            "execution": result,
            "last_error": result.error,
            "last_error_kind": EXECUTION_ERROR,
            "last_code_file": result.code_file or state.get("last_code_file"),
            "attempts": [record],
        }

    def retry_check(state: TaskAttemptState) -> Dict[str, Any]:
        max_attempts = state["max_attempts"]
        if state["attempt"] < max_attempts:
            if state.get("last_error_kind") == EXECUTION_ERROR:
                print("  Regenerating code to fix error...")
            else:
                print("  Trying again...")
            return {"status": STATUS_RUNNING}
        print(f"  ⚠️  Failed after {max_attempts} attempts")
        return {"status": STATUS_EXHAUSTED}

    workflow = StateGraph(TaskAttemptState)

    workflow.add_node("generate_code", generate_code)
    workflow.add_node("review_code", review_code)
    workflow.add_node("execute_code", execute_code)
    workflow.add_node("retry_check", retry_check)

    workflow.set_entry_point("generate_code")

    workflow.add_conditional_edges(
        "generate_code",
        check_generation,
        {
            "generated": "review_code",
            "empty": "retry_check",
        }
    )
    workflow.add_conditional_edges(
        "review_code",
        check_review,
        {
            "approved": "execute_code",
            "rejected": "retry_check",
        }
    )
    workflow.add_conditional_edges(
        "execute_code",
        check_execution,
        {
            "success": END,
            "failed": "retry_check",
        }
    )
    workflow.add_conditional_edges(
        "retry_check",
        check_retry,
        {
            "retry": "generate_code",
            "exhausted": END,
        }
    )

    return workflow.compile()


def run_task_attempts(
    task_graph: Any,
    task: AnalysisTask,
    data_name: str,
    output_dir: str,
    max_attempts: int = 3,
) -> TaskResult:
    """
    Drives one task through the attempt loop and returns its terminal result.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    initial: TaskAttemptState = {
        "task_index": task.index,
        "task": task.description,
        "data_name": data_name,
        "output_dir": output_dir,
        "max_attempts": max_attempts,
        "attempt": 0,
        "code": None,
        "last_error": None,
        "last_error_kind": None,
        "last_code_file": None,
        "status": STATUS_RUNNING,
        "attempts": [],
    }
    # Each attempt visits at most four nodes.
    final = task_graph.invoke(initial, config={"recursion_limit": max_attempts * 4 + 10})
    attempts = tuple(final.get("attempts") or [])
    attempts_used = int(final.get("attempt") or 0)

    if final.get("status") == STATUS_SUCCESS:
        execution = final["execution"]
        return TaskResult(
            task=task,
            success=True,
            attempts_used=attempts_used,
            code_file=execution.code_file,
            output_file=execution.output_file,
            plot_file=execution.plot_file,
            attempts=attempts,
        )
    return TaskResult(
        task=task,
        success=False,
        attempts_used=attempts_used,
        code_file=final.get("last_code_file"),
        error=final.get("last_error"),
        error_kind=final.get("last_error_kind"),
        attempts=attempts,
    )
