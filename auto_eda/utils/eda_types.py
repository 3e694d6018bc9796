"""
Data model for an auto-EDA run.

Tasks come from the parsed plan, every generate/review/execute cycle leaves an
AttemptRecord, and each task ends in exactly one TaskResult. The WorkflowRun
ties the results to the output directory once all tasks are processed.
"""
from dataclasses import dataclass, field
from typing import Optional, Tuple

# Review verdicts
APPROVED = "APPROVED"
REJECTED = "REJECTED"
NOT_REVIEWED = "NOT_REVIEWED"

# Attempt outcomes
SUCCESS = "SUCCESS"
EMPTY_GENERATION = "EMPTY_GENERATION"
REVIEW_REJECTED = "REVIEW_REJECTED"
EXECUTION_ERROR = "EXECUTION_ERROR"

ATTEMPT_FAILURES = (EMPTY_GENERATION, REVIEW_REJECTED, EXECUTION_ERROR)


@dataclass(frozen=True)
class AnalysisTask:
    index: int
    description: str


@dataclass(frozen=True)
class ReviewVerdict:
    status: str
    reason: Optional[str] = None

    @property
    def approved(self) -> bool:
        return self.status == APPROVED


@dataclass(frozen=True)
class ExecutionResult:
    success: bool
    code_file: Optional[str] = None
    output_file: Optional[str] = None
    plot_file: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class AttemptRecord:
    attempt: int
    outcome: str
    code: Optional[str] = None
    verdict: ReviewVerdict = field(default_factory=lambda: ReviewVerdict(NOT_REVIEWED))
    error: Optional[str] = None
    code_file: Optional[str] = None
    output_file: Optional[str] = None
    plot_file: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome == SUCCESS


@dataclass(frozen=True)
class TaskResult:
    task: AnalysisTask
    success: bool
    attempts_used: int
    code_file: Optional[str] = None
    output_file: Optional[str] = None
    plot_file: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    attempts: Tuple[AttemptRecord, ...] = ()


@dataclass(frozen=True)
class WorkflowRun:
    data_name: str
    output_dir: str
    tasks: Tuple[AnalysisTask, ...]
    results: Tuple[TaskResult, ...]
    generation_model: str = ""
    review_model: str = ""
    started_at: str = ""
    report_file: Optional[str] = None

    @property
    def total(self) -> int:
        return len(self.tasks)

    @property
    def successful(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if not result.success)
