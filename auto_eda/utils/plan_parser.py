import re
from typing import List

from auto_eda.utils.eda_types import AnalysisTask
from auto_eda.utils.errors import EmptyPlanError

_TASK_LINE = re.compile(r"^(\d+)\. (.*)$")


def parse_plan_tasks(plan_text: str) -> List[AnalysisTask]:
    """
    Turns a numbered-list plan into ordered analysis tasks.

    Only lines starting with "<digits>. " count as tasks; everything else
    (intro prose, notes, bullets) is dropped. Raises EmptyPlanError when no
    line matches.
    """
    tasks: List[AnalysisTask] = []
    for line in (plan_text or "").splitlines():
        match = _TASK_LINE.match(line)
        if not match:
            continue
        tasks.append(AnalysisTask(index=len(tasks) + 1, description=match.group(2).strip()))
    if not tasks:
        raise EmptyPlanError(plan_text)
    return tasks
