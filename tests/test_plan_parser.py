import pytest

from auto_eda.utils.eda_types import AnalysisTask
from auto_eda.utils.errors import EmptyPlanError
from auto_eda.utils.plan_parser import parse_plan_tasks


def test_numbered_lines_become_tasks_in_order():
    plan = "Here is the plan:\n1. Summarize columns\n- a bullet\n2. Plot a histogram\n"
    assert parse_plan_tasks(plan) == [
        AnalysisTask(1, "Summarize columns"),
        AnalysisTask(2, "Plot a histogram"),
    ]


def test_multi_digit_ordinals_and_renumbering():
    plan = "\n".join(f"{i}. task {i}" for i in range(3, 13))
    tasks = parse_plan_tasks(plan)
    assert len(tasks) == 10
    assert [t.index for t in tasks] == list(range(1, 11))
    assert tasks[-1].description == "task 12"


def test_indented_or_unspaced_lines_are_ignored():
    plan = "  1. indented\n2.no space\n3. kept  "
    assert parse_plan_tasks(plan) == [AnalysisTask(1, "kept")]


def test_plan_without_tasks_raises():
    with pytest.raises(EmptyPlanError) as excinfo:
        parse_plan_tasks("I cannot help with that.")
    assert "No tasks found" in str(excinfo.value)
    assert excinfo.value.plan_text == "I cannot help with that."


def test_empty_plan_raises():
    with pytest.raises(EmptyPlanError):
        parse_plan_tasks("")
