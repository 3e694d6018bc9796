from typing import Callable, Optional

from auto_eda.utils.llm_client import send_to_llm
from auto_eda.utils.prompting import render_prompt

PLAN_PROMPT_TEMPLATE = """
    Based on this dataset summary:
    $data_summary

    Create a plan for exploratory data analysis. List $min_tasks-$max_tasks specific analysis tasks that would be most informative. Be concise and specific. Format as a numbered list.
"""


class PlannerAgent:
    def __init__(
        self,
        model: str = "claude",
        llm: Optional[Callable[[str, str], str]] = None,
        min_tasks: int = 3,
        max_tasks: int = 5,
    ):
        """
        Proposes the numbered analysis plan for a dataset.
        """
        self.model = model
        self.llm = llm or send_to_llm
        self.min_tasks = min_tasks
        self.max_tasks = max_tasks
        self.last_prompt = None
        self.last_response = None

    def build_prompt(self, data_summary: str) -> str:
        return render_prompt(
            PLAN_PROMPT_TEMPLATE,
            data_summary=data_summary,
            min_tasks=self.min_tasks,
            max_tasks=self.max_tasks,
        )

    def generate_eda_plan(self, data_summary: str) -> str:
        prompt = self.build_prompt(data_summary)
        self.last_prompt = prompt
        response = self.llm(prompt, self.model)
        self.last_response = response
        return response or ""
