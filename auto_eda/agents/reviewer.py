from typing import Callable, Optional

from auto_eda.utils.llm_client import send_to_llm
from auto_eda.utils.prompting import render_prompt

REVIEW_PROMPT_TEMPLATE = """
    Review this Python code for CRITICAL issues only:
    Task: $task

    Code:
    $code

    Check for:
    1. Syntax errors that would prevent execution
    2. Dangerous operations (file deletion, system commands, etc.)
    3. Infinite loops or operations that would hang

    IGNORE minor issues like:
    - Code style or redundancy
    - Suboptimal approaches (as long as they work)
    - Missing features (if core task is accomplished)

    Reply with 'APPROVED' if the code is safe to run and will accomplish the basic task.
    Only reply 'NEEDS_REVISION: [reason]' for CRITICAL issues that prevent execution.
"""


class ReviewerAgent:
    def __init__(self, model: str = "gpt-4o", llm: Optional[Callable[[str, str], str]] = None):
        """
        Vets generated code before it is executed.
        """
        self.model = model
        self.llm = llm or send_to_llm
        self.last_prompt = None
        self.last_response = None

    def build_prompt(self, code: str, task: str) -> str:
        return render_prompt(REVIEW_PROMPT_TEMPLATE, task=task, code=code)

    def review_code(self, code: str, task: str) -> str:
        prompt = self.build_prompt(code, task)
        self.last_prompt = prompt
        response = self.llm(prompt, self.model)
        self.last_response = response
        return response or ""
