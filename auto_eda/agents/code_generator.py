from typing import Callable, List, Optional

from auto_eda.utils.llm_client import send_to_llm
from auto_eda.utils.prompting import render_prompt
from auto_eda.utils.sandbox_deps import get_available_packages

CODE_PROMPT_TEMPLATE = """
    Generate Python code to perform this analysis task on the dataset '$data_name':
    $task

    Requirements:
    - The dataset is already loaded as a pandas DataFrame named `$data_name` (also available as `df`)
    - Use pandas functions where appropriate
    - Include necessary import statements at the beginning
    - $package_info
    - Create informative visualizations with matplotlib or seaborn where applicable
    - Do not call plt.savefig() or plt.close(); the current figure is saved automatically
    - Add clear titles and labels
    - Print the key numeric results so they appear in the output
    - Return ONLY executable Python code, no explanations or markdown
    - Do not include any markdown code fences
"""

INSTALL_PATTERN = """
      try:
          import packagename
      except ImportError:
          import subprocess, sys
          subprocess.check_call([sys.executable, "-m", "pip", "install", "packagename"])
          import packagename"""

PREVIOUS_ERROR_TEMPLATE = """

    The previous attempt failed with this error:
    $previous_error
    Please fix the code to avoid this error.
    If the error is about a missing package, use the import pattern shown above.
"""


class CodeGeneratorAgent:
    def __init__(
        self,
        model: str = "claude",
        llm: Optional[Callable[[str, str], str]] = None,
        installed_packages: Optional[List[str]] = None,
        auto_install: bool = True,
    ):
        """
        Writes the analysis script for one planned task.
        """
        self.model = model
        self.llm = llm or send_to_llm
        self.installed_packages = installed_packages
        self.auto_install = auto_install
        self.last_prompt = None
        self.last_response = None

    def _package_info(self) -> str:
        if self.installed_packages:
            available = get_available_packages(self.installed_packages)
            info = (
                f"This system has {len(self.installed_packages)} Python packages installed.\n"
                f"  Already installed packages you can use freely: {', '.join(available) or 'pandas'}.\n"
                "  Feel free to use any standard Python packages you need."
            )
        else:
            info = "Stick to pandas, numpy and matplotlib where possible."
        if self.auto_install:
            info += "\n  For any package that might not be installed, use this pattern:" + INSTALL_PATTERN
        else:
            info += "\n  Do not install packages; only import what is already available."
        return info

    def build_prompt(self, task: str, data_name: str, previous_error: Optional[str] = None) -> str:
        prompt = render_prompt(
            CODE_PROMPT_TEMPLATE,
            data_name=data_name,
            task=task,
            package_info=self._package_info(),
        )
        if previous_error is not None:
            prompt += "\n\n" + render_prompt(PREVIOUS_ERROR_TEMPLATE, previous_error=previous_error)
        return prompt

    def generate_analysis_code(self, task: str, data_name: str, previous_error: Optional[str] = None) -> str:
        """
        Returns the raw model reply; fence stripping happens in the attempt loop.
        """
        prompt = self.build_prompt(task, data_name, previous_error)
        self.last_prompt = prompt
        response = self.llm(prompt, self.model)
        self.last_response = response
        return response
