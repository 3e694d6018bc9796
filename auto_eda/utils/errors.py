class AutoEDAError(RuntimeError):
    """Base error for the auto-EDA workflow."""


class EmptyPlanError(AutoEDAError):
    """Raised when a plan document contains no numbered task lines."""

    def __init__(self, plan_text: str = ""):
        self.plan_text = plan_text or ""
        super().__init__("No tasks found in the analysis plan. Please check the LLM response.")


class LLMProviderError(AutoEDAError):
    """Raised when a model provider fails to return a completion."""

    def __init__(self, model: str, message: str):
        self.model = model
        super().__init__(f"LLM call failed for model '{model}': {message}")
