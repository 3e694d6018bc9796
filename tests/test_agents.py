from auto_eda.agents.code_generator import CodeGeneratorAgent
from auto_eda.agents.planner import PlannerAgent
from auto_eda.agents.reviewer import ReviewerAgent
from auto_eda.utils.prompting import render_prompt


class RecordingLLM:
    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    def __call__(self, prompt, model):
        self.calls.append((prompt, model))
        return self.reply


def test_render_prompt_keeps_unknown_placeholders():
    assert render_prompt("  Hello $name, cost $$5 $missing\n", name="Ana") == "Hello Ana, cost $5 $missing"


def test_planner_prompt_and_reply():
    llm = RecordingLLM("1. Describe")
    planner = PlannerAgent(model="claude", llm=llm)
    assert planner.generate_eda_plan("Dataset: iris") == "1. Describe"
    prompt, model = llm.calls[0]
    assert model == "claude"
    assert "Dataset: iris" in prompt
    assert "List 3-5 specific analysis tasks" in prompt
    assert planner.last_prompt == prompt


def test_planner_empty_reply_is_empty_plan():
    assert PlannerAgent(llm=RecordingLLM(None)).generate_eda_plan("x") == ""


def test_generator_prompt_mentions_dataset_and_packages():
    llm = RecordingLLM("print(1)")
    agent = CodeGeneratorAgent(model="gpt-4o", llm=llm, installed_packages=["pandas", "seaborn", "requests"])
    assert agent.generate_analysis_code("Plot ages", "people") == "print(1)"
    prompt = llm.calls[0][0]
    assert "pandas DataFrame named `people`" in prompt
    assert "Plot ages" in prompt
    assert "3 Python packages installed" in prompt
    assert "pandas, seaborn" in prompt
    assert "pip" in prompt
    assert "previous attempt failed" not in prompt


def test_generator_includes_previous_error():
    agent = CodeGeneratorAgent(llm=RecordingLLM(""), auto_install=False)
    prompt = agent.build_prompt("Plot ages", "people", previous_error="KeyError: 'age'")
    assert "The previous attempt failed with this error:\nKeyError: 'age'" in prompt
    assert "Do not install packages" in prompt
    assert "pip" not in prompt


def test_reviewer_prompt_embeds_code_verbatim():
    llm = RecordingLLM("APPROVED")
    reviewer = ReviewerAgent(model="gpt-4o", llm=llm)
    code = "cost = '$price'\nprint(cost)"
    assert reviewer.review_code(code, "Show prices") == "APPROVED"
    prompt, model = llm.calls[0]
    assert model == "gpt-4o"
    assert code in prompt
    assert "Task: Show prices" in prompt
