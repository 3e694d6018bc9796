import textwrap
from string import Template
from typing import Any


def render_prompt(template: str, **values: Any) -> str:
    """
    Renders a $placeholder prompt template.

    Templates are written as indented triple-quoted blocks, so common leading
    whitespace is removed first. Unknown placeholders are left untouched.
    """
    text = textwrap.dedent(template).strip("\n")
    rendered = Template(text).safe_substitute({key: str(value) for key, value in values.items()})
    return rendered.strip()
