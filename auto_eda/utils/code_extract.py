import re
from typing import Optional

# First complete fenced block: opening fence, optional language tag, newline, body, closing fence.
_FENCED_BLOCK = re.compile(r"```[ \t]*[A-Za-z0-9_+.-]*[ \t]*\r?\n(.*?)```", re.DOTALL)


def extract_code_block(raw: Optional[str]) -> Optional[str]:
    """
    Extracts executable source from a raw model response.

    Only the body of the first complete fenced block is kept; prose around it
    is discarded. Without a complete block the whole response is treated as
    code. Returns None when nothing usable is left.
    """
    if raw is None:
        return None
    code = str(raw)
    if "```" in code:
        match = _FENCED_BLOCK.search(code)
        if match:
            code = match.group(1)
    code = code.strip()
    if not code:
        return None
    return code
