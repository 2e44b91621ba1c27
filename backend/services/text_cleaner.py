import re
from typing import Any

MARKDOWN_SYMBOLS = re.compile(r"^[ \t]*#+[ \t]*|[#*]", re.MULTILINE)
EXCESS_BLANK_LINES = re.compile(r"\n{3,}")


def strip_markdown(text: str) -> str:
    """Remove heading hashes and emphasis asterisks from model output."""
    return MARKDOWN_SYMBOLS.sub("", text or "")


def tidy_text(text: str) -> str:
    """strip_markdown, then collapse runs of blank lines and trim."""
    return EXCESS_BLANK_LINES.sub("\n\n", strip_markdown(text)).strip()


def sanitize(value: Any) -> Any:
    """Apply strip_markdown to every string inside a JSON-like payload."""
    if isinstance(value, str):
        return strip_markdown(value)
    if isinstance(value, list):
        return [sanitize(v) for v in value]
    if isinstance(value, dict):
        return {k: sanitize(v) for k, v in value.items()}
    return value
