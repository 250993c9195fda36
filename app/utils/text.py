# app/utils/text.py
import re
from typing import List

_invalid_filename_chars = re.compile(r'[^A-Za-z0-9\-\_\(\)\[\]\s]')


def sanitize_filename(name: str) -> str:
    """
    Remove characters unsafe for filenames and collapse spaces.
    Example: "AI Tools (v1)" -> "AI_Tools_(v1)"
    """
    if not name:
        return "document"
    cleaned = _invalid_filename_chars.sub("", name)
    cleaned = re.sub(r"\s+", "_", cleaned).strip("_")
    return cleaned or "document"


def split_lines(text: str | None) -> List[str]:
    """Non-empty lines of a free-text field, right-stripped. CRLF tolerant."""
    if not text:
        return []
    return [ln.rstrip() for ln in text.replace("\r\n", "\n").replace("\r", "\n").split("\n") if ln.strip()]


def truncate(text: str | None, limit: int) -> str:
    if not text:
        return ""
    return text if len(text) <= limit else text[:limit] + "..."
