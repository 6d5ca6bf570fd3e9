"""
replacer/text.py — The one untyped boundary: cell content to comparison text.

Both identifiers and lookup values pass through coerce_to_text, so a blank
cell, a whitespace-only cell and an error cell all read as "".
"""
from __future__ import annotations

from typing import Any

from .models import CellError


def coerce_to_text(value: Any) -> str:
    """
    Convert a raw cell value to its text form.

    None, CellError, a failed str() conversion, and empty or whitespace-only
    text all yield "". Anything else is returned untrimmed.
    """
    if value is None or isinstance(value, CellError):
        return ""
    try:
        text = str(value)
    except Exception:
        # Uncoercible content reads as blank.
        return ""
    if not text or text.isspace():
        return ""
    return text
