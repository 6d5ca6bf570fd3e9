from __future__ import annotations

import os
import re
from typing import Union

from .errors import AppError, BAD_COLUMN, BAD_SELECTOR, FILE_NOT_FOUND
from .models import Selector


_COL_RE = re.compile(r"^[A-Z]+$")
_INT_RE = re.compile(r"^[+-]?\d+$")


def col_letters_to_index(col: str) -> int:
    """
    Convert Excel column letters to 1-based index (A->1, Z->26, AA->27).
    """
    s = (col or "").strip().upper()
    if not s or not _COL_RE.match(s):
        raise AppError(BAD_COLUMN, f"Bad column: {col!r}")
    n = 0
    for ch in s:
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n


def col_index_to_letters(n: int) -> str:
    """
    Convert 1-based index to Excel column letters (1->A).
    """
    if n <= 0:
        raise AppError(BAD_COLUMN, f"Bad column index: {n}")
    out = []
    x = n
    while x:
        x, rem = divmod(x - 1, 26)
        out.append(chr(ord("A") + rem))
    return "".join(reversed(out))


def parse_column(value: Union[str, int]) -> int:
    """
    Parse a column given as an integer ('2', '-1') or as letters ('B').
    Integers are not range-checked; an index outside a sheet's used range
    just makes that sheet skip.
    """
    if isinstance(value, bool):
        raise AppError(BAD_COLUMN, f"Bad column: {value!r}")
    if isinstance(value, int):
        return value
    s = (value or "").strip()
    if _INT_RE.match(s):
        return int(s)
    return col_letters_to_index(s)


def resolve_path(path: str) -> str:
    """Absolute path of an existing file, or AppError(FILE_NOT_FOUND)."""
    p = (path or "").strip()
    if not p or not os.path.isfile(p):
        raise AppError(FILE_NOT_FOUND, f"File not found: {path!r}", {"path": path})
    return os.path.abspath(p)


def parse_selector(text: str) -> Selector:
    """
    Parse 'filePath,idColumn,valueColumn' into a Selector.

    Split from the right so the path may itself contain commas; fields after
    the third are ignored.
    """
    parts = (text or "").split(",")
    if len(parts) < 3:
        raise AppError(
            BAD_SELECTOR,
            f"Expected filePath,idColumn,valueColumn (got {text!r})",
        )
    # Extra trailing fields would otherwise be taken for the columns.
    while len(parts) > 3 and not _looks_like_path(",".join(parts[:-2])):
        parts = parts[:-1]

    head, id_text, value_text = ",".join(parts[:-2]), parts[-2], parts[-1]
    id_column = parse_column(id_text)
    value_column = parse_column(value_text)
    return Selector(
        file_path=resolve_path(head),
        id_column=id_column,
        value_column=value_column,
    )


def _looks_like_path(candidate: str) -> bool:
    return os.path.isfile(candidate.strip())
