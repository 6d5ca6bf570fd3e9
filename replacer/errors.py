from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class AppError(Exception):
    """
    User-facing error with a short code and structured details.
    Raise AppError from replacer modules; the CLI displays friendly_message() of it.
    """
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} ({self.details})"
        return f"{self.code}: {self.message}"


# ── Error codes (keep stable for tests and CLI) ───────────────────────────────

BAD_SELECTOR       = "BAD_SELECTOR"
BAD_COLUMN         = "BAD_COLUMN"
BAD_JOB            = "BAD_JOB"
FILE_NOT_FOUND     = "FILE_NOT_FOUND"
FILE_LOCKED        = "FILE_LOCKED"
OPEN_FAILED        = "OPEN_FAILED"
UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
SAVE_FAILED        = "SAVE_FAILED"
ILLEGAL_CHARACTER  = "ILLEGAL_CHARACTER"

# Raised before any dataset is opened; the CLI answers these with usage text.
CONFIG_ERRORS = frozenset({BAD_SELECTOR, BAD_COLUMN, BAD_JOB, FILE_NOT_FOUND})


def _file_suffix(e: AppError) -> str:
    if e.details and "path" in e.details:
        return f" ({os.path.basename(str(e.details['path']))})"
    return ""


# ── Friendly message lookup ───────────────────────────────────────────────────

def friendly_message(e: AppError) -> str:
    """
    Return a plain-English one-liner suitable for printing on the console.
    Never exposes raw tracebacks or internal code paths.
    """
    code = e.code
    msg  = e.message or ""
    fname = _file_suffix(e)

    if code == FILE_LOCKED:
        return f"File is open in another program{fname}. Close it and try again."

    if code == SAVE_FAILED:
        low = msg.lower()
        if "permission" in low or "locked" in low or "access" in low:
            return f"Could not save, the file is open in another program{fname}. Close it and try again."
        return f"Could not save the target file{fname}. Check that the path is valid and the folder exists."

    if code == FILE_NOT_FOUND:
        return f"File not found{fname}. Check that the file path is correct."

    if code == OPEN_FAILED:
        return f"Could not open the file{fname}. Check that it is a valid XLSX or CSV.\n({msg})"

    if code == UNSUPPORTED_FORMAT:
        return f"Unsupported file type{fname}. Use .xlsx, .xlsm, .xltx, .xltm or .csv."

    if code == ILLEGAL_CHARACTER:
        return f"A replacement value contains control characters that a worksheet cannot hold. Nothing was saved.\n({msg})"

    if code == BAD_COLUMN:
        return f"Invalid column. Use a number like 1 or letters like A or AA.\n({msg})"

    if code == BAD_SELECTOR:
        return f"Invalid selector. Use filePath,idColumn,valueColumn.\n({msg})"

    if code == BAD_JOB:
        return f"Invalid job file{fname}. Check its JSON structure.\n({msg})"

    # Fallback: first line of the raw message only
    clean = msg.splitlines()[0] if msg else "An unexpected error occurred."
    return clean
