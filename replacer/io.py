"""
replacer/io.py — Opening, reading, writing and closing datasets.

A Dataset is an ordered list of sheets behind a uniform 1-indexed
read/write surface. XLSX-family files go through openpyxl; a CSV file is a
single-sheet dataset.

Writable workbooks are loaded twice: the formula workbook receives writes
and is the one saved, while a data_only twin supplies cached display values
for reads. Saving the data_only twin would drop every formula.
"""
from __future__ import annotations

import codecs
import csv
import logging
import os
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple, Union

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import MergedCell
from openpyxl.utils.exceptions import IllegalCharacterError
from openpyxl.worksheet.worksheet import Worksheet

from .errors import (
    AppError,
    FILE_LOCKED, FILE_NOT_FOUND, ILLEGAL_CHARACTER, OPEN_FAILED, SAVE_FAILED,
    UNSUPPORTED_FORMAT,
)
from .models import CellError

logger = logging.getLogger(__name__)

XLSX_EXTENSIONS = (".xlsx", ".xlsm", ".xltx", ".xltm")
MACRO_EXTENSIONS = (".xlsm", ".xltm")
CSV_EXTENSIONS = (".csv",)


# ── Used range ────────────────────────────────────────────────────────────────

def is_occupied(value: Any) -> bool:
    """
    Single occupancy definition for used-range detection.
    Whitespace-only text counts as occupied.
    """
    if value is None:
        return False
    if isinstance(value, str) and value == "":
        return False
    return True


def compute_used_range(rows) -> Tuple[int, int]:
    """
    Returns (used_height, used_width), both measured from A1.
    """
    used_height = 0
    used_width = 0

    for r_idx, row in enumerate(rows):
        for c_idx, value in enumerate(row):
            if is_occupied(value):
                used_height = max(used_height, r_idx + 1)
                used_width = max(used_width, c_idx + 1)

    return used_height, used_width


# ── Sheets ────────────────────────────────────────────────────────────────────

class WorksheetSheet:
    """A 1-indexed view over an openpyxl worksheet."""

    def __init__(self, ws: Worksheet, values_ws: Optional[Worksheet] = None):
        self._ws = ws
        self._values_ws = values_ws if values_ws is not None else ws

    @property
    def title(self) -> str:
        return self._ws.title

    def used_range(self) -> Tuple[int, int]:
        return compute_used_range(self._ws.iter_rows(values_only=True))

    def read(self, row: int, col: int) -> Any:
        cell = self._values_ws.cell(row=row, column=col)
        if cell.data_type == "e":
            return CellError(str(cell.value or ""))
        return cell.value

    def write(self, row: int, col: int, value: Any) -> bool:
        """
        Set the cell at (row, col). Returns False, writing nothing, when the
        cell is covered by a merge anchored in another cell.
        """
        cell = self._ws.cell(row=row, column=col)
        if isinstance(cell, MergedCell):
            logger.debug(
                "Not writing %s!%s: merged into another cell", self.title, cell.coordinate
            )
            return False
        try:
            cell.value = value
        except IllegalCharacterError:
            raise AppError(
                ILLEGAL_CHARACTER,
                f"Value for {self.title}!{cell.coordinate} contains characters "
                f"that cannot be stored in a worksheet: {value!r}",
                {"sheet": self.title, "cell": cell.coordinate},
            )
        if isinstance(value, str) and cell.data_type == "f":
            # Replacement text is stored as text even when it starts with "=".
            cell.data_type = "s"
        return True


class TableSheet:
    """A 1-indexed view over an in-memory list of rows (CSV datasets)."""

    def __init__(self, title: str, rows: List[List[Any]]):
        self.title = title
        self.rows = rows

    def used_range(self) -> Tuple[int, int]:
        return compute_used_range(self.rows)

    def read(self, row: int, col: int) -> Any:
        if row > len(self.rows):
            return None
        cells = self.rows[row - 1]
        if col > len(cells):
            return None
        return cells[col - 1]

    def write(self, row: int, col: int, value: Any) -> bool:
        while len(self.rows) < row:
            self.rows.append([])
        cells = self.rows[row - 1]
        if len(cells) < col:
            cells.extend([""] * (col - len(cells)))
        cells[col - 1] = "" if value is None else value
        return True


Sheet = Union[WorksheetSheet, TableSheet]


# ── Datasets ──────────────────────────────────────────────────────────────────

@dataclass
class Dataset:
    path: str
    kind: str                                  # "xlsx" or "csv"
    sheets: List[Sheet] = field(default_factory=list)
    writable: bool = False
    closed: bool = False
    encoding: str = "utf-8"                    # CSV only; "utf-8-sig" when the file had a BOM
    _books: List[Workbook] = field(default_factory=list, repr=False)


def csv_encoding(path: str) -> str:
    """Encoding that reads and rewrites path with its BOM, if it has one."""
    with open(path, "rb") as f:
        head = f.read(len(codecs.BOM_UTF8))
    return "utf-8-sig" if head == codecs.BOM_UTF8 else "utf-8"


def load_csv(path: str, encoding: str = "utf-8-sig") -> List[List[Any]]:
    with open(path, newline="", encoding=encoding) as f:
        reader = csv.reader(f)
        return [list(row) for row in reader]


def _open_xlsx(path: str, writable: bool) -> Dataset:
    keep_vba = os.path.splitext(path)[1].lower() in MACRO_EXTENSIONS
    values_wb = load_workbook(path, data_only=True, keep_vba=keep_vba)
    if not writable:
        sheets = [WorksheetSheet(ws) for ws in values_wb.worksheets]
        return Dataset(path=path, kind="xlsx", sheets=sheets, _books=[values_wb])

    wb = load_workbook(path, keep_vba=keep_vba)
    sheets = [
        WorksheetSheet(ws, values_ws)
        for ws, values_ws in zip(wb.worksheets, values_wb.worksheets)
    ]
    # _books[0] is the workbook that gets saved.
    return Dataset(path=path, kind="xlsx", sheets=sheets, writable=True, _books=[wb, values_wb])


def _open_csv(path: str, writable: bool) -> Dataset:
    title = os.path.splitext(os.path.basename(path))[0]
    encoding = csv_encoding(path)
    sheet = TableSheet(title, load_csv(path, encoding))
    return Dataset(path=path, kind="csv", sheets=[sheet], writable=writable, encoding=encoding)


def open_dataset(path: str, writable: bool = False) -> Dataset:
    """
    Open the spreadsheet container at path. Raises AppError when the path
    does not resolve to an openable spreadsheet document.
    """
    if not path or not os.path.isfile(path):
        raise AppError(FILE_NOT_FOUND, f"File not found: {path}", {"path": path})

    ext = os.path.splitext(path)[1].lower()
    try:
        if ext in XLSX_EXTENSIONS:
            dataset = _open_xlsx(path, writable)
        elif ext in CSV_EXTENSIONS:
            dataset = _open_csv(path, writable)
        else:
            raise AppError(
                UNSUPPORTED_FORMAT,
                f"Unsupported file type: {ext or '(none)'}",
                {"path": path},
            )
    except PermissionError:
        raise AppError(FILE_LOCKED, f"File is locked: {path}", {"path": path})
    except AppError:
        raise
    except Exception as e:
        raise AppError(OPEN_FAILED, f"Could not open {path}: {e}", {"path": path})

    logger.debug(
        "Opened %s (%s, %d sheet(s), writable=%s)",
        path, dataset.kind, len(dataset.sheets), writable,
    )
    return dataset


def _save(dataset: Dataset) -> None:
    if dataset.kind == "csv":
        sheet = dataset.sheets[0]
        with open(dataset.path, "w", newline="", encoding=dataset.encoding) as f:
            csv.writer(f).writerows(sheet.rows)
    else:
        dataset._books[0].save(dataset.path)


def close_dataset(dataset: Dataset, commit: bool) -> None:
    """
    Persist (when commit and writable) and release a dataset.
    Closing an already closed dataset does nothing.
    """
    if dataset.closed:
        return
    try:
        if commit and dataset.writable:
            try:
                _save(dataset)
            except PermissionError:
                raise AppError(
                    FILE_LOCKED,
                    f"File is open in another program: {dataset.path}",
                    {"path": dataset.path},
                )
            except Exception as e:
                raise AppError(SAVE_FAILED, str(e), {"path": dataset.path})
            logger.info("Saved %s", dataset.path)
        else:
            logger.debug("Closed %s without saving", dataset.path)
    finally:
        for wb in dataset._books:
            wb.close()
        dataset._books = []
        dataset.closed = True
