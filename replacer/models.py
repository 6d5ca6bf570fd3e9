from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal


# ---- Run configuration ----

@dataclass
class Selector:
    """
    One side of a merge: a dataset path plus the identifier and value columns.
    Columns are 1-based; out-of-range values are legal and make sheets skip.
    """
    file_path: str
    id_column: int = 1
    value_column: int = 2

    def columns_in_range(self, column_count: int) -> bool:
        return (
            1 <= self.id_column <= column_count
            and 1 <= self.value_column <= column_count
        )


@dataclass(frozen=True)
class CellError:
    """Marker returned by Sheet.read for cells holding a spreadsheet error (#N/A, #REF!, ...)."""
    code: str = ""


# ---- Run reporting ----

Role = Literal["input", "target"]


@dataclass
class SheetResult:
    dataset_path: str
    sheet_name: str
    role: Role
    skipped: bool = False
    row_count: int = 0
    column_count: int = 0
    rows_scanned: int = 0
    rows_matched: int = 0
    message: str = ""


@dataclass
class MergeReport:
    """
    Returned by engine.run_merge. The CLI renders this; tests can assert it.
    """
    ok: bool
    lookup_size: int = 0
    cells_written: int = 0
    committed: bool = False
    results: List[SheetResult] = field(default_factory=list)

    def for_role(self, role: Role) -> List[SheetResult]:
        return [r for r in self.results if r.role == role]

    @property
    def skipped_sheets(self) -> List[SheetResult]:
        return [r for r in self.results if r.skipped]
