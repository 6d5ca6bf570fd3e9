"""
replacer/traversal.py — Shared sheet → bounds check → row loop.

Both the lookup builder and the merge applier walk a dataset the same way;
only the per-row callback differs. A sheet whose used range does not contain
both selector columns is skipped whole, never raised on.
"""
from __future__ import annotations

import logging
from typing import Callable, List

from .io import Dataset, Sheet
from .models import Role, Selector, SheetResult

logger = logging.getLogger(__name__)

RowVisitor = Callable[[Sheet, int], bool]
"""visit(sheet, row) -> True when the row matched (or was written)."""


def traverse(
    dataset: Dataset,
    selector: Selector,
    visit: RowVisitor,
    role: Role,
) -> List[SheetResult]:
    """
    Call visit(sheet, row) for rows 1..row_count of every in-range sheet,
    in dataset order. The used range is measured once per sheet, before
    its first row is visited.

    Returns one SheetResult per sheet, skipped ones included.
    """
    results: List[SheetResult] = []

    for sheet in dataset.sheets:
        row_count, column_count = sheet.used_range()
        result = SheetResult(
            dataset_path=dataset.path,
            sheet_name=sheet.title,
            role=role,
            row_count=row_count,
            column_count=column_count,
        )

        if not selector.columns_in_range(column_count):
            result.skipped = True
            result.message = (
                f"columns {selector.id_column},{selector.value_column} "
                f"outside 1..{column_count}"
            )
            logger.debug("Skipping %s sheet %r: %s", role, sheet.title, result.message)
            results.append(result)
            continue

        for row in range(1, row_count + 1):
            if visit(sheet, row):
                result.rows_matched += 1
            result.rows_scanned += 1

        result.message = f"{result.rows_matched} of {result.rows_scanned} rows"
        results.append(result)

    return results
