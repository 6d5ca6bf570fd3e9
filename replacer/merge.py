"""
replacer/merge.py — Applies a lookup to the target dataset, in place.

Only rows whose identifier text is a lookup key are touched; the value cell
of such a row is replaced with the mapped text. Every other cell is left as
found. Mapped "" clears the cell rather than storing an empty string.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .io import Dataset, Sheet
from .models import Selector, SheetResult
from .text import coerce_to_text
from .traversal import traverse

logger = logging.getLogger(__name__)


def apply_lookup(
    dataset: Dataset,
    selector: Selector,
    lookup: Dict[str, str],
    results: Optional[List[SheetResult]] = None,
) -> int:
    """
    Overwrite the value column of every matching row in dataset.

    Returns the number of cells written.
    results: optional list that receives one SheetResult per sheet.
    """

    def _replace(sheet: Sheet, row: int) -> bool:
        key = coerce_to_text(sheet.read(row, selector.id_column))
        if key not in lookup:
            return False
        value = lookup[key]
        return sheet.write(row, selector.value_column, value if value else None)

    sheet_results = traverse(dataset, selector, _replace, role="target")
    if results is not None:
        results.extend(sheet_results)

    written = sum(r.rows_matched for r in sheet_results)
    logger.info(
        "Applied lookup to %s: %d cell(s) written over %d sheet(s), %d skipped",
        dataset.path,
        written,
        len(sheet_results),
        sum(1 for r in sheet_results if r.skipped),
    )
    return written
