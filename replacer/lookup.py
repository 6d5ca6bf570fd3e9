"""
replacer/lookup.py — Builds the identifier → value lookup from an input dataset.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .io import Dataset, Sheet
from .models import Selector, SheetResult
from .text import coerce_to_text
from .traversal import traverse

logger = logging.getLogger(__name__)


def build_lookup(
    dataset: Dataset,
    selector: Selector,
    results: Optional[List[SheetResult]] = None,
) -> Dict[str, str]:
    """
    Scan every sheet of dataset and map identifier text to value text.

    Identifiers share one namespace across sheets. On collision the last
    occurrence in traversal order wins (later sheet over earlier sheet,
    later row over earlier row). Blank identifiers map under "".

    results: optional list that receives one SheetResult per sheet.
    """
    lookup: Dict[str, str] = {}

    def _collect(sheet: Sheet, row: int) -> bool:
        key = coerce_to_text(sheet.read(row, selector.id_column))
        lookup[key] = coerce_to_text(sheet.read(row, selector.value_column))
        return True

    sheet_results = traverse(dataset, selector, _collect, role="input")
    if results is not None:
        results.extend(sheet_results)

    logger.info(
        "Built lookup from %s: %d entries over %d sheet(s), %d skipped",
        dataset.path,
        len(lookup),
        len(sheet_results),
        sum(1 for r in sheet_results if r.skipped),
    )
    return lookup
