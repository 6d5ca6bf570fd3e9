"""
replacer/engine.py — One merge run, from open to close.

Responsible for:
  - Opening the target (writable) and the input (read-only)
  - Building the lookup from the input and applying it to the target
  - Closing both datasets; only the target is ever saved, and only on commit
  - Returning a MergeReport

Any dataset already opened is closed without saving before an error
propagates. Writes already made in memory are discarded with it.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from .io import Dataset, close_dataset, open_dataset
from .lookup import build_lookup
from .merge import apply_lookup
from .models import MergeReport, Selector, SheetResult

logger = logging.getLogger(__name__)


def _discard(dataset: Optional[Dataset]) -> None:
    if dataset is None or dataset.closed:
        return
    try:
        close_dataset(dataset, commit=False)
    except Exception:
        logger.warning("Failed to release %s", dataset.path, exc_info=True)


def run_merge(target: Selector, input: Selector, commit: bool = True) -> MergeReport:
    """
    Merge input values into target by identifier.

    commit=False is a dry run: matching and counting happen as usual but the
    target file is left untouched on disk.

    Raises AppError when a dataset cannot be opened or the target cannot be saved.
    """
    results: List[SheetResult] = []
    target_ds: Optional[Dataset] = None
    input_ds: Optional[Dataset] = None

    try:
        target_ds = open_dataset(target.file_path, writable=True)
        input_ds = open_dataset(input.file_path)

        lookup = build_lookup(input_ds, input, results)
        written = apply_lookup(target_ds, target, lookup, results)

        close_dataset(input_ds, commit=False)
        close_dataset(target_ds, commit=commit)
    finally:
        _discard(input_ds)
        _discard(target_ds)

    logger.info(
        "Merge finished: %d lookup entries, %d cell(s) written, %s",
        len(lookup), written, "saved" if commit else "dry run, not saved",
    )
    return MergeReport(
        ok=True,
        lookup_size=len(lookup),
        cells_written=written,
        committed=commit,
        results=results,
    )
