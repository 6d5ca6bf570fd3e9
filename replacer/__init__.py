from replacer.engine import run_merge
from replacer.lookup import build_lookup
from replacer.merge import apply_lookup
from replacer.models import Selector, MergeReport, SheetResult
from replacer.text import coerce_to_text

__all__ = [
    "run_merge",
    "build_lookup",
    "apply_lookup",
    "Selector",
    "MergeReport",
    "SheetResult",
    "coerce_to_text",
]
