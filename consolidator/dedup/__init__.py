"""Duplicate detection and consolidation engine.

Signatures group resources into equivalence classes; the first member of a
class is canonical and every other member is redirected to it.
"""

from consolidator.dedup.signature import compute_signature
from consolidator.dedup.grouping import build_equivalence_classes, build_substitution_map
from consolidator.dedup.substitution import apply_substitutions
from consolidator.dedup.removal import remove_duplicates, select_removable_duplicates
from consolidator.dedup.result import ConsolidationReport
from consolidator.dedup.engine import Consolidator

__all__ = [
    "compute_signature",
    "build_equivalence_classes",
    "build_substitution_map",
    "apply_substitutions",
    "select_removable_duplicates",
    "remove_duplicates",
    "ConsolidationReport",
    "Consolidator",
]
