"""Data classes for consolidation results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from consolidator.models import EquivalenceClass, SubstitutionMap

SIGNATURE_UNAVAILABLE = "signature_unavailable"
SUBSTITUTION_CONFLICT = "substitution_conflict"
SUBSTITUTION_ERROR = "substitution_error"
REMOVAL_BLOCKED = "removal_blocked"
REMOVAL_ERROR = "removal_error"

# node id -> (previous target, canonical target)
SubstitutionJournal = Dict[str, Tuple[Optional[str], str]]


@dataclass
class ItemFailure:
    """One per-item problem recorded during a pass.

    Attributes:
        kind: One of the ``SIGNATURE_UNAVAILABLE``, ``SUBSTITUTION_CONFLICT``,
            ``SUBSTITUTION_ERROR``, ``REMOVAL_BLOCKED`` or ``REMOVAL_ERROR``
            constants.
        item_id: Descriptor id or node id the failure is about.
        message: Human-readable explanation.
    """

    kind: str
    item_id: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind, "item_id": self.item_id, "message": self.message}


@dataclass
class SubstitutionResult:
    """Outcome of one substitution sweep over the reference graph."""

    replaced: int = 0
    visited: int = 0
    journal: SubstitutionJournal = field(default_factory=dict)
    failures: List[ItemFailure] = field(default_factory=list)

    @property
    def conflicts(self) -> List[ItemFailure]:
        return [f for f in self.failures if f.kind == SUBSTITUTION_CONFLICT]

    @property
    def errors(self) -> List[ItemFailure]:
        return [f for f in self.failures if f.kind == SUBSTITUTION_ERROR]


@dataclass
class RemovalResult:
    """Outcome of removing selected resources."""

    removed: List[str] = field(default_factory=list)
    failures: List[ItemFailure] = field(default_factory=list)

    @property
    def blocked(self) -> List[str]:
        return [f.item_id for f in self.failures if f.kind == REMOVAL_BLOCKED]


@dataclass
class ConsolidationReport:
    """Everything a consolidation pass computed and changed."""

    pass_id: str
    dry_run: bool = False
    resources_scanned: int = 0
    classes: Dict[str, EquivalenceClass] = field(default_factory=dict)
    substitution_map: SubstitutionMap = field(default_factory=dict)
    references_replaced: int = 0
    nodes_visited: int = 0
    journal: SubstitutionJournal = field(default_factory=dict)
    removable: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    failures: List[ItemFailure] = field(default_factory=list)

    @property
    def duplicates_found(self) -> int:
        return len(self.substitution_map)

    @property
    def duplicates_removed(self) -> int:
        return len(self.removed)

    def failures_of(self, kind: str) -> List[ItemFailure]:
        return [f for f in self.failures if f.kind == kind]

    def summary(self) -> str:
        """Human-readable completion message."""
        if self.resources_scanned == 0:
            return "No footage items found in project."
        if not self.substitution_map:
            return "No duplicate footage found in project."
        title = "Duplicate footage consolidation complete!"
        if self.dry_run:
            title = "Duplicate footage consolidation (dry run):"
        lines = [
            title,
            f"Duplicates found: {self.duplicates_found}",
            f"References replaced: {self.references_replaced}",
            f"Duplicates removed: {self.duplicates_removed}",
        ]
        if self.failures:
            lines.append(f"Items skipped: {len(self.failures)}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pass_id": self.pass_id,
            "dry_run": self.dry_run,
            "resources_scanned": self.resources_scanned,
            "classes": {
                sig: [m.id for m in group.members]
                for sig, group in self.classes.items()
                if len(group) > 1
            },
            "substitution_map": dict(self.substitution_map),
            "references_replaced": self.references_replaced,
            "nodes_visited": self.nodes_visited,
            "removable": list(self.removable),
            "removed": list(self.removed),
            "failures": [f.to_dict() for f in self.failures],
        }
