"""Exception types raised by the consolidator."""

from __future__ import annotations

from typing import Optional


class ConsolidatorError(Exception):
    """Base class for all consolidator errors."""


class SignatureUnavailable(ConsolidatorError):
    """A descriptor's identifying fields could not be read."""

    def __init__(self, resource_id: str, reason: str):
        super().__init__(f"Signature unavailable for {resource_id}: {reason}")
        self.resource_id = resource_id
        self.reason = reason


class SubstitutionConflict(ConsolidatorError):
    """A reference was redirected to a different target than the pass expected."""

    def __init__(self, node_id: str, expected: Optional[str], found: Optional[str]):
        super().__init__(
            f"Reference on node {node_id} points at {found!r}, expected {expected!r}"
        )
        self.node_id = node_id
        self.expected = expected
        self.found = found


class RemovalBlocked(ConsolidatorError):
    """A duplicate selected for removal is still in use."""

    def __init__(self, resource_id: str, usage_count: int):
        super().__init__(
            f"Resource {resource_id} still has {usage_count} reference(s); not removed"
        )
        self.resource_id = resource_id
        self.usage_count = usage_count


class CollaboratorUnavailable(ConsolidatorError):
    """The host project could not supply the data a pass needs."""


class ProjectLoadError(ConsolidatorError):
    """A project snapshot file could not be read or validated."""
