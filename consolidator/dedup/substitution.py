"""Substitution sweep over the host's reference graph."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Set

from consolidator.dedup.result import (
    ItemFailure,
    SUBSTITUTION_CONFLICT,
    SUBSTITUTION_ERROR,
    SubstitutionJournal,
    SubstitutionResult,
)
from consolidator.errors import SubstitutionConflict
from consolidator.host.base import HostProject
from consolidator.utils.logger import log_debug, log_error, log_warning

RedirectHook = Callable[[str, Optional[str], str], None]


def apply_substitutions(
    project: HostProject,
    substitution_map: Mapping[str, str],
    journal: Optional[SubstitutionJournal] = None,
    on_redirect: Optional[RedirectHook] = None,
    visited: Optional[Set[str]] = None,
) -> SubstitutionResult:
    """Redirect every reference whose target is a key of the map.

    All root nodes are walked with one shared visited set, so a composition
    nested in several places is swept once.

    Args:
        project: Host collaborator.
        substitution_map: Duplicate id to canonical id.
        journal: Redirects already made by an interrupted run of this pass.
            Nodes it lists are checked instead of blindly redirected.
        on_redirect: Called with ``(node_id, old_target, new_target)`` right
            after each redirect, e.g. to stream an audit entry.
        visited: Visited set to share with an outer traversal.

    Returns:
        ``SubstitutionResult`` whose ``replaced`` counts references changed
        by this call, and whose ``journal`` holds every redirect known to the
        pass (previous ones included).
    """
    result = SubstitutionResult(journal=dict(journal or {}))
    prior = journal or {}
    seen: Set[str] = visited if visited is not None else set()

    def visit(node: Any) -> None:
        result.visited += 1
        node_id = project.node_id(node)
        target = project.get_reference_target(node)

        if node_id in prior:
            previous, expected = prior[node_id]
            if target == expected:
                return
            if target != previous:
                conflict = SubstitutionConflict(node_id, expected, target)
                log_warning("Reference changed since last redirect; left untouched",
                            node_id=node_id, expected=expected, found=target)
                result.failures.append(ItemFailure(SUBSTITUTION_CONFLICT, node_id, str(conflict)))
                return

        if target is None or target not in substitution_map:
            return

        canonical = substitution_map[target]
        try:
            project.set_reference_target(node, canonical)
        except Exception as e:
            log_error("Failed to redirect reference", node_id=node_id, target=target, error=str(e))
            result.failures.append(ItemFailure(SUBSTITUTION_ERROR, node_id, str(e)))
            return

        result.replaced += 1
        result.journal[node_id] = (target, canonical)
        log_debug("Reference redirected", node_id=node_id, old=target, new=canonical)
        if on_redirect is not None:
            on_redirect(node_id, target, canonical)

    for root in project.root_nodes():
        project.walk_reference_tree(root, visit, seen)

    return result
