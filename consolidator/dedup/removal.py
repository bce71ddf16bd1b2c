"""Selection and removal of duplicates left without references."""

from __future__ import annotations

from typing import Callable, Iterable, List, Mapping, Optional

from consolidator.dedup.result import (
    ItemFailure,
    REMOVAL_BLOCKED,
    REMOVAL_ERROR,
    RemovalResult,
)
from consolidator.errors import RemovalBlocked
from consolidator.host.base import HostProject
from consolidator.utils.logger import log_error, log_info, log_warning


def select_removable_duplicates(
    substitution_map: Mapping[str, str],
    usage_counts: Mapping[str, int],
) -> List[str]:
    """Return map keys, in map order, whose post-substitution usage is zero.

    An id missing from ``usage_counts`` is treated as still in use.
    """
    return [
        duplicate_id
        for duplicate_id in substitution_map
        if usage_counts.get(duplicate_id) == 0
    ]


def remove_if_unused(
    project: HostProject,
    resource_ids: Iterable[str],
    on_removed: Optional[Callable[[str], None]] = None,
    label: str = "resource",
) -> RemovalResult:
    """Remove the given resources, re-checking usage right before each removal.

    A resource picked up by a new reference since selection is reported as
    blocked and left alone.
    """
    result = RemovalResult()
    for resource_id in resource_ids:
        try:
            usage = project.get_usage_count(resource_id)
            if usage != 0:
                blocked = RemovalBlocked(resource_id, usage)
                log_warning("Removal blocked", resource_id=resource_id, usage_count=usage)
                result.failures.append(ItemFailure(REMOVAL_BLOCKED, resource_id, str(blocked)))
                continue
            project.remove_resource(resource_id)
        except Exception as e:
            log_error(f"Failed to remove {label}", resource_id=resource_id, error=str(e))
            result.failures.append(ItemFailure(REMOVAL_ERROR, resource_id, str(e)))
            continue

        result.removed.append(resource_id)
        if on_removed is not None:
            on_removed(resource_id)

    if result.removed:
        log_info(f"Removed unused {label}s", count=len(result.removed))
    return result


def remove_duplicates(
    project: HostProject,
    resource_ids: Iterable[str],
    on_removed: Optional[Callable[[str], None]] = None,
) -> RemovalResult:
    """Remove duplicates left without references after substitution."""
    return remove_if_unused(project, resource_ids, on_removed, label="duplicate")
