"""Listing and removal of resources nothing in the project refers to."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

from consolidator.dedup.removal import remove_if_unused
from consolidator.dedup.result import RemovalResult
from consolidator.host.base import HostProject
from consolidator.models import ResourceKind

MISSING_FILE = "Missing File"
UNKNOWN_SIZE = "Unknown"

_UNITS = ((1024 ** 3, "GB"), (1024 ** 2, "MB"), (1024, "KB"))


@dataclass(frozen=True)
class UnusedResource:
    id: str
    name: str
    path: str
    size: str

    def display(self) -> str:
        return f"{self.name} | {self.size} | {self.path}"


def format_file_size(size_bytes: Any) -> str:
    """Render a byte count as ``B``/``KB``/``MB``/``GB`` rounded to 2 decimals."""
    if size_bytes is None or isinstance(size_bytes, bool):
        return UNKNOWN_SIZE
    try:
        size = float(size_bytes)
    except (TypeError, ValueError):
        return UNKNOWN_SIZE
    if size < 0:
        return UNKNOWN_SIZE
    if size < 1024:
        return f"{int(size)} B"
    for factor, unit in _UNITS:
        if size >= factor:
            value = round(size / factor, 2)
            return f"{value:g} {unit}"
    return UNKNOWN_SIZE


def find_unused_resources(project: HostProject) -> List[UnusedResource]:
    """Return every resource whose usage count is zero, in project order."""
    unused: List[UnusedResource] = []
    for descriptor in project.list_resources():
        if project.get_usage_count(descriptor.id) != 0:
            continue
        path = descriptor.get("path") if descriptor.kind == ResourceKind.FILE_BACKED else None
        unused.append(UnusedResource(
            id=descriptor.id,
            name=descriptor.name or descriptor.id,
            path=str(path) if path else MISSING_FILE,
            size=format_file_size(descriptor.get("file_size")),
        ))
    return unused


def remove_unused_resources(
    project: HostProject,
    resource_ids: Optional[Iterable[str]] = None,
    on_removed: Optional[Callable[[str], None]] = None,
) -> RemovalResult:
    """Remove unused resources from the project.

    ``resource_ids`` defaults to everything ``find_unused_resources`` lists.
    Usage is re-read right before each removal, so a resource that gained a
    reference since it was listed is reported as blocked and kept.  Only the
    project item is removed; files on disk are left alone.
    """
    if resource_ids is None:
        resource_ids = [item.id for item in find_unused_resources(project)]
    return remove_if_unused(project, resource_ids, on_removed, label="resource")
