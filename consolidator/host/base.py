"""Collaborator interface between the dedup engine and a host project."""

from __future__ import annotations

import abc
from typing import Any, Callable, List, Optional, Set

from consolidator.models import ResourceDescriptor


class HostProject(abc.ABC):
    """Abstract project model consumed by the consolidator.

    Nodes are opaque to the engine; it only passes them back to the accessor
    methods.  ``node_id`` must be stable for the duration of a pass since the
    traversal guard is keyed by it.
    """

    @abc.abstractmethod
    def list_resources(self) -> List[ResourceDescriptor]:
        """Return every resource in stable project order."""

    @abc.abstractmethod
    def root_nodes(self) -> List[Any]:
        """Return the nodes a substitution sweep starts from."""

    @abc.abstractmethod
    def children(self, node: Any) -> List[Any]:
        """Return the direct children of a node, nested compositions included."""

    @abc.abstractmethod
    def node_id(self, node: Any) -> str:
        """Return the identity of a node."""

    @abc.abstractmethod
    def get_reference_target(self, node: Any) -> Optional[str]:
        """Return the resource id the node points at, if any."""

    @abc.abstractmethod
    def set_reference_target(self, node: Any, resource_id: str) -> None:
        """Point the node at another resource.  Must not recurse."""

    @abc.abstractmethod
    def get_usage_count(self, resource_id: str) -> int:
        """Return how many references currently point at the resource."""

    @abc.abstractmethod
    def remove_resource(self, resource_id: str) -> None:
        """Remove a resource; a no-op when it is already gone."""

    def walk_reference_tree(
        self,
        node: Any,
        visit: Callable[[Any], None],
        visited: Optional[Set[str]] = None,
    ) -> Set[str]:
        """Visit ``node`` and everything below it, each node at most once.

        The walk is depth-first in child order.  Pass the same ``visited``
        set for every root of one pass so shared nested compositions are
        entered only once overall.

        Returns:
            The visited set, updated in place.
        """
        seen = visited if visited is not None else set()
        stack = [node]
        while stack:
            current = stack.pop()
            key = self.node_id(current)
            if key in seen:
                continue
            seen.add(key)
            visit(current)
            stack.extend(reversed(self.children(current)))
        return seen
