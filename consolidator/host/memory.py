"""In-memory project model backed by descriptor and node records."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from consolidator.host.base import HostProject
from consolidator.models import NodeKind, ReferenceNode, ResourceDescriptor
from consolidator.utils.logger import log_debug


class InMemoryProject(HostProject):
    """Project snapshot held in plain Python objects.

    Args:
        resources: Resources in project order.
        nodes: Every composition and layer node.  Child ids that do not
            resolve to a node are ignored during traversal.
        roots: Ids of the nodes a sweep starts from.  Defaults to every
            composition node, in node order.
        external_refs: Per-resource count of references that live outside
            the node graph (e.g. proxies or render queue items).
    """

    def __init__(
        self,
        resources: Iterable[ResourceDescriptor] = (),
        nodes: Iterable[ReferenceNode] = (),
        roots: Optional[Iterable[str]] = None,
        external_refs: Optional[Dict[str, int]] = None,
    ):
        self._resources: Dict[str, ResourceDescriptor] = {}
        for descriptor in resources:
            self._resources[descriptor.id] = descriptor
        self._nodes: Dict[str, ReferenceNode] = {n.node_id: n for n in nodes}
        self._roots: Optional[List[str]] = list(roots) if roots is not None else None
        self.external_refs: Dict[str, int] = dict(external_refs or {})
        self.removed: List[str] = []

    # -- collaborator interface ----------------------------------------------

    def list_resources(self) -> List[ResourceDescriptor]:
        return list(self._resources.values())

    def root_nodes(self) -> List[ReferenceNode]:
        if self._roots is None:
            return [n for n in self._nodes.values() if n.kind == NodeKind.COMPOSITION]
        return [self._nodes[r] for r in self._roots if r in self._nodes]

    def children(self, node: ReferenceNode) -> List[ReferenceNode]:
        return [self._nodes[c] for c in node.children if c in self._nodes]

    def node_id(self, node: ReferenceNode) -> str:
        return node.node_id

    def get_reference_target(self, node: ReferenceNode) -> Optional[str]:
        return node.target

    def set_reference_target(self, node: ReferenceNode, resource_id: str) -> None:
        node.target = resource_id

    def get_usage_count(self, resource_id: str) -> int:
        in_graph = sum(1 for n in self._nodes.values() if n.target == resource_id)
        return in_graph + self.external_refs.get(resource_id, 0)

    def remove_resource(self, resource_id: str) -> None:
        if self._resources.pop(resource_id, None) is None:
            log_debug("Resource already removed", resource_id=resource_id)
            return
        self.external_refs.pop(resource_id, None)
        self.removed.append(resource_id)

    # -- convenience ---------------------------------------------------------

    @property
    def roots(self) -> Optional[List[str]]:
        return list(self._roots) if self._roots is not None else None

    def nodes(self) -> List[ReferenceNode]:
        return list(self._nodes.values())

    def node(self, node_id: str) -> ReferenceNode:
        return self._nodes[node_id]

    def resource(self, resource_id: str) -> Optional[ResourceDescriptor]:
        return self._resources.get(resource_id)

    def has_resource(self, resource_id: str) -> bool:
        return resource_id in self._resources
