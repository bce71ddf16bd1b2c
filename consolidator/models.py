"""Core data types shared by the dedup engine and host adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional


class ResourceKind(str, Enum):
    """Variant tag of a project resource."""

    FILE_BACKED = "file"
    GENERATED_SOLID = "solid"
    PLACEHOLDER = "placeholder"


class NodeKind(str, Enum):
    """Variant tag of a node in the reference graph."""

    COMPOSITION = "composition"
    LAYER = "layer"


@dataclass(frozen=True)
class ResourceDescriptor:
    """Normalized, immutable record of one resource's identifying attributes.

    ``fields`` keeps the insertion order of the mapping it was built from and
    is exposed read-only.
    """

    id: str
    kind: ResourceKind
    fields: Mapping[str, Any] = field(default_factory=dict, hash=False)
    name: str = ""

    def __post_init__(self):
        object.__setattr__(self, "kind", ResourceKind(self.kind))
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)


@dataclass
class EquivalenceClass:
    """Descriptors sharing one signature, in first-seen order."""

    signature: str
    members: List[ResourceDescriptor] = field(default_factory=list)

    @property
    def canonical(self) -> ResourceDescriptor:
        return self.members[0]

    @property
    def duplicates(self) -> List[ResourceDescriptor]:
        return self.members[1:]

    def __len__(self) -> int:
        return len(self.members)


SubstitutionMap = Dict[str, str]


@dataclass
class ReferenceNode:
    """A consumer node (composition or layer) that may point at a resource.

    ``children`` lists node ids in order; a layer that uses a nested
    composition lists that composition's node id.
    """

    node_id: str
    kind: NodeKind = NodeKind.LAYER
    name: str = ""
    target: Optional[str] = None
    children: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.kind = NodeKind(self.kind)
