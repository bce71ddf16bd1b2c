"""Pydantic models for project snapshot files.

A snapshot lists the project's resources, its composition/layer nodes and,
optionally, the root nodes a substitution sweep starts from.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from consolidator.models import NodeKind, ReferenceNode, ResourceDescriptor, ResourceKind


class ResourceRecord(BaseModel):
    """One resource entry of a snapshot."""

    id: str = Field(..., description="Host-assigned resource id")
    kind: ResourceKind = Field(..., description="file, solid or placeholder")
    name: str = Field("", description="Display name")
    fields: Dict[str, Any] = Field(default_factory=dict, description="Identifying attributes")
    external_refs: int = Field(0, ge=0, description="References held outside the node graph")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        return str(v)

    def to_descriptor(self) -> ResourceDescriptor:
        return ResourceDescriptor(id=self.id, kind=self.kind, fields=self.fields, name=self.name)


class NodeRecord(BaseModel):
    """One composition or layer entry of a snapshot."""

    id: str = Field(..., description="Unique node id")
    kind: NodeKind = Field(NodeKind.LAYER, description="composition or layer")
    name: str = Field("", description="Display name")
    target: Optional[str] = Field(None, description="Resource id the node points at")
    children: List[str] = Field(default_factory=list, description="Child node ids in order")

    @field_validator("id", "target", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        return str(v) if v is not None else None

    @field_validator("children", mode="before")
    @classmethod
    def coerce_children(cls, v: Any) -> Any:
        return [str(c) for c in v] if v is not None else []

    def to_node(self) -> ReferenceNode:
        return ReferenceNode(
            node_id=self.id,
            kind=self.kind,
            name=self.name,
            target=self.target,
            children=list(self.children),
        )


class ProjectSnapshot(BaseModel):
    """Root container of a snapshot file."""

    resources: List[ResourceRecord] = Field(default_factory=list)
    nodes: List[NodeRecord] = Field(default_factory=list)
    roots: Optional[List[str]] = Field(None, description="Sweep roots; defaults to all compositions")

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "ProjectSnapshot":
        resource_ids = [r.id for r in self.resources]
        if len(set(resource_ids)) != len(resource_ids):
            raise ValueError("resource ids must be unique")
        node_ids = [n.id for n in self.nodes]
        if len(set(node_ids)) != len(node_ids):
            raise ValueError("node ids must be unique")
        known = set(node_ids)
        missing = [r for r in (self.roots or []) if r not in known]
        if missing:
            raise ValueError(f"unknown root node(s): {missing}")
        return self
