"""Project snapshot loader.

Reads a YAML or JSON snapshot into an ``InMemoryProject`` and writes the
(possibly consolidated) project back out in the same shape.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import ValidationError

from consolidator.errors import ProjectLoadError
from consolidator.host.memory import InMemoryProject
from consolidator.host.schema import ProjectSnapshot
from consolidator.utils.logger import log_info, log_error

_JSON_SUFFIXES = (".json",)


def _parse(text: str, path: Path) -> Any:
    if path.suffix.lower() in _JSON_SUFFIXES:
        return json.loads(text)
    return yaml.safe_load(text)


def load_project(path: Union[str, Path]) -> InMemoryProject:
    """Load a project snapshot.

    Raises:
        ProjectLoadError: when the file is missing, malformed or invalid.
    """
    snapshot_path = Path(path)
    if not snapshot_path.exists():
        raise ProjectLoadError(f"Project file not found: {snapshot_path}")

    try:
        with open(snapshot_path, "r", encoding="utf-8") as fh:
            raw = _parse(fh.read(), snapshot_path) or {}
        snapshot = ProjectSnapshot(**raw)
    except (OSError, ValueError, TypeError, yaml.YAMLError, ValidationError) as exc:
        log_error("Failed to load project snapshot", error=str(exc), path=str(snapshot_path))
        raise ProjectLoadError(f"Invalid project file {snapshot_path}: {exc}") from exc

    project = project_from_snapshot(snapshot)
    log_info(
        "Loaded project snapshot",
        path=str(snapshot_path),
        resource_count=len(snapshot.resources),
        node_count=len(snapshot.nodes),
    )
    return project


def project_from_snapshot(snapshot: ProjectSnapshot) -> InMemoryProject:
    """Build an ``InMemoryProject`` from a validated snapshot."""
    return InMemoryProject(
        resources=[r.to_descriptor() for r in snapshot.resources],
        nodes=[n.to_node() for n in snapshot.nodes],
        roots=snapshot.roots,
        external_refs={r.id: r.external_refs for r in snapshot.resources if r.external_refs},
    )


def project_to_dict(project: InMemoryProject) -> Dict[str, Any]:
    """Serialize a project into the snapshot structure."""
    data: Dict[str, Any] = {
        "resources": [
            {
                "id": d.id,
                "kind": d.kind.value,
                "name": d.name,
                "fields": dict(d.fields),
                "external_refs": project.external_refs.get(d.id, 0),
            }
            for d in project.list_resources()
        ],
        "nodes": [
            {
                "id": n.node_id,
                "kind": n.kind.value,
                "name": n.name,
                "target": n.target,
                "children": list(n.children),
            }
            for n in project.nodes()
        ],
    }
    if project.roots is not None:
        data["roots"] = project.roots
    return data


def dump_project(project: InMemoryProject, path: Union[str, Path]) -> Path:
    """Write a project snapshot as YAML, or JSON for ``.json`` paths."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    data = project_to_dict(project)
    with open(out_path, "w", encoding="utf-8") as fh:
        if out_path.suffix.lower() in _JSON_SUFFIXES:
            json.dump(data, fh, ensure_ascii=False, indent=2)
        else:
            yaml.safe_dump(data, fh, sort_keys=False, allow_unicode=True)
    log_info("Wrote project snapshot", path=str(out_path))
    return out_path
