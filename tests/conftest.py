"""Pytest configuration and fixtures for footage-consolidator tests."""

import pytest
from unittest.mock import Mock, patch

# Add the project root to the Python path
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from consolidator.host.memory import InMemoryProject
from consolidator.models import NodeKind, ReferenceNode, ResourceDescriptor, ResourceKind
from consolidator.run_config import RunConfig


def pytest_collection_modifyitems(items):
    """Tag everything under tests/unit with the ``unit`` marker."""
    unit_dir = Path(__file__).parent / "unit"
    for item in items:
        if unit_dir in Path(item.path).parents:
            item.add_marker(pytest.mark.unit)


def make_file(resource_id, path="/footage/clip.mov", **overrides):
    """File-backed descriptor with sensible interpretation defaults."""
    fields = {
        "path": path,
        "width": 1920,
        "height": 1080,
        "duration": 10.0,
        "frame_rate": 24.0,
        "alpha_mode": "straight",
        "remove_pulldown": "off",
        "conform_frame_rate": 0,
        "is_still": False,
    }
    fields.update(overrides)
    return ResourceDescriptor(id=resource_id, kind=ResourceKind.FILE_BACKED, fields=fields, name=resource_id)


def make_solid(resource_id, color=(1.0, 0.0, 0.0)):
    return ResourceDescriptor(
        id=resource_id, kind=ResourceKind.GENERATED_SOLID, fields={"color": list(color)}, name=resource_id
    )


def make_placeholder(resource_id, name="Missing Plate", width=1920, height=1080):
    return ResourceDescriptor(
        id=resource_id,
        kind=ResourceKind.PLACEHOLDER,
        fields={"name": name, "width": width, "height": height},
        name=name,
    )


def comp(node_id, *children):
    return ReferenceNode(node_id=node_id, kind=NodeKind.COMPOSITION, name=node_id, children=list(children))


def layer(node_id, target=None, *children):
    return ReferenceNode(node_id=node_id, kind=NodeKind.LAYER, name=node_id, target=target, children=list(children))


@pytest.fixture
def no_hash_config():
    """Run config without content hashing so fake paths produce signatures."""
    return RunConfig(content_hash_enabled=False, pass_id="test-pass")


@pytest.fixture
def duplicate_project():
    """Two copies of one clip, one unique clip, and a shared precomp.

    main ─┬─ L1 → A
          ├─ L2 → B (duplicate of A)
          ├─ L3 → precomp ─ L5 → B
          └─ L4 → precomp (shared)
    side ─── L6 → C
    """
    resources = [
        make_file("A", "/footage/clip.mov"),
        make_file("B", "/footage/clip.mov"),
        make_file("C", "/footage/other.mov"),
    ]
    nodes = [
        comp("main", "L1", "L2", "L3", "L4"),
        layer("L1", "A"),
        layer("L2", "B"),
        layer("L3", None, "precomp"),
        layer("L4", None, "precomp"),
        comp("precomp", "L5"),
        layer("L5", "B"),
        comp("side", "L6"),
        layer("L6", "C"),
    ]
    return InMemoryProject(resources=resources, nodes=nodes)


@pytest.fixture
def mock_config():
    """Mock configuration for testing."""
    with patch("consolidator.config.get_config") as mock_get_config:
        config = Mock()

        config.content_hash_enabled = False
        config.content_hash_bytes = 1048576
        config.content_hash_algorithm = "sha1"
        config.remove_duplicates = True
        config.dry_run = False
        config.audit_enabled = False
        config.audit_file = ".consolidator_cache/audit_logs.jsonl"
        config.project_file = ""
        config.log_level = "INFO"
        config.log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        config.max_json_output_length = 1000

        config.validate_configuration.return_value = []
        config.log_configuration.return_value = None

        mock_get_config.return_value = config
        yield config


SAMPLE_PROJECT_YAML = """\
resources:
  - id: 1
    kind: file
    name: plate_v001.mov
    fields:
      path: /footage/plate_v001.mov
      width: 1920
      height: 1080
      duration: 5
      frame_rate: 25
      alpha_mode: ignore
      remove_pulldown: "off"
      conform_frame_rate: 0
      file_size: 1572864
  - id: 2
    kind: file
    name: plate_v001.mov
    fields:
      path: /footage/plate_v001.mov
      width: 1920.0
      height: 1080.0
      duration: 5.0
      frame_rate: 25.0
      alpha_mode: ignore
      remove_pulldown: "off"
      conform_frame_rate: 0
  - id: 3
    kind: solid
    name: Red Solid
    fields:
      color: [1, 0, 0]
  - id: 4
    kind: solid
    name: Red Solid 2
    fields:
      color: [1.0, 0.0, 0.0]
    external_refs: 1
nodes:
  - id: main
    kind: composition
    children: [l1, l2, l3, l4]
  - id: l1
    target: 1
  - id: l2
    target: 2
  - id: l3
    target: 3
  - id: l4
    target: 4
"""


@pytest.fixture
def sample_project_file(tmp_path):
    f = tmp_path / "project.yaml"
    f.write_text(SAMPLE_PROJECT_YAML)
    return f
