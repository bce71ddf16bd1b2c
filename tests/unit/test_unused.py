"""Unit tests for unused resource listing and removal."""

import pytest
from unittest.mock import MagicMock

from conftest import comp, layer, make_file, make_solid
from consolidator.host.memory import InMemoryProject
from consolidator.dedup.result import REMOVAL_BLOCKED, REMOVAL_ERROR
from consolidator.unused import (
    MISSING_FILE,
    UNKNOWN_SIZE,
    find_unused_resources,
    format_file_size,
    remove_unused_resources,
)


class TestFormatFileSize:
    @pytest.mark.parametrize(
        "size, expected",
        [
            (0, "0 B"),
            (512, "512 B"),
            (1024, "1 KB"),
            (1536, "1.5 KB"),
            (1572864, "1.5 MB"),
            (1073741824, "1 GB"),
            (1234567, "1.18 MB"),
        ],
    )
    def test_units(self, size, expected):
        assert format_file_size(size) == expected

    @pytest.mark.parametrize("value", [None, "big", -1, True])
    def test_unknown(self, value):
        assert format_file_size(value) == UNKNOWN_SIZE


class TestFindUnusedResources:
    def test_lists_only_zero_usage(self):
        project = InMemoryProject(
            resources=[
                make_file("A", "/footage/a.mov", file_size=2048),
                make_file("B", "/footage/b.mov"),
                make_solid("S"),
            ],
            nodes=[comp("main", "l1"), layer("l1", "A")],
        )
        unused = find_unused_resources(project)
        assert [u.id for u in unused] == ["B", "S"]
        assert unused[0].path == "/footage/b.mov"
        assert unused[0].size == UNKNOWN_SIZE
        assert unused[1].path == MISSING_FILE

    def test_external_reference_counts_as_used(self):
        project = InMemoryProject(resources=[make_file("A")], external_refs={"A": 1})
        assert find_unused_resources(project) == []

    def test_display_line(self):
        project = InMemoryProject(resources=[make_file("A", "/footage/a.mov", file_size=1536)])
        assert find_unused_resources(project)[0].display() == "A | 1.5 KB | /footage/a.mov"


def _project_with_unused():
    return InMemoryProject(
        resources=[make_file("A", "/footage/a.mov"), make_file("B", "/footage/b.mov"), make_solid("S")],
        nodes=[comp("main", "l1", "l2"), layer("l1", "A"), layer("l2")],
    )


class TestRemoveUnusedResources:
    def test_removes_everything_listed_by_default(self):
        project = _project_with_unused()
        result = remove_unused_resources(project)
        assert result.removed == ["B", "S"]
        assert result.failures == []
        assert [r.id for r in project.list_resources()] == ["A"]

    def test_only_given_ids_removed(self):
        project = _project_with_unused()
        result = remove_unused_resources(project, ["S"])
        assert result.removed == ["S"]
        assert project.has_resource("B")

    def test_resource_referenced_after_listing_is_kept(self):
        project = _project_with_unused()
        listed = [item.id for item in find_unused_resources(project)]
        project.set_reference_target(project.node("l2"), "B")

        result = remove_unused_resources(project, listed)
        assert result.removed == ["S"]
        assert result.blocked == ["B"]
        assert result.failures[0].kind == REMOVAL_BLOCKED
        assert project.has_resource("B")

    def test_used_resource_never_removed(self):
        project = _project_with_unused()
        result = remove_unused_resources(project, ["A"])
        assert result.removed == []
        assert project.has_resource("A")

    def test_host_error_recorded_and_sweep_continues(self):
        project = _project_with_unused()
        original = project.remove_resource

        def flaky(resource_id):
            if resource_id == "B":
                raise RuntimeError("item locked")
            original(resource_id)

        project.remove_resource = flaky
        result = remove_unused_resources(project)
        assert result.removed == ["S"]
        assert [(f.kind, f.item_id) for f in result.failures] == [(REMOVAL_ERROR, "B")]

    def test_on_removed_hook(self):
        hook = MagicMock()
        remove_unused_resources(_project_with_unused(), ["S"], on_removed=hook)
        hook.assert_called_once_with("S")
