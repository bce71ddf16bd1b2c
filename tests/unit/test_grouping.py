"""Unit tests for equivalence classes and the substitution map."""

import random

import pytest

from conftest import make_file, make_solid
from consolidator.dedup.grouping import build_equivalence_classes, build_substitution_map
from consolidator.models import ResourceDescriptor, ResourceKind


def _sig(mapping):
    """Signature function backed by a fixed id -> signature table."""
    return lambda d: mapping.get(d.id)


def _descs(*ids):
    return [ResourceDescriptor(id=i, kind=ResourceKind.PLACEHOLDER) for i in ids]


class TestBuildEquivalenceClasses:
    def test_groups_in_first_seen_order(self):
        descs = _descs("A", "B", "C", "D")
        classes = build_equivalence_classes(descs, _sig({"A": "X", "B": "Y", "C": "X", "D": "X"}))
        assert list(classes) == ["X", "Y"]
        assert [d.id for d in classes["X"].members] == ["A", "C", "D"]
        assert classes["X"].canonical.id == "A"
        assert [d.id for d in classes["X"].duplicates] == ["C", "D"]

    def test_none_signatures_excluded(self):
        descs = _descs("A", "B", "C")
        classes = build_equivalence_classes(descs, _sig({"A": None, "B": "X", "C": None}))
        assert list(classes) == ["X"]
        assert [d.id for d in classes["X"].members] == ["B"]

    def test_precomputed_signatures_skip_function(self):
        descs = _descs("A", "B")

        def explode(_):
            raise AssertionError("signature_fn must not be called")

        classes = build_equivalence_classes(descs, explode, signatures={"A": "X", "B": "X"})
        assert len(classes["X"]) == 2

    def test_default_signature_function(self, tmp_path):
        clip = tmp_path / "clip.mov"
        clip.write_bytes(b"data")
        descs = [make_file("A", str(clip)), make_file("B", str(clip)), make_solid("S")]
        classes = build_equivalence_classes(descs)
        sizes = sorted(len(c) for c in classes.values())
        assert sizes == [1, 2]

    def test_empty_input(self):
        assert build_equivalence_classes([], _sig({})) == {}


class TestBuildSubstitutionMap:
    def test_first_member_is_canonical(self):
        """[A(X), B(X), C(Y)] maps only B to A."""
        classes = build_equivalence_classes(_descs("A", "B", "C"), _sig({"A": "X", "B": "X", "C": "Y"}))
        assert build_substitution_map(classes) == {"B": "A"}

    def test_all_null_signatures_empty(self):
        classes = build_equivalence_classes(_descs("A", "B"), _sig({}))
        assert build_substitution_map(classes) == {}

    def test_singletons_contribute_nothing(self):
        classes = build_equivalence_classes(_descs("A", "B"), _sig({"A": "X", "B": "Y"}))
        assert build_substitution_map(classes) == {}

    def test_multiple_duplicates_point_to_first(self):
        classes = build_equivalence_classes(_descs("A", "B", "C"), _sig({"A": "X", "B": "X", "C": "X"}))
        assert build_substitution_map(classes) == {"B": "A", "C": "A"}

    def test_repeated_id_not_self_mapped(self):
        descs = _descs("A", "A", "B")
        classes = build_equivalence_classes(descs, _sig({"A": "X", "B": "X"}))
        assert build_substitution_map(classes) == {"B": "A"}

    def test_idempotent(self):
        descs = _descs("A", "B", "C", "D")
        sig = _sig({"A": "X", "B": "Y", "C": "X", "D": "Y"})
        first = build_substitution_map(build_equivalence_classes(descs, sig))
        second = build_substitution_map(build_equivalence_classes(descs, sig))
        assert first == second == {"C": "A", "D": "B"}

    @pytest.mark.parametrize("seed", [1, 7, 42, 1234])
    def test_map_invariants_on_random_sets(self, seed):
        rng = random.Random(seed)
        ids = [f"r{i}" for i in range(60)]
        table = {i: rng.choice(["X", "Y", "Z", None]) for i in ids}
        classes = build_equivalence_classes(_descs(*ids), _sig(table))
        substitutions = build_substitution_map(classes)

        for key, value in substitutions.items():
            assert key != value
            assert value not in substitutions
            assert table[key] is not None and table[value] is not None
            assert table[key] == table[value]

        null_ids = {i for i, s in table.items() if s is None}
        assert not null_ids & set(substitutions)
        assert not null_ids & set(substitutions.values())

        for signature, group in classes.items():
            first_seen = next(i for i in ids if table[i] == signature)
            assert group.canonical.id == first_seen
            assert group.canonical.id not in substitutions
