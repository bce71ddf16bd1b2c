"""Grouping of descriptors into equivalence classes and the substitution map."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Mapping, Optional

from consolidator.dedup.signature import compute_signature
from consolidator.models import EquivalenceClass, ResourceDescriptor, SubstitutionMap

SignatureFn = Callable[[ResourceDescriptor], Optional[str]]


def build_equivalence_classes(
    descriptors: Iterable[ResourceDescriptor],
    signature_fn: Optional[SignatureFn] = None,
    signatures: Optional[Mapping[str, Optional[str]]] = None,
) -> Dict[str, EquivalenceClass]:
    """Group descriptors by signature, preserving first-seen order.

    Args:
        descriptors: Descriptors in scan order.  The order decides which
            member of each class becomes canonical.
        signature_fn: Signature function; defaults to ``compute_signature``.
        signatures: Precomputed signatures keyed by descriptor id.  When
            given, ``signature_fn`` is not called.

    Returns:
        Mapping of signature to its class.  Descriptors whose signature is
        ``None`` do not appear.
    """
    fn = signature_fn or compute_signature
    classes: Dict[str, EquivalenceClass] = {}
    for descriptor in descriptors:
        if signatures is not None:
            signature = signatures.get(descriptor.id)
        else:
            signature = fn(descriptor)
        if signature is None:
            continue
        group = classes.get(signature)
        if group is None:
            group = classes[signature] = EquivalenceClass(signature=signature)
        group.members.append(descriptor)
    return classes


def build_substitution_map(classes: Mapping[str, EquivalenceClass]) -> SubstitutionMap:
    """Map every non-canonical member id to its class's canonical id.

    Single-member classes contribute nothing.  A descriptor id listed twice
    in the same class (a host returning one resource twice) is not mapped
    onto itself.
    """
    substitutions: SubstitutionMap = {}
    for group in classes.values():
        if len(group) < 2:
            continue
        canonical_id = group.canonical.id
        for duplicate in group.duplicates:
            if duplicate.id == canonical_id:
                continue
            substitutions.setdefault(duplicate.id, canonical_id)
    return substitutions
