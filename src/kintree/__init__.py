"""Relationship validation and hierarchy building for family-tree graphs."""

from kintree.config import KintreeSettings, settings
from kintree.errors import ErrorKind, KintreeError, RelationshipError, SnapshotError
from kintree.graph import FamilyGraph, build_graph
from kintree.hierarchy import (
    BrokenEdge,
    BrokenEdgeReason,
    GenerationBand,
    HierarchyNode,
    HierarchyResult,
    NodeKind,
    build_hierarchy,
)
from kintree.models import Edge, Person, RelationType, Snapshot
from kintree.queries import ancestors, descendants, is_ancestor
from kintree.snapshot import load_snapshot
from kintree.validation import (
    ValidationResult,
    Violation,
    audit_snapshot,
    validate_add_parent_child,
    validate_add_spouse,
    validate_remove_relationship,
)

__all__ = [
    "KintreeSettings",
    "settings",
    "ErrorKind",
    "KintreeError",
    "RelationshipError",
    "SnapshotError",
    "FamilyGraph",
    "build_graph",
    "BrokenEdge",
    "BrokenEdgeReason",
    "GenerationBand",
    "HierarchyNode",
    "HierarchyResult",
    "NodeKind",
    "build_hierarchy",
    "Edge",
    "Person",
    "RelationType",
    "Snapshot",
    "ancestors",
    "descendants",
    "is_ancestor",
    "load_snapshot",
    "ValidationResult",
    "Violation",
    "audit_snapshot",
    "validate_add_parent_child",
    "validate_add_spouse",
    "validate_remove_relationship",
]
