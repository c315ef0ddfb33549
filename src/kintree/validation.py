"""Relationship validation for family tree data."""

from dataclasses import dataclass
import logging
from typing import Any, Mapping

import networkx as nx

from kintree.config import KintreeSettings, settings as default_settings
from kintree.errors import ErrorKind, RelationshipError
from kintree.graph import FamilyGraph, build_graph
from kintree.models import Snapshot
from kintree.queries import is_ancestor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a proposed mutation. Truthy when the mutation may be applied."""

    error: ErrorKind | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise RelationshipError(self.error, self.message)


OK = ValidationResult()


def _reject(kind: ErrorKind, message: str) -> ValidationResult:
    logger.info("Rejected relationship (%s): %s", kind.value, message)
    return ValidationResult(kind, message)


def _missing(graph: FamilyGraph, *person_ids: str) -> ValidationResult | None:
    for person_id in person_ids:
        if not graph.has_person(person_id):
            return _reject(ErrorKind.NOT_FOUND, f"Person {person_id} not found")
    return None


def validate_add_parent_child(
    snapshot: "FamilyGraph | Snapshot | Mapping[str, Any]",
    parent_id: str,
    child_id: str,
    settings: KintreeSettings | None = None,
) -> ValidationResult:
    """
    Decide whether a parent -> child edge may be added to the snapshot.

    Checks run in order and stop at the first failure:
    existence, self relation, duplicate edge, spouse conflict, parent limit,
    ancestry cycle, and finally birth-date ordering (when enabled and both
    dates are known).
    """
    settings = settings or default_settings
    graph = build_graph(snapshot)

    missing = _missing(graph, parent_id, child_id)
    if missing is not None:
        return missing

    if parent_id == child_id:
        return _reject(ErrorKind.SELF_RELATION, f"{parent_id} cannot be their own parent")

    if graph.is_parent(parent_id, child_id):
        return _reject(ErrorKind.DUPLICATE, f"{parent_id} is already a parent of {child_id}")

    if graph.are_spouses(parent_id, child_id):
        return _reject(
            ErrorKind.RELATION_CONFLICT, f"{parent_id} and {child_id} are already spouses"
        )

    if len(graph.parents_of(child_id)) >= settings.max_parents:
        return _reject(
            ErrorKind.PARENT_LIMIT_EXCEEDED,
            f"{child_id} already has {settings.max_parents} parents",
        )

    # The new edge closes a cycle iff the parent is already a descendant of the child
    if is_ancestor(graph, child_id, parent_id):
        return _reject(
            ErrorKind.CYCLE_DETECTED,
            f"{parent_id} is a descendant of {child_id}; adding the edge creates a cycle",
        )

    if settings.enforce_age_consistency:
        parent_birth = graph.persons[parent_id].birth_date
        child_birth = graph.persons[child_id].birth_date
        if parent_birth and child_birth and parent_birth >= child_birth:
            return _reject(
                ErrorKind.AGE_INCONSISTENCY,
                f"{parent_id} (born {parent_birth}) must be born before {child_id} (born {child_birth})",
            )

    logger.debug("Accepted parent-child %s -> %s", parent_id, child_id)
    return OK


def validate_add_spouse(
    snapshot: "FamilyGraph | Snapshot | Mapping[str, Any]", person_a_id: str, person_b_id: str
) -> ValidationResult:
    """Decide whether a spouse edge may be added between two persons."""
    graph = build_graph(snapshot)

    missing = _missing(graph, person_a_id, person_b_id)
    if missing is not None:
        return missing

    if person_a_id == person_b_id:
        return _reject(ErrorKind.SELF_RELATION, f"{person_a_id} cannot be their own spouse")

    if graph.are_spouses(person_a_id, person_b_id):
        return _reject(
            ErrorKind.DUPLICATE, f"{person_a_id} and {person_b_id} are already spouses"
        )

    if graph.is_parent(person_a_id, person_b_id) or graph.is_parent(person_b_id, person_a_id):
        return _reject(
            ErrorKind.RELATION_CONFLICT,
            f"{person_a_id} and {person_b_id} already have a parent-child relationship",
        )

    logger.debug("Accepted spouse %s ~ %s", person_a_id, person_b_id)
    return OK


def validate_remove_relationship(
    snapshot: "FamilyGraph | Snapshot | Mapping[str, Any]", person_a_id: str, person_b_id: str
) -> ValidationResult:
    """Decide whether a relationship between two persons exists and may be removed."""
    graph = build_graph(snapshot)

    missing = _missing(graph, person_a_id, person_b_id)
    if missing is not None:
        return missing

    if (
        graph.is_parent(person_a_id, person_b_id)
        or graph.is_parent(person_b_id, person_a_id)
        or graph.are_spouses(person_a_id, person_b_id)
    ):
        return OK

    return _reject(
        ErrorKind.NOT_FOUND, f"No relationship between {person_a_id} and {person_b_id}"
    )


# ============================================================================
# Snapshot audit
# ============================================================================


@dataclass(frozen=True)
class Violation:
    kind: ErrorKind
    person_ids: tuple[str, ...]
    message: str

    def __str__(self) -> str:
        return self.message


def audit_snapshot(
    snapshot: "FamilyGraph | Snapshot | Mapping[str, Any]", settings: KintreeSettings | None = None
) -> list[Violation]:
    """
    Audit a whole snapshot against the relationship invariants:
    - Self-edges
    - Edges referencing persons absent from the snapshot
    - More parents than allowed
    - Pairs holding both a parent-child and a spouse edge
    - Cycles in parent-child relationships
    - Impossible ages (parent born on or after the child)

    Returns a list of violations; an empty list means the snapshot is consistent.
    """
    settings = settings or default_settings
    graph = build_graph(snapshot)
    violations: list[Violation] = []

    for edge in graph.snapshot.edges:
        if edge.source == edge.target:
            violations.append(
                Violation(
                    ErrorKind.SELF_RELATION,
                    (edge.source,),
                    f"Self {edge.type.value} edge on {edge.source}",
                )
            )
        for endpoint in (edge.source, edge.target):
            if not graph.has_person(endpoint):
                violations.append(
                    Violation(
                        ErrorKind.NOT_FOUND,
                        (edge.source, edge.target),
                        f"{edge.type.value} edge {edge.source} -> {edge.target} "
                        f"references missing person {endpoint}",
                    )
                )

    for child_id, parent_ids in graph.child_to_parents.items():
        if len(parent_ids) > settings.max_parents:
            violations.append(
                Violation(
                    ErrorKind.PARENT_LIMIT_EXCEEDED,
                    (child_id, *parent_ids),
                    f"{child_id} has {len(parent_ids)} parents: {parent_ids}",
                )
            )

    for person_a_id, person_b_id in graph.partners.edges():
        if graph.is_parent(person_a_id, person_b_id) or graph.is_parent(person_b_id, person_a_id):
            violations.append(
                Violation(
                    ErrorKind.RELATION_CONFLICT,
                    (person_a_id, person_b_id),
                    f"{person_a_id} and {person_b_id} are both spouses and parent/child",
                )
            )

    # Each strongly connected component with more than one member holds a cycle
    for component in nx.strongly_connected_components(graph.lineage):
        if len(component) < 2:
            continue
        cycle = nx.find_cycle(graph.lineage.subgraph(component), orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        violations.append(
            Violation(
                ErrorKind.CYCLE_DETECTED,
                tuple(cycle_nodes),
                f"Cycle detected in parent-child relationships: {cycle_nodes}",
            )
        )

    for parent_id, child_id in graph.lineage.edges():
        parent, child = graph.persons.get(parent_id), graph.persons.get(child_id)
        if parent is None or child is None or parent_id == child_id:
            continue
        if parent.birth_date and child.birth_date and parent.birth_date >= child.birth_date:
            violations.append(
                Violation(
                    ErrorKind.AGE_INCONSISTENCY,
                    (parent_id, child_id),
                    f"Impossible: {child.display_name} born before or with parent "
                    f"{parent.display_name}",
                )
            )

    if violations:
        logger.warning("Snapshot audit found %d violations", len(violations))
    return violations
