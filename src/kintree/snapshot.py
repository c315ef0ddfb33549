"""Snapshot adapter: normalize raw tree data into a canonical Snapshot."""

import logging
from typing import Any, Iterable, Mapping

from kintree.dates import normalize_date
from kintree.errors import SnapshotError
from kintree.models import Edge, Person, RelationType, Snapshot

logger = logging.getLogger(__name__)

# Keys consumed into Person fields; anything else lands in Person.attrs
PERSON_ID_KEYS = ("id", "personId", "person_id")
PERSON_NAME_KEYS = ("displayName", "display_name", "name")
BIRTH_KEYS = ("birthDate", "birth_date")
DEATH_KEYS = ("deathDate", "death_date")

EDGE_TYPES = {
    "parent-child": RelationType.PARENT_CHILD,
    "parent_child": RelationType.PARENT_CHILD,
    "PARENT_CHILD": RelationType.PARENT_CHILD,
    "spouse": RelationType.SPOUSE,
    "SPOUSE": RelationType.SPOUSE,
}


def _first(record: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def parse_person(record: Person | Mapping[str, Any]) -> Person:
    """Build a Person from a raw person record."""
    if isinstance(record, Person):
        return record
    if not isinstance(record, Mapping):
        raise SnapshotError(f"Person record must be a mapping, got {type(record).__name__}")

    person_id = _first(record, PERSON_ID_KEYS)
    if person_id is None or str(person_id).strip() == "":
        raise SnapshotError(f"Person record has no id: {dict(record)!r}")
    person_id = str(person_id)

    consumed = set(PERSON_ID_KEYS + PERSON_NAME_KEYS + BIRTH_KEYS + DEATH_KEYS)
    name = _first(record, PERSON_NAME_KEYS)

    return Person(
        id=person_id,
        display_name=str(name) if name else person_id,
        birth_date=normalize_date(_first(record, BIRTH_KEYS)),
        death_date=normalize_date(_first(record, DEATH_KEYS)),
        attrs={k: v for k, v in record.items() if k not in consumed},
    )


def parse_edge(record: Edge | Mapping[str, Any]) -> Edge | None:
    """
    Build an Edge from a unified {source, target, type} record.
    Returns None (and logs) for edge types this library does not model.
    """
    if isinstance(record, Edge):
        return record
    if not isinstance(record, Mapping):
        raise SnapshotError(f"Edge record must be a mapping, got {type(record).__name__}")

    source, target = record.get("source"), record.get("target")
    if source is None or target is None:
        raise SnapshotError(f"Edge record needs source and target: {dict(record)!r}")

    raw_type = record.get("type")
    edge_type = raw_type if isinstance(raw_type, RelationType) else EDGE_TYPES.get(raw_type)
    if edge_type is None:
        logger.warning("Skipping edge %s -> %s with unsupported type %r", source, target, raw_type)
        return None

    return Edge(str(source), str(target), edge_type)


def _legacy_edges(pairs: Iterable[Mapping[str, Any]] | None, edge_type: RelationType) -> list[Edge]:
    edges = []
    for pair in pairs or ():
        if not isinstance(pair, Mapping):
            raise SnapshotError(f"Legacy edge must be a mapping, got {type(pair).__name__}")
        person_a, person_b = pair.get("personAId"), pair.get("personBId")
        if person_a is None or person_b is None:
            raise SnapshotError(f"Legacy edge needs personAId and personBId: {dict(pair)!r}")
        edges.append(Edge(str(person_a), str(person_b), edge_type))
    return edges


def canonical_edges(edges: Iterable[Edge]) -> tuple[Edge, ...]:
    """Drop repeated edges, keeping first occurrences in order."""
    seen: set[tuple] = set()
    kept: list[Edge] = []
    for edge in edges:
        key = edge.key()
        if key in seen:
            logger.debug("Dropping repeated %s edge %s -> %s", edge.type.value, edge.source, edge.target)
            continue
        seen.add(key)
        kept.append(edge)
    return tuple(kept)


def canonical_persons(persons: Iterable[Person]) -> tuple[Person, ...]:
    """Drop records that reuse an id already seen, keeping the first."""
    by_id: dict[str, Person] = {}
    for person in persons:
        if person.id in by_id:
            logger.warning("Ignoring repeated person record for id %s", person.id)
            continue
        by_id[person.id] = person
    return tuple(by_id.values())


def load_snapshot(data: Snapshot | Mapping[str, Any]) -> Snapshot:
    """
    Normalize raw tree data into a canonical Snapshot.

    Accepts either the unified form
        {"persons": [...], "edges": [{"source", "target", "type"}]}
    or the legacy form
        {"persons": [...], "parentChildEdges": [...], "spouseEdges": [...]}
    where legacy pairs are {"personAId", "personBId"} (A is the parent for
    parent-child pairs). The unified list wins whenever it is non-empty.
    "nodes" is accepted in place of "persons".
    """
    if isinstance(data, Snapshot):
        return Snapshot(canonical_persons(data.persons), canonical_edges(data.edges))
    if not isinstance(data, Mapping):
        raise SnapshotError(f"Snapshot must be a mapping, got {type(data).__name__}")

    raw_persons = data.get("persons")
    if raw_persons is None:
        raw_persons = data.get("nodes") or []
    persons = canonical_persons(parse_person(p) for p in raw_persons)

    unified = data.get("edges") or []
    if unified:
        edges = [e for e in (parse_edge(raw) for raw in unified) if e is not None]
    else:
        edges = _legacy_edges(data.get("parentChildEdges"), RelationType.PARENT_CHILD)
        edges += _legacy_edges(data.get("spouseEdges"), RelationType.SPOUSE)
        if edges:
            logger.debug("Normalized %d legacy edges", len(edges))

    return Snapshot(persons, canonical_edges(edges))
