"""Data classes for family tree entities."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable


class RelationType(str, Enum):
    PARENT_CHILD = "parent-child"  # directed: source is the parent
    SPOUSE = "spouse"  # undirected


@dataclass(frozen=True)
class Person:
    id: str
    display_name: str
    birth_date: str | None = None  # ISO format YYYY-MM-DD or None
    death_date: str | None = None  # ISO format YYYY-MM-DD or None
    attrs: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class Edge:
    source: str
    target: str
    type: RelationType

    def __post_init__(self):
        # Accept the plain string values ("parent-child", "spouse")
        object.__setattr__(self, "type", RelationType(self.type))

    @classmethod
    def parent_child(cls, parent_id: str, child_id: str) -> "Edge":
        return cls(parent_id, child_id, RelationType.PARENT_CHILD)

    @classmethod
    def spouse(cls, person_a_id: str, person_b_id: str) -> "Edge":
        return cls(person_a_id, person_b_id, RelationType.SPOUSE)

    def key(self) -> tuple:
        """Identity of the edge: ordered for parent-child, unordered for spouses."""
        if self.type is RelationType.SPOUSE:
            return (self.type, frozenset((self.source, self.target)))
        return (self.type, self.source, self.target)


@dataclass(frozen=True)
class Snapshot:
    """
    The persons and edges of one tree at a point in time.

    Snapshots are never modified in place; with_edges() and without_edges()
    return new snapshots.
    """

    persons: tuple[Person, ...] = ()
    edges: tuple[Edge, ...] = ()

    def person_ids(self) -> list[str]:
        return [p.id for p in self.persons]

    def with_edges(self, *edges: Edge) -> "Snapshot":
        return replace(self, edges=self.edges + tuple(edges))

    def without_edges(self, *edges: Edge) -> "Snapshot":
        drop = {e.key() for e in edges}
        return replace(self, edges=tuple(e for e in self.edges if e.key() not in drop))

    @classmethod
    def build(cls, persons: Iterable[Person], edges: Iterable[Edge] = ()) -> "Snapshot":
        return cls(persons=tuple(persons), edges=tuple(edges))
