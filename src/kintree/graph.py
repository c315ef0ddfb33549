"""NetworkX graph building over a normalized snapshot."""

from dataclasses import dataclass
from typing import Any, Mapping

import networkx as nx

from kintree.models import Person, RelationType, Snapshot
from kintree.snapshot import load_snapshot


@dataclass(frozen=True)
class FamilyGraph:
    """
    Adjacency built once from a Snapshot and shared by the validator,
    the hierarchy builder and the query engine.

    `lineage` holds PARENT_CHILD edges (parent -> child) and `partners` holds
    SPOUSE edges. Edge endpoints missing from the person set still appear as
    nodes in both graphs; `persons` only holds real people.
    """

    snapshot: Snapshot
    persons: dict[str, Person]
    lineage: nx.DiGraph
    partners: nx.Graph
    parent_to_children: dict[str, list[str]]
    child_to_parents: dict[str, list[str]]
    spouse_of: dict[str, list[str]]

    def has_person(self, person_id: str) -> bool:
        return person_id in self.persons

    def children_of(self, person_id: str) -> list[str]:
        return self.parent_to_children.get(person_id, [])

    def parents_of(self, person_id: str) -> list[str]:
        return self.child_to_parents.get(person_id, [])

    def spouses_of(self, person_id: str) -> list[str]:
        return self.spouse_of.get(person_id, [])

    def is_parent(self, parent_id: str, child_id: str) -> bool:
        return self.lineage.has_edge(parent_id, child_id)

    def are_spouses(self, person_a_id: str, person_b_id: str) -> bool:
        return self.partners.has_edge(person_a_id, person_b_id)


def _ordering(snapshot: Snapshot) -> dict[str, int]:
    """Rank every id: persons by input order, then dangling ids by first appearance."""
    rank = {person.id: i for i, person in enumerate(snapshot.persons)}
    for edge in snapshot.edges:
        for person_id in (edge.source, edge.target):
            rank.setdefault(person_id, len(rank))
    return rank


def build_graph(data: "FamilyGraph | Snapshot | Mapping[str, Any]") -> FamilyGraph:
    """Build a FamilyGraph from a snapshot, raw snapshot data, or an existing FamilyGraph."""
    if isinstance(data, FamilyGraph):
        return data
    snapshot = load_snapshot(data)

    lineage = nx.DiGraph()
    partners = nx.Graph()

    # Add nodes (persons)
    for person in snapshot.persons:
        lineage.add_node(person.id, display_name=person.display_name)
        partners.add_node(person.id)

    # Add edges (relationships)
    for edge in snapshot.edges:
        if edge.type is RelationType.PARENT_CHILD:
            lineage.add_edge(edge.source, edge.target)
        else:
            partners.add_edge(edge.source, edge.target)

    # Neighbour lists follow person order so results do not depend on edge order
    rank = _ordering(snapshot)

    def ordered(ids) -> list[str]:
        return sorted(ids, key=rank.__getitem__)

    parent_to_children = {n: ordered(lineage.successors(n)) for n in lineage if lineage.out_degree(n)}
    child_to_parents = {n: ordered(lineage.predecessors(n)) for n in lineage if lineage.in_degree(n)}
    spouse_of = {n: ordered(partners.neighbors(n)) for n in partners if partners.degree(n)}

    return FamilyGraph(
        snapshot=snapshot,
        persons={person.id: person for person in snapshot.persons},
        lineage=lineage,
        partners=partners,
        parent_to_children=parent_to_children,
        child_to_parents=child_to_parents,
        spouse_of=spouse_of,
    )
