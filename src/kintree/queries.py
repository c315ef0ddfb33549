"""Ancestor and descendant queries."""

import logging
from typing import Any, Mapping

import networkx as nx

from kintree.graph import FamilyGraph, build_graph
from kintree.models import Snapshot

logger = logging.getLogger(__name__)


def _reachable(graph: nx.DiGraph, person_id: str, max_depth: int | None) -> set[str]:
    if person_id not in graph:
        logger.debug("No lineage entry for %s", person_id)
        return set()
    # Breadth-first; each id is expanded once, so cycles terminate
    reached = nx.single_source_shortest_path_length(graph, person_id, cutoff=max_depth)
    reached.pop(person_id, None)
    return set(reached)


def ancestors(
    snapshot: "FamilyGraph | Snapshot | Mapping[str, Any]", person_id: str, max_depth: int | None = None
) -> set[str]:
    """
    All ids reachable by following parent links upward from person_id.

    The start person is never included, even when it sits on a cycle.
    `max_depth` limits the walk to that many generations (1 = parents only).
    """
    graph = build_graph(snapshot)
    return _reachable(graph.lineage.reverse(copy=False), person_id, max_depth)


def descendants(
    snapshot: "FamilyGraph | Snapshot | Mapping[str, Any]", person_id: str, max_depth: int | None = None
) -> set[str]:
    """All ids reachable by following child links downward from person_id."""
    graph = build_graph(snapshot)
    return _reachable(graph.lineage, person_id, max_depth)


def is_ancestor(
    snapshot: "FamilyGraph | Snapshot | Mapping[str, Any]", ancestor_id: str, person_id: str
) -> bool:
    """True when ancestor_id appears above person_id in the lineage."""
    graph = build_graph(snapshot)
    if ancestor_id == person_id or ancestor_id not in graph.lineage or person_id not in graph.lineage:
        return False
    return nx.has_path(graph.lineage, ancestor_id, person_id)
