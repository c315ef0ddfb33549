"""
Build a rooted hierarchy from a family graph snapshot.

The builder never raises on inconsistent graphs. Cycles, self-loops and
references to missing persons cut the offending edge, which is recorded in
HierarchyResult.broken_edges, and the walk carries on so that callers always
receive a renderable tree.

Root selection:
- A person is a root when none of their parents is a real person in the snapshot.
  A self-parent edge counts, so a person who is their own parent is no root.
- If no person qualifies (every person sits under a cycle), the first person
  in input order becomes the sole root.
- Several roots are gathered under a synthetic root (generation -1).
- An empty snapshot yields the empty-tree root.
- An explicit root_person_id restricts the result to that person's subtree.

A person reachable along several paths (two parents in the tree) is built once,
on the first path that reaches them, and the same node object is shared by
every later parent.
"""

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Any, Mapping

from kintree.config import KintreeSettings, settings as default_settings
from kintree.graph import FamilyGraph, build_graph
from kintree.models import Person, Snapshot

logger = logging.getLogger(__name__)


class NodeKind(str, Enum):
    PERSON = "person"
    SYNTHETIC_ROOT = "synthetic-root"
    EMPTY_ROOT = "empty-root"


class BrokenEdgeReason(str, Enum):
    CYCLE = "cycle"
    DANGLING = "dangling"  # child id is not a person in the snapshot


@dataclass(eq=False)
class HierarchyNode:
    kind: NodeKind
    person_id: str | None
    display_name: str
    generation: int
    parents: list[str] = field(default_factory=list)
    spouses: list[str] = field(default_factory=list)
    children: list["HierarchyNode"] = field(default_factory=list)
    person: Person | None = None

    @property
    def is_sentinel(self) -> bool:
        return self.kind is not NodeKind.PERSON

    @classmethod
    def synthetic_root(cls, children: list["HierarchyNode"], label: str) -> "HierarchyNode":
        return cls(NodeKind.SYNTHETIC_ROOT, None, label, -1, children=list(children))

    @classmethod
    def empty_root(cls, label: str) -> "HierarchyNode":
        return cls(NodeKind.EMPTY_ROOT, None, label, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "personId": self.person_id,
            "displayName": self.display_name,
            "generation": self.generation,
            "parents": list(self.parents),
            "spouses": list(self.spouses),
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class BrokenEdge:
    parent_id: str
    child_id: str
    reason: BrokenEdgeReason
    message: str

    def to_dict(self) -> dict[str, str]:
        return {
            "parentId": self.parent_id,
            "childId": self.child_id,
            "reason": self.reason.value,
            "message": self.message,
        }


@dataclass(frozen=True)
class GenerationBand:
    level: int
    person_ids: list[str]

    @property
    def count(self) -> int:
        return len(self.person_ids)

    def to_dict(self) -> dict[str, Any]:
        return {"level": self.level, "personIds": list(self.person_ids), "count": self.count}


@dataclass(frozen=True)
class HierarchyResult:
    root: HierarchyNode
    node_map: dict[str, HierarchyNode]
    generations: list[GenerationBand]
    broken_edges: list[BrokenEdge]
    is_synthetic_root: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root.to_dict(),
            "nodeMap": {
                person_id: {
                    "generation": node.generation,
                    "parents": list(node.parents),
                    "spouses": list(node.spouses),
                    "children": [child.person_id for child in node.children],
                }
                for person_id, node in self.node_map.items()
            },
            "generations": [band.to_dict() for band in self.generations],
            "brokenEdges": [edge.to_dict() for edge in self.broken_edges],
            "isSyntheticRoot": self.is_synthetic_root,
        }


def find_roots(graph: FamilyGraph) -> list[str]:
    """Persons with no parent that exists in the snapshot, in input order."""
    return [
        person_id
        for person_id in graph.persons
        if not any(graph.has_person(parent) for parent in graph.parents_of(person_id))
    ]


def _new_node(graph: FamilyGraph, person_id: str, generation: int, node_map: dict) -> HierarchyNode:
    person = graph.persons[person_id]
    node = HierarchyNode(
        kind=NodeKind.PERSON,
        person_id=person_id,
        display_name=person.display_name,
        generation=generation,
        parents=list(graph.parents_of(person_id)),
        spouses=list(graph.spouses_of(person_id)),
        person=person,
    )
    node_map[person_id] = node
    return node


def _build_subtree(
    graph: FamilyGraph,
    root_id: str,
    node_map: dict[str, HierarchyNode],
    broken_edges: list[BrokenEdge],
) -> HierarchyNode:
    """
    Depth-first walk from root_id, materializing each person at most once.

    `path` is the chain of ids from root_id to the node being expanded; a child
    already on it closes a cycle. `node_map` doubles as the set of persons
    already built anywhere in the hierarchy.
    """
    if root_id in node_map:
        return node_map[root_id]

    root = _new_node(graph, root_id, 0, node_map)
    path = [root_id]
    on_path = {root_id}
    stack = [(root, iter(graph.children_of(root_id)))]

    while stack:
        node, pending = stack[-1]
        child_id = next(pending, None)
        if child_id is None:
            stack.pop()
            on_path.discard(path.pop())
            continue

        parent_id = node.person_id
        if not graph.has_person(child_id):
            broken_edges.append(
                BrokenEdge(
                    parent_id,
                    child_id,
                    BrokenEdgeReason.DANGLING,
                    f"Missing person: {parent_id} → {child_id}",
                )
            )
            logger.warning("Cut edge %s -> %s: child is not in the snapshot", parent_id, child_id)
            continue

        if child_id in on_path:
            broken_edges.append(
                BrokenEdge(
                    parent_id,
                    child_id,
                    BrokenEdgeReason.CYCLE,
                    f"Cycle detected: {' → '.join(path)} → {child_id}",
                )
            )
            logger.warning("Cut edge %s -> %s: closes an ancestry cycle", parent_id, child_id)
            continue

        existing = node_map.get(child_id)
        if existing is not None:
            # First build wins
            node.children.append(existing)
            continue

        child = _new_node(graph, child_id, node.generation + 1, node_map)
        node.children.append(child)
        path.append(child_id)
        on_path.add(child_id)
        stack.append((child, iter(graph.children_of(child_id))))

    return root


def build_generations(node_map: dict[str, HierarchyNode]) -> list[GenerationBand]:
    """Group materialized persons into generation bands, ascending by level."""
    levels: dict[int, list[str]] = {}
    for person_id, node in node_map.items():
        levels.setdefault(node.generation, []).append(person_id)
    return [GenerationBand(level, levels[level]) for level in sorted(levels)]


def build_hierarchy(
    snapshot: "FamilyGraph | Snapshot | Mapping[str, Any]",
    root_person_id: str | None = None,
    settings: KintreeSettings | None = None,
) -> HierarchyResult:
    """
    Build a rooted hierarchy from a snapshot.

    Args:
        snapshot: A Snapshot, FamilyGraph, or raw snapshot mapping
        root_person_id: Build only this person's subtree when given
        settings: Overrides the module-level settings (sentinel labels)

    Returns:
        A HierarchyResult; the root is a real person, the synthetic root, or
        the empty-tree root.
    """
    settings = settings or default_settings
    graph = build_graph(snapshot)

    if root_person_id is not None:
        root_ids = [root_person_id] if graph.has_person(root_person_id) else []
        if not root_ids:
            logger.warning("Requested root %s is not in the snapshot", root_person_id)
    else:
        root_ids = find_roots(graph)
        if not root_ids and graph.persons:
            fallback = next(iter(graph.persons))
            logger.warning("No root person found; falling back to %s", fallback)
            root_ids = [fallback]

    node_map: dict[str, HierarchyNode] = {}
    broken_edges: list[BrokenEdge] = []
    root_nodes = [_build_subtree(graph, root_id, node_map, broken_edges) for root_id in root_ids]

    is_synthetic_root = len(root_nodes) > 1
    if is_synthetic_root:
        root = HierarchyNode.synthetic_root(root_nodes, settings.synthetic_root_label)
    elif root_nodes:
        root = root_nodes[0]
    else:
        root = HierarchyNode.empty_root(settings.empty_root_label)

    logger.debug(
        "Built hierarchy: %d roots, %d persons, %d broken edges",
        len(root_nodes),
        len(node_map),
        len(broken_edges),
    )
    return HierarchyResult(
        root=root,
        node_map=node_map,
        generations=build_generations(node_map),
        broken_edges=broken_edges,
        is_synthetic_root=is_synthetic_root,
    )
