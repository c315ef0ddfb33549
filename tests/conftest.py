"""Shared snapshots for kintree tests."""

import pytest

from kintree import KintreeSettings


def raw_snapshot(person_ids, parent_child=(), spouses=()):
    """Unified-form snapshot data: persons by id, edges as (source, target) pairs."""
    return {
        "persons": [{"id": pid, "displayName": pid.title()} for pid in person_ids],
        "edges": [
            {"source": s, "target": t, "type": "parent-child"} for s, t in parent_child
        ]
        + [{"source": a, "target": b, "type": "spouse"} for a, b in spouses],
    }


@pytest.fixture
def make_snapshot():
    return raw_snapshot


@pytest.fixture
def chain():
    """A -> B -> C"""
    return raw_snapshot(["A", "B", "C"], [("A", "B"), ("B", "C")])


@pytest.fixture
def cycle():
    """A -> B -> C -> A"""
    return raw_snapshot(["A", "B", "C"], [("A", "B"), ("B", "C"), ("C", "A")])


@pytest.fixture
def two_parents():
    """X has parents P1 and P2, who are married; P3 is unrelated."""
    return raw_snapshot(
        ["P1", "P2", "P3", "X"],
        [("P1", "X"), ("P2", "X")],
        [("P1", "P2")],
    )


@pytest.fixture
def isolated_settings():
    """Settings that ignore the environment and any .env file."""
    return KintreeSettings(_env_file=None)
