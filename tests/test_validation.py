"""Tests for relationship validation."""

import pytest

from kintree import (
    Edge,
    ErrorKind,
    KintreeSettings,
    Person,
    RelationshipError,
    Snapshot,
    ancestors,
    audit_snapshot,
    load_snapshot,
    validate_add_parent_child,
    validate_add_spouse,
    validate_remove_relationship,
)


class TestValidateAddParentChild:
    """Checks for proposed parent -> child edges."""

    def test_accepts_valid_edge(self, chain, isolated_settings):
        result = validate_add_parent_child(chain, "A", "C", settings=isolated_settings)

        assert result.ok
        assert result
        assert result.error is None

    def test_unknown_person(self, chain):
        """Should reject ids missing from the snapshot."""
        result = validate_add_parent_child(chain, "A", "Z")

        assert not result
        assert result.error is ErrorKind.NOT_FOUND
        assert "Z" in result.message

    def test_self_relation(self, chain):
        assert validate_add_parent_child(chain, "B", "B").error is ErrorKind.SELF_RELATION

    def test_duplicate(self, chain):
        assert validate_add_parent_child(chain, "A", "B").error is ErrorKind.DUPLICATE

    def test_duplicate_with_string_edge_type(self):
        snapshot = Snapshot((Person("a", "A"), Person("b", "B")), (Edge("a", "b", "parent-child"),))
        assert validate_add_parent_child(snapshot, "a", "b").error is ErrorKind.DUPLICATE

    def test_spouse_conflict(self, two_parents):
        """Should reject a parent edge between spouses."""
        result = validate_add_parent_child(two_parents, "P1", "P2")
        assert result.error is ErrorKind.RELATION_CONFLICT

    def test_parent_limit(self, two_parents):
        """A child with two parents cannot gain a third."""
        result = validate_add_parent_child(two_parents, "P3", "X")
        assert result.error is ErrorKind.PARENT_LIMIT_EXCEEDED

    def test_parent_limit_from_settings(self, two_parents):
        result = validate_add_parent_child(
            two_parents, "P3", "X", settings=KintreeSettings(_env_file=None, max_parents=3)
        )
        assert result.ok

    def test_cycle(self, chain):
        """Making a descendant the parent of its ancestor closes a cycle."""
        result = validate_add_parent_child(chain, "C", "A")
        assert result.error is ErrorKind.CYCLE_DETECTED

    def test_reverse_edge_is_a_cycle(self, chain):
        assert validate_add_parent_child(chain, "B", "A").error is ErrorKind.CYCLE_DETECTED

    def test_parent_limit_checked_before_cycle(self, make_snapshot):
        """Checks run in order: the parent limit is reported before the cycle."""
        snapshot = make_snapshot(["A", "B", "P", "Q"], [("P", "A"), ("Q", "A"), ("A", "B")])
        assert validate_add_parent_child(snapshot, "B", "A").error is ErrorKind.PARENT_LIMIT_EXCEEDED

    def test_rejects_every_ancestor_as_child(self, make_snapshot):
        """Any ancestor of the proposed parent is rejected as the child."""
        snapshot = make_snapshot(["G", "P", "C", "K"], [("G", "P"), ("P", "C"), ("C", "K")])

        for ancestor in sorted(ancestors(snapshot, "K")):
            assert validate_add_parent_child(snapshot, "K", ancestor).error is ErrorKind.CYCLE_DETECTED

    def test_age_inconsistency(self, isolated_settings):
        snapshot = {
            "persons": [
                {"id": "old", "birthDate": "1950-01-01"},
                {"id": "young", "birthDate": "1980-06-15"},
            ]
        }
        result = validate_add_parent_child(snapshot, "young", "old", settings=isolated_settings)

        assert result.error is ErrorKind.AGE_INCONSISTENCY
        assert validate_add_parent_child(snapshot, "old", "young", settings=isolated_settings).ok

    def test_age_check_can_be_disabled(self):
        snapshot = {
            "persons": [
                {"id": "old", "birthDate": "1950"},
                {"id": "young", "birthDate": "1980"},
            ]
        }
        relaxed = KintreeSettings(_env_file=None, enforce_age_consistency=False)
        assert validate_add_parent_child(snapshot, "young", "old", settings=relaxed).ok

    def test_cycle_reported_before_age(self, isolated_settings):
        """A cycle is reported even when birth dates are also inconsistent."""
        snapshot = {
            "persons": [{"id": "A", "birthDate": "1900"}, {"id": "B", "birthDate": "1930"}],
            "edges": [{"source": "A", "target": "B", "type": "parent-child"}],
        }
        result = validate_add_parent_child(snapshot, "B", "A", settings=isolated_settings)
        assert result.error is ErrorKind.CYCLE_DETECTED

    def test_does_not_modify_snapshot(self, chain):
        snapshot = load_snapshot(chain)
        validate_add_parent_child(snapshot, "A", "C")
        assert snapshot == load_snapshot(chain)

    def test_raise_for_error(self, chain):
        with pytest.raises(RelationshipError) as excinfo:
            validate_add_parent_child(chain, "C", "A").raise_for_error()

        assert excinfo.value.kind is ErrorKind.CYCLE_DETECTED
        assert "CycleDetected" in str(excinfo.value)

    def test_raise_for_error_on_success_is_silent(self, chain):
        validate_add_parent_child(chain, "A", "C").raise_for_error()


class TestValidateAddSpouse:
    """Checks for proposed spouse edges."""

    def test_accepts_valid_pair(self, two_parents):
        assert validate_add_spouse(two_parents, "P3", "X").ok

    def test_unknown_person(self, two_parents):
        assert validate_add_spouse(two_parents, "P3", "nobody").error is ErrorKind.NOT_FOUND

    def test_self_pairing(self, two_parents):
        assert validate_add_spouse(two_parents, "P3", "P3").error is ErrorKind.SELF_RELATION

    @pytest.mark.parametrize("pair", [("P1", "P2"), ("P2", "P1")])
    def test_duplicate_in_either_order(self, two_parents, pair):
        assert validate_add_spouse(two_parents, *pair).error is ErrorKind.DUPLICATE

    @pytest.mark.parametrize("pair", [("P1", "X"), ("X", "P1")])
    def test_parent_child_conflict(self, two_parents, pair):
        assert validate_add_spouse(two_parents, *pair).error is ErrorKind.RELATION_CONFLICT


class TestValidateRemoveRelationship:
    """Checks for relationship removal."""

    @pytest.mark.parametrize("pair", [("P1", "X"), ("X", "P1"), ("P1", "P2"), ("P2", "P1")])
    def test_existing_relationship(self, two_parents, pair):
        assert validate_remove_relationship(two_parents, *pair).ok

    def test_unrelated_pair(self, two_parents):
        result = validate_remove_relationship(two_parents, "P3", "X")
        assert result.error is ErrorKind.NOT_FOUND

    def test_unknown_person(self, two_parents):
        assert validate_remove_relationship(two_parents, "P1", "ghost").error is ErrorKind.NOT_FOUND


class TestAuditSnapshot:
    """Whole-snapshot invariant audit."""

    def test_consistent_snapshot(self, two_parents, isolated_settings):
        assert audit_snapshot(two_parents, settings=isolated_settings) == []

    def test_reports_cycle(self, cycle):
        violations = audit_snapshot(cycle)

        assert [v.kind for v in violations] == [ErrorKind.CYCLE_DETECTED]
        assert set(violations[0].person_ids) == {"A", "B", "C"}
        assert "Cycle detected" in str(violations[0])

    def test_reports_structural_problems(self, make_snapshot, isolated_settings):
        snapshot = make_snapshot(
            ["A", "B", "C", "D", "E"],
            [("A", "A"), ("ghost", "B"), ("C", "E"), ("D", "E"), ("B", "E"), ("C", "D")],
            [("C", "D")],
        )
        kinds = {v.kind for v in audit_snapshot(snapshot, settings=isolated_settings)}

        assert kinds == {
            ErrorKind.SELF_RELATION,
            ErrorKind.NOT_FOUND,
            ErrorKind.PARENT_LIMIT_EXCEEDED,
            ErrorKind.RELATION_CONFLICT,
        }

    def test_reports_parent_born_after_child(self, isolated_settings):
        snapshot = load_snapshot(
            {
                "persons": [
                    {"id": "p", "name": "Parent", "birthDate": "2001"},
                    {"id": "c", "name": "Child", "birthDate": "1999"},
                ]
            }
        ).with_edges(Edge.parent_child("p", "c"))

        violations = audit_snapshot(snapshot, settings=isolated_settings)

        assert [v.kind for v in violations] == [ErrorKind.AGE_INCONSISTENCY]
        assert violations[0].person_ids == ("p", "c")
