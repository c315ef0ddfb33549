"""Exceptions raised by kintree."""

from enum import Enum


class ErrorKind(str, Enum):
    """Reasons a proposed relationship is rejected."""

    NOT_FOUND = "NotFound"
    SELF_RELATION = "SelfRelation"
    DUPLICATE = "Duplicate"
    PARENT_LIMIT_EXCEEDED = "ParentLimitExceeded"
    CYCLE_DETECTED = "CycleDetected"
    RELATION_CONFLICT = "RelationConflict"
    AGE_INCONSISTENCY = "AgeInconsistency"


class KintreeError(Exception):
    """Base class for kintree errors."""


class SnapshotError(KintreeError, ValueError):
    """Raised when raw snapshot input does not have the expected shape."""


class RelationshipError(KintreeError):
    """A validator rejection, raised on request via ValidationResult.raise_for_error()."""

    def __init__(self, kind: ErrorKind, message: str = ""):
        self.kind = kind
        self.message = message or kind.value
        super().__init__(f"{kind.value}: {self.message}")
