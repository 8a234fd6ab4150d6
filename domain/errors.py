from __future__ import annotations

from typing import Any


class RepositoryError(Exception):
    """Base class for errors raised by the graph repositories."""


class NodeNotFoundError(RepositoryError):
    """A query that must resolve one node matched nothing."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id!r}")


class RecordDecodeError(RepositoryError):
    """A result row did not have the expected shape."""

    def __init__(self, field: str, expected: str, actual: Any = None):
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Unexpected value for '{field}': expected {expected}, got {type(actual).__name__}"
        )


class InvalidEntityError(RepositoryError, ValueError):
    """Domain entity rejected before any query was built."""


class UnsupportedTypeError(InvalidEntityError):
    """Type value outside the closed NodeType / RelationshipType enums."""

    def __init__(self, kind: str, value: Any):
        self.kind = kind
        self.value = value
        super().__init__(f"Unsupported {kind}: {value!r}")


class SessionReleaseError(RepositoryError):
    """
    Closing the Neo4j session failed after the transaction committed.

    `result` holds what the transaction produced (e.g. the new node id or
    relationship ids), so callers can keep it instead of retrying the write.
    """

    def __init__(self, message: str, result: Any = None):
        self.result = result
        super().__init__(message)
