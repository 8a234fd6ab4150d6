from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from neo4j import Driver, READ_ACCESS, WRITE_ACCESS, unit_of_work

from core.config import settings
from core.neo4j_driver import get_driver, get_db_name
from domain.enums import HAS_TAG, NodeLabel, NodeType, RelationshipType
from domain.errors import (
    InvalidEntityError,
    NodeNotFoundError,
    RecordDecodeError,
    SessionReleaseError,
)
from domain.models import Node, Relationship
from repositories.record_decoder import (
    coerce_enum,
    expect_datetime,
    expect_enum,
    expect_str,
    expect_str_list,
    format_timestamp,
)

logger = logging.getLogger(__name__)

_NODE = NodeLabel.NODE.value
_TAG = NodeLabel.TAG.value
# Every type-derived label, removed wholesale before the new one is set.
_ALL_TYPE_LABELS = ":".join(t.value for t in NodeType)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _unique_tags(tags: Optional[List[str]]) -> List[str]:
    # first occurrence wins; MERGE would dedupe anyway, this keeps params small
    return list(dict.fromkeys(tags or []))


class NodeRepository:
    """
    Persistence layer for knowledge items, their tags and typed links.

    RESPONSIBILITIES:
    - Translate Node / Relationship values into one parameterized Cypher
      statement per operation
    - Own the session + transaction scope of every call (one session, one
      transaction, released before returning)
    - Decode result rows into domain values with explicit shape checks

    GRAPH SHAPE:
    - (:Node:<NodeType> {id, title, content, type, created_at, updated_at})
    - (:Tag {name}) shared by all nodes referencing it, never deleted here
    - (:Node)-[:HAS_TAG]->(:Tag)
    - (:Node)-[:<RelationshipType> {id, description, created_at}]->(:Node)

    IMPORTANT: NodeType / RelationshipType values are spliced into query
    text (Cypher cannot parameterize labels), so they are gated through the
    enums before any query is built.
    """

    def __init__(
        self,
        driver: Driver | None = None,
        database: str | None = None,
        timeout: float | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._driver = driver or get_driver()
        self._db = database or get_db_name()
        self._timeout = timeout if timeout is not None else settings.NEO4J_TX_TIMEOUT_SEC
        self._clock = clock

    # =====================================================================
    # Session / transaction scope
    # =====================================================================

    def _run_in_session(
        self,
        access_mode: str,
        work: Callable[[Any], Any],
        timeout: float | None,
    ) -> Any:
        """
        One session, one managed transaction per call.

        A failing close() never masks the error that is already propagating.
        After a committed transaction it is raised as SessionReleaseError
        carrying the transaction's return value in `.result`.
        """
        tx_fn = unit_of_work(timeout=timeout if timeout is not None else self._timeout)(work)
        session = self._driver.session(database=self._db, default_access_mode=access_mode)
        try:
            if access_mode == WRITE_ACCESS:
                value = session.execute_write(tx_fn)
            else:
                value = session.execute_read(tx_fn)
        except BaseException:
            try:
                session.close()
            except Exception as e:
                logger.warning("Failed to close Neo4j session after error: %s", e)
            raise

        try:
            session.close()
        except Exception as e:
            logger.warning("Failed to close Neo4j session: %s", e)
            raise SessionReleaseError(f"Failed to close Neo4j session: {e}", result=value) from e
        return value

    def _execute_write(self, work: Callable[[Any], Any], timeout: float | None) -> Any:
        return self._run_in_session(WRITE_ACCESS, work, timeout)

    def _execute_read(self, work: Callable[[Any], Any], timeout: float | None) -> Any:
        return self._run_in_session(READ_ACCESS, work, timeout)

    # =====================================================================
    # Nodes
    # =====================================================================

    def create_node(self, node: Node, *, timeout: float | None = None) -> str:
        """
        Create a node with its type label and link (merge-or-create) its tags.
        Timestamps are stamped here, not taken from the caller.
        Returns the store-generated id.
        """
        node_type = coerce_enum(node.type, NodeType)
        now = self._clock()
        query = f"""
            CREATE (n:{_NODE} {{
                id: randomUUID(),
                title: $title,
                content: $content,
                type: $type,
                created_at: datetime($created_at),
                updated_at: datetime($updated_at)
            }})
            SET n:{node_type.value}
            FOREACH (tag IN $tags |
                MERGE (t:{_TAG} {{name: tag}})
                MERGE (n)-[:{HAS_TAG}]->(t)
            )
            RETURN n.id AS id
            """

        def _tx(tx):
            result = tx.run(
                query,
                title=node.title,
                content=node.content,
                type=node_type.value,
                created_at=format_timestamp(now),
                updated_at=format_timestamp(now),
                tags=_unique_tags(node.tags),
            )
            rec = result.single()
            if rec is None:
                raise RecordDecodeError("id", "one row from CREATE", None)
            return expect_str(rec, "id")

        node_id = self._execute_write(_tx, timeout)
        logger.debug("Created %s node %s", node_type.value, node_id)
        return node_id

    def get_node_by_id(self, node_id: str, *, timeout: float | None = None) -> Node:
        """Read a node with all its tag names. Raises NodeNotFoundError."""
        query = f"""
            MATCH (n:{_NODE} {{id: $id}})
            OPTIONAL MATCH (n)-[:{HAS_TAG}]->(t:{_TAG})
            RETURN n.id AS id,
                   n.title AS title,
                   n.content AS content,
                   n.type AS type,
                   n.created_at AS created_at,
                   n.updated_at AS updated_at,
                   collect(t.name) AS tags
            """

        def _tx(tx):
            rec = tx.run(query, id=node_id).single()
            if rec is None:
                return None
            return Node(
                id=expect_str(rec, "id"),
                title=expect_str(rec, "title"),
                content=expect_str(rec, "content"),
                type=expect_enum(rec, "type", NodeType),
                created_at=expect_datetime(rec, "created_at"),
                updated_at=expect_datetime(rec, "updated_at"),
                tags=expect_str_list(rec, "tags"),
            )

        node = self._execute_read(_tx, timeout)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def update_node(self, node: Node, *, timeout: float | None = None) -> None:
        """
        Overwrite title/content/type, refresh updated_at and replace the tag
        set wholesale (old HAS_TAG edges dropped, tag vertices kept).

        The type label is swapped together with the `type` property so the
        node always carries exactly one type-derived label. updated_at never
        goes backwards or stays equal, even if the local clock does.
        """
        if not node.id:
            raise InvalidEntityError("update_node requires node.id")
        node_type = coerce_enum(node.type, NodeType)
        now = self._clock()
        query = f"""
            MATCH (n:{_NODE} {{id: $id}})
            REMOVE n:{_ALL_TYPE_LABELS}
            SET n:{node_type.value},
                n.title = $title,
                n.content = $content,
                n.type = $type,
                n.updated_at = CASE
                    WHEN n.updated_at IS NULL OR datetime($updated_at) > n.updated_at
                        THEN datetime($updated_at)
                    ELSE n.updated_at + duration({{microseconds: 1}})
                END
            WITH n
            OPTIONAL MATCH (n)-[r:{HAS_TAG}]->(:{_TAG})
            DELETE r
            WITH DISTINCT n
            FOREACH (tag IN $tags |
                MERGE (t:{_TAG} {{name: tag}})
                MERGE (n)-[:{HAS_TAG}]->(t)
            )
            RETURN n.id AS id
            """

        def _tx(tx):
            rec = tx.run(
                query,
                id=node.id,
                title=node.title,
                content=node.content,
                type=node_type.value,
                updated_at=format_timestamp(now),
                tags=_unique_tags(node.tags),
            ).single()
            return expect_str(rec, "id") if rec is not None else None

        if self._execute_write(_tx, timeout) is None:
            raise NodeNotFoundError(node.id)
        logger.debug("Updated node %s", node.id)

    def delete_node(self, node_id: str, *, timeout: float | None = None) -> None:
        """Detach-delete a node. Tag vertices survive; unknown ids are a no-op."""
        query = f"""
            MATCH (n:{_NODE} {{id: $id}})
            DETACH DELETE n
            """

        def _tx(tx):
            return tx.run(query, id=node_id).consume()

        summary = self._execute_write(_tx, timeout)
        logger.debug(
            "Deleted node %s (nodes=%s, relationships=%s)",
            node_id,
            summary.counters.nodes_deleted,
            summary.counters.relationships_deleted,
        )

    # =====================================================================
    # Relationships
    # =====================================================================

    def create_relationship(self, rel: Relationship, *, timeout: float | None = None) -> List[str]:
        """
        Create one `rel.type` edge from the source to every target that exists.

        Unknown targets are skipped without error, so the returned id list can
        be shorter than `rel.target_ids`. A missing source raises
        NodeNotFoundError. The whole fan-out commits or rolls back together.

        Uses the scoped `CALL (var) {}` subquery form: Neo4j 5.23+.
        """
        rel_type = coerce_enum(rel.type, RelationshipType)
        target_ids = list(rel.target_ids or [])
        if not target_ids:
            raise InvalidEntityError("create_relationship requires at least one target id")
        now = self._clock()
        query = f"""
            MATCH (source:{_NODE} {{id: $source_id}})
            CALL (source) {{
                UNWIND $target_ids AS target_id
                MATCH (target:{_NODE} {{id: target_id}})
                CREATE (source)-[r:{rel_type.value} {{
                    id: randomUUID(),
                    description: $description,
                    created_at: datetime($created_at)
                }}]->(target)
                RETURN collect(r.id) AS ids
            }}
            RETURN source.id AS source_id, ids
            """

        def _tx(tx):
            rec = tx.run(
                query,
                source_id=rel.source_id,
                target_ids=target_ids,
                description=rel.description,
                created_at=format_timestamp(now),
            ).single()
            if rec is None:
                return None
            return expect_str_list(rec, "ids")

        ids = self._execute_write(_tx, timeout)
        if ids is None:
            raise NodeNotFoundError(rel.source_id)
        if len(ids) < len(target_ids):
            logger.debug(
                "Skipped %d unresolved target(s) for %s from %s",
                len(target_ids) - len(ids),
                rel_type.value,
                rel.source_id,
            )
        return ids

    def delete_relationship(self, relationship_id: str, *, timeout: float | None = None) -> None:
        """Delete the edge carrying this id, whatever its type or direction. Idempotent."""
        query = """
            MATCH ()-[r {id: $id}]-()
            WITH DISTINCT r
            DELETE r
            """

        def _tx(tx):
            return tx.run(query, id=relationship_id).consume()

        summary = self._execute_write(_tx, timeout)
        logger.debug(
            "Deleted relationship %s (relationships=%s)",
            relationship_id,
            summary.counters.relationships_deleted,
        )
