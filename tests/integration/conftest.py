"""
Live-store fixtures. Every test under tests/integration is marked
`integration` and skipped unless the Neo4j at NEO4J_URI answers.
"""

import uuid

import pytest
from neo4j import GraphDatabase
from neo4j.exceptions import AuthError, DriverError, ServiceUnavailable

from core.config import settings
from repositories.node_repo import NodeRepository


def pytest_collection_modifyitems(items):
    """Mark collected tests in this directory as integration tests."""
    for item in items:
        if "tests/integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(scope="session")
def live_driver():
    driver = GraphDatabase.driver(
        settings.NEO4J_URI,
        auth=(settings.NEO4J_USER, settings.NEO4J_PASSWORD),
        connection_timeout=3,
    )
    try:
        driver.verify_connectivity()
    except (ServiceUnavailable, AuthError, DriverError) as e:
        driver.close()
        pytest.skip(f"Neo4j not reachable at {settings.NEO4J_URI}: {e}")
    yield driver
    driver.close()


class Graph:
    """Direct Cypher access for asserting on what the repository wrote."""

    def __init__(self, driver):
        self._driver = driver
        self.prefix = f"it-{uuid.uuid4().hex[:8]}-"

    def name(self, value: str) -> str:
        # titles and tag names are scoped per test; tag vertices outlive their nodes
        return self.prefix + value

    def query(self, cypher: str, **params):
        records, _, _ = self._driver.execute_query(
            cypher, params, database_=settings.NEO4J_DATABASE
        )
        return records

    def scalar(self, cypher: str, **params):
        return self.query(cypher, **params)[0][0]


@pytest.fixture
def graph(live_driver):
    g = Graph(live_driver)
    yield g
    g.query(
        "MATCH (n:Node) WHERE n.title STARTS WITH $p DETACH DELETE n",
        p=g.prefix,
    )
    g.query("MATCH (t:Tag) WHERE t.name STARTS WITH $p DETACH DELETE t", p=g.prefix)


@pytest.fixture
def live_repo(live_driver):
    return NodeRepository(driver=live_driver, database=settings.NEO4J_DATABASE)
