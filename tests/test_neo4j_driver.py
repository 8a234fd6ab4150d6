from unittest.mock import Mock, patch

import pytest
from neo4j import Driver

import core.neo4j_driver as neo4j_driver


@pytest.fixture(autouse=True)
def reset_global_driver():
    neo4j_driver._driver = None
    yield
    neo4j_driver._driver = None


@pytest.fixture
def mock_graph_database():
    with patch("core.neo4j_driver.GraphDatabase.driver") as factory:
        instance = Mock(spec=Driver)
        factory.return_value = instance
        yield factory, instance


def test_get_driver_before_init_raises():
    with pytest.raises(RuntimeError):
        neo4j_driver.get_driver()


def test_init_creates_driver_once(mock_graph_database):
    factory, instance = mock_graph_database
    neo4j_driver.init_driver()
    neo4j_driver.init_driver()
    factory.assert_called_once()
    assert neo4j_driver.get_driver() is instance
    instance.verify_connectivity.assert_not_called()


def test_init_can_verify_connectivity(mock_graph_database):
    _, instance = mock_graph_database
    neo4j_driver.init_driver(verify=True)
    instance.verify_connectivity.assert_called_once()


def test_close_driver(mock_graph_database):
    _, instance = mock_graph_database
    neo4j_driver.init_driver()
    neo4j_driver.close_driver()
    instance.close.assert_called_once()
    with pytest.raises(RuntimeError):
        neo4j_driver.get_driver()


def test_close_without_init_is_noop():
    neo4j_driver.close_driver()
