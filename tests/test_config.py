import pytest
from pydantic import ValidationError

from core.config import Settings


def test_defaults(monkeypatch):
    for key in ("NEO4J_URI", "NEO4J_DATABASE", "NEO4J_TX_TIMEOUT_SEC", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    s = Settings(_env_file=None)
    assert s.NEO4J_URI == "bolt://localhost:7687"
    assert s.NEO4J_DATABASE == "neo4j"
    assert s.NEO4J_TX_TIMEOUT_SEC == 30.0
    assert s.LOG_LEVEL == "INFO"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("NEO4J_URI", "neo4j://graph:7687")
    monkeypatch.setenv("NEO4J_TX_TIMEOUT_SEC", "2.5")
    s = Settings(_env_file=None)
    assert s.NEO4J_URI == "neo4j://graph:7687"
    assert s.NEO4J_TX_TIMEOUT_SEC == 2.5


def test_timeout_must_be_positive(monkeypatch):
    monkeypatch.setenv("NEO4J_TX_TIMEOUT_SEC", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
