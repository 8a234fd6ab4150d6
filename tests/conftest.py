"""Shared fixtures: an in-memory stand-in for driver -> session -> tx -> result."""

from unittest.mock import MagicMock

import pytest
from neo4j import Driver, Record


class FakeStore:
    """Records every tx.run() call and replays queued records."""

    def __init__(self):
        self.driver = MagicMock(spec=Driver)
        self.session = MagicMock()
        self.tx = MagicMock()
        self.result = MagicMock()
        self.driver.session.return_value = self.session
        self.tx.run.return_value = self.result
        self.session.execute_write.side_effect = lambda fn: fn(self.tx)
        self.session.execute_read.side_effect = lambda fn: fn(self.tx)
        self.result.single.return_value = None

    def returns(self, **fields):
        self.result.single.return_value = Record(fields)

    @property
    def query(self) -> str:
        return self.tx.run.call_args.args[0]

    @property
    def params(self) -> dict:
        return self.tx.run.call_args.kwargs


@pytest.fixture
def store():
    return FakeStore()
