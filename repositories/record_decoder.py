from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Type, TypeVar

from neo4j import Record
from neo4j.time import DateTime as Neo4jDateTime

from domain.errors import RecordDecodeError, UnsupportedTypeError

E = TypeVar("E")


def format_timestamp(value: datetime) -> str:
    """RFC 3339 text as bound into `datetime($param)`; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _field(record: Record, key: str) -> Any:
    try:
        return record[key]
    except KeyError as e:
        raise RecordDecodeError(key, "column present", None) from e


def expect_str(record: Record, key: str) -> str:
    value = _field(record, key)
    if not isinstance(value, str):
        raise RecordDecodeError(key, "str", value)
    return value


def expect_datetime(record: Record, key: str) -> datetime:
    value = _field(record, key)
    if isinstance(value, Neo4jDateTime):
        value = value.to_native()
    if not isinstance(value, datetime):
        raise RecordDecodeError(key, "datetime", value)
    if value.tzinfo is None:
        raise RecordDecodeError(key, "timezone-aware datetime", value)
    return value


def expect_str_list(record: Record, key: str) -> List[str]:
    value = _field(record, key)
    if not isinstance(value, list):
        raise RecordDecodeError(key, "list", value)
    for item in value:
        if not isinstance(item, str):
            raise RecordDecodeError(key, "list of str", item)
    return list(value)


def expect_enum(record: Record, key: str, enum_cls: Type[E]) -> E:
    raw = expect_str(record, key)
    try:
        return enum_cls(raw)
    except ValueError as e:
        raise RecordDecodeError(key, enum_cls.__name__, raw) from e


def coerce_enum(value: Any, enum_cls: Type[E]) -> E:
    """
    Gate for values that end up spliced into Cypher as labels / rel types.
    Accepts an enum member or its exact string value, nothing else.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value)
        except ValueError:
            pass
    raise UnsupportedTypeError(enum_cls.__name__, value)
