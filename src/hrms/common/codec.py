"""Dataclass <-> JSON codec for persisted records.

Records are stored as JSON objects with camelCase keys (``employeeId``,
``dateOfJoining``) so the persisted collections keep one stable shape no
matter which store holds them.
"""

from __future__ import annotations

import dataclasses
import typing
from datetime import date, datetime
from enum import Enum
from functools import lru_cache
from typing import Any, Type, TypeVar, Union

from ..core.exceptions import StorageError

T = TypeVar("T")

_NONE_TYPE = type(None)


def camelize(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_json(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {camelize(f.name): to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_json(v) for k, v in value.items()}
    return value


@lru_cache(maxsize=None)
def _hints(cls: type) -> dict:
    return typing.get_type_hints(cls)


def from_json(cls: Type[T], data: Any) -> T:
    if not isinstance(data, dict):
        raise StorageError(f"Corrupt {cls.__name__} record: expected object, got {type(data).__name__}")

    hints = _hints(cls)
    kwargs = {}
    for f in dataclasses.fields(cls):
        key = camelize(f.name)
        if key in data:
            try:
                kwargs[f.name] = _convert(hints[f.name], data[key])
            except (TypeError, ValueError) as e:
                raise StorageError(f"Corrupt {cls.__name__} record: bad {key!r} ({e})") from e
        elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            raise StorageError(f"Corrupt {cls.__name__} record: missing {key!r}")
    return cls(**kwargs)


def _convert(tp: Any, value: Any) -> Any:
    origin = typing.get_origin(tp)
    if origin is Union:
        args = [a for a in typing.get_args(tp) if a is not _NONE_TYPE]
        if value is None:
            return None
        return _convert(args[0], value)
    if origin in (tuple, list):
        args = typing.get_args(tp)
        item_tp = args[0] if args else Any
        items = [_convert(item_tp, v) for v in (value or [])]
        return tuple(items) if origin is tuple else items
    if value is None or tp is Any:
        return value
    if isinstance(tp, type):
        if dataclasses.is_dataclass(tp):
            return from_json(tp, value)
        if issubclass(tp, Enum):
            return tp(value)
        if tp is datetime:
            return datetime.fromisoformat(value)
        if tp is date:
            return date.fromisoformat(str(value)[:10])
        if tp is float:
            return float(value)
        if tp is int:
            return int(value)
        if tp is str:
            return str(value)
    return value
