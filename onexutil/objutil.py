"""Helpers for inspecting and copying the fields of plain objects."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any

import yaml

__all__ = [
    "to_db_map",
    "get_obj_fields_map",
    "copy_obj",
    "copy_obj_via_yaml",
    "struct_name",
]


def _is_dataclass_instance(obj: Any) -> bool:
    return dataclasses.is_dataclass(obj) and not isinstance(obj, type)


def _field_items(obj: Any) -> list[tuple[str, Any]]:
    if _is_dataclass_instance(obj):
        return [(f.name, getattr(obj, f.name)) for f in dataclasses.fields(obj)]
    try:
        attributes = vars(obj)
    except TypeError:
        raise TypeError(
            f"expected an object with fields, got {type(obj).__name__}"
        ) from None
    return [(name, value) for name, value in attributes.items() if not name.startswith("_")]


def _parse_tag_setting(metadata: Mapping[str, Any]) -> dict[str, str]:
    setting: dict[str, str] = {}
    for tag in (metadata.get("sql", ""), metadata.get("gorm", "")):
        if not tag:
            continue
        for item in tag.split(";"):
            key, *rest = item.split(":")
            key = key.strip().upper()
            setting[key] = ":".join(rest) if rest else key
    return setting


def to_db_map(obj: Any, fields: Iterable[str]) -> dict[str, Any]:
    """Map the database column of each named field to the field's value.

    ``obj`` must be a dataclass instance whose fields carry a ``gorm`` (or
    ``sql``) metadata entry such as ``"column:user_name;size:64"``.
    """
    if not _is_dataclass_instance(obj):
        raise TypeError(f"expected a dataclass instance, got {type(obj).__name__}")
    by_name = {f.name: f for f in dataclasses.fields(obj)}
    result: dict[str, Any] = {}
    for name in fields:
        field = by_name.get(name)
        if field is None:
            raise ValueError(f"unknown field {name}")
        column = _parse_tag_setting(field.metadata).get("COLUMN")
        if column is None:
            raise ValueError(f"undefined gorm field {name}")
        result[column] = getattr(obj, name)
    return result


def get_obj_fields_map(obj: Any, fields: Iterable[str] = ()) -> dict[str, Any]:
    """Return the public fields of ``obj`` as a dict, limited to ``fields`` if given.

    Nested dataclass values are turned into dicts of all their fields.
    """
    wanted = set(fields)
    result: dict[str, Any] = {}
    for name, value in _field_items(obj):
        if wanted and name not in wanted:
            continue
        result[name] = get_obj_fields_map(value) if _is_dataclass_instance(value) else value
    return result


def copy_obj(source: Any, target: Any, fields: Iterable[str] = ()) -> bool:
    """Copy the chosen fields from ``source`` to ``target``.

    Returns False, leaving ``target`` alone, when the fields already match.
    """
    fields = list(fields)
    source_map = get_obj_fields_map(source, fields)
    if source_map == get_obj_fields_map(target, fields):
        return False
    for name in source_map:
        setattr(target, name, getattr(source, name))
    return True


def _to_plain(value: Any) -> Any:
    if _is_dataclass_instance(value) or (
        hasattr(value, "__dict__") and not isinstance(value, type)
    ):
        return {name: _to_plain(item) for name, item in _field_items(value)}
    if isinstance(value, Mapping):
        return {key: _to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_to_plain(item) for item in value]
    return value


def _assign(target: Any, data: Any) -> None:
    if not isinstance(data, Mapping):
        return
    if isinstance(target, MutableMapping):
        target.update(data)
        return
    for name, value in data.items():
        if not isinstance(name, str) or name.startswith("_") or not hasattr(target, name):
            continue
        current = getattr(target, name)
        if isinstance(value, Mapping) and (
            _is_dataclass_instance(current) or isinstance(current, MutableMapping)
        ):
            _assign(current, value)
        else:
            setattr(target, name, value)


def copy_obj_via_yaml(target: Any, source: Any) -> None:
    """Serialise ``source`` to YAML and load the result into ``target``.

    Keys that ``target`` has no attribute for are ignored.
    """
    if source is None or target is None:
        return
    data = yaml.safe_dump(_to_plain(source))
    _assign(target, yaml.safe_load(data))


def struct_name(obj: Any) -> str:
    """Return the class name of ``obj`` (or of ``obj`` itself if it is a class)."""
    if isinstance(obj, type):
        return obj.__name__
    return type(obj).__name__