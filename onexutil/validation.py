"""Request validation by naming convention and per-field rule checks."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Mapping
from typing import Any

from onexutil.strutil import camel_case_to_underscore

__all__ = [
    "ValidationError",
    "Validator",
    "valid_required",
    "validate_all_fields",
    "validate_selected_fields",
    "get_exported_field_names",
]

_log = logging.getLogger(__name__)

_PREFIX = "validate_"
_CO_VARARGS = 0x04
_CO_VARKEYWORDS = 0x08

Rule = Callable[[Any], object]


class ValidationError(ValueError):
    """Raised when a request or object fails validation."""


def _field_names(obj: Any) -> list[str] | None:
    """Return the field names of ``obj`` in declaration order, or None if it has none."""
    if isinstance(obj, type):
        return None
    if dataclasses.is_dataclass(obj):
        return [f.name for f in dataclasses.fields(obj)]
    if hasattr(obj, "__dict__"):
        return list(vars(obj))
    names: list[str] = []
    has_slots = False
    for cls in reversed(type(obj).__mro__):
        slots = cls.__dict__.get("__slots__")
        if slots is None:
            continue
        has_slots = True
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__") or name in names:
                continue
            if hasattr(obj, name):
                names.append(name)
    return names if has_slots else None


def _takes_single_positional(method: Any) -> bool:
    """Tell whether ``method`` takes exactly one positional argument and nothing else."""
    func = getattr(method, "__func__", method)
    code = getattr(func, "__code__", None)
    if code is None:
        return False
    if code.co_flags & (_CO_VARARGS | _CO_VARKEYWORDS):
        return False
    if code.co_kwonlyargcount:
        return False
    bound = 1 if func is not method and getattr(method, "__self__", None) is not None else 0
    return code.co_argcount - bound == 1


def _extract_validation_methods(custom_validator: Any) -> dict[str, Callable[[Any], object]]:
    methods: dict[str, Callable[[Any], object]] = {}
    for attr in dir(custom_validator):
        if not attr.startswith(_PREFIX) or len(attr) == len(_PREFIX):
            continue
        method = getattr(custom_validator, attr, None)
        if not callable(method) or not _takes_single_positional(method):
            continue
        request_name = attr[len(_PREFIX):]
        _log.debug("registering validator for %s", request_name)
        methods[request_name] = method
    return methods


class Validator:
    """Dispatches requests to ``validate_<request_type>`` methods of a custom validator.

    A method qualifies when it takes exactly one argument, the request. The
    request type may be written in snake case (``validate_create_user_request``)
    or as the class name itself (``validate_CreateUserRequest``). Validation
    methods signal failure by raising.
    """

    def __init__(self, custom_validator: Any) -> None:
        self._registry = _extract_validation_methods(custom_validator)

    def validate(self, request: Any) -> None:
        """Run the validation method registered for the type of ``request``, if any."""
        name = type(request).__name__
        method = self._registry.get(camel_case_to_underscore(name)) or self._registry.get(name)
        if method is None:
            return
        method(request)


def valid_required(obj: Any, *fields: str) -> None:
    """Check that each named field exists on ``obj`` and is not None.

    Raises TypeError if ``obj`` has no fields and ValidationError otherwise.
    """
    names = _field_names(obj)
    if names is None:
        raise TypeError(
            f"input must be an object with fields, got {type(obj).__name__}"
        )
    known = set(names)
    for field in fields:
        if field not in known:
            raise ValidationError(f"field {field} does not exist in object")
        if getattr(obj, field) is None:
            raise ValidationError(f"field {field} must be provided")


def get_exported_field_names(obj: Any) -> list[str]:
    """Return the public field names of ``obj``; empty if it has no fields."""
    names = _field_names(obj) or []
    return [name for name in names if not name.startswith("_")]


def validate_selected_fields(obj: Any, rules: Mapping[str, Rule], *fields: str) -> None:
    """Apply ``rules`` to the named fields of ``obj``.

    Fields that do not exist, are private, are None or have no rule are
    skipped. A rule signals failure by raising; the first failure propagates.
    """
    names = _field_names(obj)
    if names is None:
        raise TypeError(f"expected an object with fields, got {type(obj).__name__}")
    public = {name for name in names if not name.startswith("_")}
    for field in fields:
        if field not in public:
            continue
        value = getattr(obj, field)
        if value is None:
            continue
        rule = rules.get(field)
        if rule is None:
            continue
        rule(value)


def validate_all_fields(obj: Any, rules: Mapping[str, Rule]) -> None:
    """Apply ``rules`` to every public field of ``obj``."""
    validate_selected_fields(obj, rules, *get_exported_field_names(obj))