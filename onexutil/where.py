"""Composable query conditions: pagination, filters, clauses and tenant scoping."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "DEFAULT_LIMIT",
    "Tenant",
    "Query",
    "Options",
    "with_offset",
    "with_limit",
    "with_page",
    "with_filter",
    "with_clauses",
    "with_query",
    "new_where",
    "o",
    "l",
    "p",
    "c",
    "t",
    "f",
    "register_tenant",
    "get_page_offset",
]

# A limit of -1 means "no limit".
DEFAULT_LIMIT = -1


@dataclass(frozen=True)
class Tenant:
    """A tenant filter: a column key and a function deriving its value from a context."""

    key: str = ""
    value_func: Callable[[Any], str] | None = None


@dataclass(frozen=True)
class Query:
    """A query condition together with the arguments for its placeholders."""

    query: Any
    args: tuple[Any, ...] = ()


@dataclass
class Options:
    """Conditions for a query: offset, limit, equality filters, clauses and queries."""

    offset: int = 0
    limit: int = DEFAULT_LIMIT
    filters: dict[Any, Any] = field(default_factory=dict)
    clauses: list[Any] = field(default_factory=list)
    queries: list[Query] = field(default_factory=list)

    def o(self, offset: int) -> Options:
        """Set the offset; negative values become 0."""
        self.offset = max(offset, 0)
        return self

    def l(self, limit: int) -> Options:  # noqa: E743
        """Set the limit; values of 0 or less mean no limit."""
        self.limit = limit if limit > 0 else DEFAULT_LIMIT
        return self

    def p(self, page: int, page_size: int) -> Options:
        """Set offset and limit from a 1-based page number and a page size."""
        if page < 1:
            page = 1
        if page_size <= 0:
            page_size = DEFAULT_LIMIT
        self.offset = (page - 1) * page_size
        self.limit = page_size
        return self

    def c(self, *conds: Any) -> Options:
        """Append clauses."""
        self.clauses.extend(conds)
        return self

    def q(self, query: Any, *args: Any) -> Options:
        """Append a query condition with its arguments."""
        self.queries.append(Query(query, args))
        return self

    def t(self, ctx: Any) -> Options:
        """Add the registered tenant's filter for ``ctx``, if a tenant is registered."""
        tenant = _registered_tenant
        if tenant.key and tenant.value_func is not None:
            self.f(tenant.key, tenant.value_func(ctx))
        return self

    def f(self, *kvs: Any) -> Options:
        """Add key/value filter pairs; an odd number of arguments is ignored."""
        if len(kvs) % 2:
            return self
        self.filters.update(zip(kvs[::2], kvs[1::2]))
        return self


Option = Callable[[Options], None]

_registered_tenant = Tenant()


def with_offset(offset: int) -> Option:
    """Option setting the offset; negative values become 0."""

    def apply(options: Options) -> None:
        options.offset = max(offset, 0)

    return apply


def with_limit(limit: int) -> Option:
    """Option setting the limit; values of 0 or less mean no limit."""

    def apply(options: Options) -> None:
        options.limit = limit if limit > 0 else DEFAULT_LIMIT

    return apply


def with_page(page: int, page_size: int) -> Option:
    """Option setting offset and limit from a page number and page size.

    A page of 0 means the first page and a page size of 0 means no limit.
    """

    def apply(options: Options) -> None:
        number = 1 if page == 0 else page
        size = DEFAULT_LIMIT if page_size == 0 else page_size
        options.offset = (number - 1) * size
        options.limit = size

    return apply


def with_filter(filters: Mapping[Any, Any]) -> Option:
    """Option replacing the filters."""

    def apply(options: Options) -> None:
        options.filters = dict(filters)

    return apply


def with_clauses(*conds: Any) -> Option:
    """Option appending clauses."""

    def apply(options: Options) -> None:
        options.clauses.extend(conds)

    return apply


def with_query(query: Any, *args: Any) -> Option:
    """Option appending a query condition with its arguments."""

    def apply(options: Options) -> None:
        options.queries.append(Query(query, args))

    return apply


def new_where(*opts: Option) -> Options:
    """Return default Options with each option applied in turn."""
    options = Options()
    for opt in opts:
        opt(options)
    return options


def o(offset: int) -> Options:
    """New Options with an offset."""
    return new_where().o(offset)


def l(limit: int) -> Options:  # noqa: E743
    """New Options with a limit."""
    return new_where().l(limit)


def p(page: int, page_size: int) -> Options:
    """New Options for a page."""
    return new_where().p(page, page_size)


def c(*conds: Any) -> Options:
    """New Options with clauses."""
    return new_where().c(*conds)


def t(ctx: Any) -> Options:
    """New Options filtered by the registered tenant; raises if none is registered."""
    tenant = _registered_tenant
    if tenant.value_func is None:
        raise RuntimeError("no tenant has been registered")
    return new_where().f(tenant.key, tenant.value_func(ctx))


def f(*kvs: Any) -> Options:
    """New Options with key/value filters."""
    return new_where().f(*kvs)


def register_tenant(key: str, value_func: Callable[[Any], str] | None) -> None:
    """Register the tenant used by :func:`t` and :meth:`Options.t`."""
    global _registered_tenant
    _registered_tenant = Tenant(key, value_func)


def get_page_offset(page_num: int, page_size: int) -> int:
    """Return the offset of the first row of a 1-based page."""
    return (page_num - 1) * page_size