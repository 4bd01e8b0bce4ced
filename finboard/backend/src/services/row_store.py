"""Row store adapters shared by the dashboard accessors.

Two backing stores are supported behind a single :class:`RowStore` protocol:

* :class:`SqlRowStore` executes against a SQLAlchemy engine and accepts both
  store-neutral :class:`TableQuery` objects and SQLAlchemy ``Select``
  statements.
* :class:`RestRowStore` talks to a PostgREST-style HTTP endpoint and only
  accepts :class:`TableQuery` objects.

Adapters raise :class:`~finboard.backend.src.core.errors.StoreError` when the
store reports a failure; the accessors decide how to escalate it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Protocol

import requests
import structlog
from sqlalchemy import MetaData, Table, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Select

from finboard.backend.src.core.config import get_settings
from finboard.backend.src.core.errors import StoreError
from finboard.backend.src.models.base import Base

LOGGER = structlog.get_logger(__name__)

_EMBED_SEPARATOR = "__"
_NEEDS_QUOTING = re.compile(r'[,()"\s]')


@dataclass(frozen=True)
class Embed:
    """A to-one relation selected alongside the parent row."""

    relation: str
    columns: tuple[str, ...]


@dataclass(frozen=True)
class Filter:
    column: str
    operator: str
    value: Any


@dataclass(frozen=True)
class Order:
    column: str
    descending: bool = False


@dataclass(frozen=True)
class TableQuery:
    """Store-neutral description of a single-table read."""

    table: str
    columns: tuple[str, ...] = ("*",)
    embed: Embed | None = None
    filters: tuple[Filter, ...] = ()
    order: tuple[Order, ...] = ()
    limit: int | None = None
    offset: int | None = None
    count: bool = False

    def select_clause(self) -> str:
        """Return the PostgREST ``select`` parameter for this query."""

        parts = list(self.columns)
        if self.embed is not None:
            parts.append(f"{self.embed.relation}({','.join(self.embed.columns)})")
        return ",".join(parts)


@dataclass
class QueryResult:
    rows: list[dict[str, Any]] = field(default_factory=list)
    count: int | None = None


class RowStore(Protocol):
    """Minimal protocol implemented by every backing store."""

    def query(self, statement: TableQuery | Select) -> QueryResult:
        """Execute ``statement`` and return the resulting rows."""


class SqlRowStore:
    """Row store backed by a SQLAlchemy engine."""

    def __init__(self, engine: Engine, metadata: MetaData | None = None) -> None:
        self._engine = engine
        self._metadata = metadata if metadata is not None else Base.metadata

    def query(self, statement: TableQuery | Select) -> QueryResult:
        embed: Embed | None = None
        count_statement = None
        if isinstance(statement, TableQuery):
            embed = statement.embed
            executable, count_statement = self._compile(statement)
        else:
            executable = statement

        try:
            with self._engine.connect() as connection:
                rows = [dict(row) for row in connection.execute(executable).mappings()]
                if count_statement is not None:
                    count = int(connection.execute(count_statement).scalar_one())
                else:
                    count = len(rows)
        except SQLAlchemyError as exc:
            LOGGER.error("sql_store_query_failed", error=str(exc))
            raise StoreError(str(exc)) from exc

        if embed is not None:
            rows = [_nest_embedded(row, embed) for row in rows]
        return QueryResult(rows=rows, count=count)

    def _table(self, name: str) -> Table:
        table = self._metadata.tables.get(name)
        if table is None:
            raise StoreError(f'relation "{name}" does not exist')
        return table

    @staticmethod
    def _column(table: Table, name: str):
        try:
            return table.c[name]
        except KeyError:
            raise StoreError(f'column {table.name}.{name} does not exist') from None

    def _compile(self, query: TableQuery) -> tuple[Select, Select | None]:
        table = self._table(query.table)
        if query.columns == ("*",):
            columns = list(table.c)
        else:
            columns = [self._column(table, name) for name in query.columns]

        from_clause = table
        if query.embed is not None:
            target = self._table(query.embed.relation)
            join_keys = [
                fk for fk in table.foreign_keys if fk.column.table is target
            ]
            if not join_keys:
                raise StoreError(
                    f"no relationship between '{table.name}' and '{target.name}'"
                )
            fk = join_keys[0]
            from_clause = table.outerjoin(target, fk.parent == fk.column)
            columns.extend(
                self._column(target, name).label(
                    f"{target.name}{_EMBED_SEPARATOR}{name}"
                )
                for name in query.embed.columns
            )

        conditions = []
        for item in query.filters:
            column = self._column(table, item.column)
            if item.operator == "eq":
                conditions.append(column == item.value)
            elif item.operator == "in":
                conditions.append(column.in_(list(item.value)))
            else:
                raise StoreError(f"unsupported filter operator '{item.operator}'")

        statement = select(*columns).select_from(from_clause).where(*conditions)
        for item in query.order:
            column = self._column(table, item.column)
            statement = statement.order_by(column.desc() if item.descending else column.asc())
        if query.limit is not None:
            statement = statement.limit(query.limit)
        if query.offset:
            statement = statement.offset(query.offset)

        count_statement = None
        if query.count:
            count_statement = select(func.count()).select_from(table).where(*conditions)
        return statement, count_statement


def _nest_embedded(row: dict[str, Any], embed: Embed) -> dict[str, Any]:
    """Move ``relation__column`` keys into a nested ``relation`` object."""

    prefix = f"{embed.relation}{_EMBED_SEPARATOR}"
    nested: dict[str, Any] = {}
    flat: dict[str, Any] = {}
    for key, value in row.items():
        if key.startswith(prefix):
            nested[key[len(prefix):]] = value
        else:
            flat[key] = value
    flat[embed.relation] = nested if any(v is not None for v in nested.values()) else None
    return flat


def _format_rest_value(value: Any) -> str:
    text = str(value)
    if _NEEDS_QUOTING.search(text):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def build_rest_params(query: TableQuery) -> list[tuple[str, str]]:
    """Translate a :class:`TableQuery` into PostgREST query parameters."""

    params: list[tuple[str, str]] = [("select", query.select_clause())]
    for item in query.filters:
        if item.operator == "eq":
            params.append((item.column, f"eq.{_format_rest_value(item.value)}"))
        elif item.operator == "in":
            values = ",".join(_format_rest_value(value) for value in item.value)
            params.append((item.column, f"in.({values})"))
        else:
            raise StoreError(f"unsupported filter operator '{item.operator}'")
    if query.order:
        params.append(
            (
                "order",
                ",".join(
                    f"{item.column}.{'desc' if item.descending else 'asc'}"
                    for item in query.order
                ),
            )
        )
    if query.limit is not None:
        params.append(("limit", str(query.limit)))
    if query.offset:
        params.append(("offset", str(query.offset)))
    return params


def parse_content_range(header: str | None) -> int | None:
    """Return the total from a ``Content-Range`` header such as ``0-4/25``."""

    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1].strip()
    return int(total) if total.isdigit() else None


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error")
        if message:
            return str(message)
    return response.text.strip() or f"HTTP {response.status_code}"


class RestRowStore:
    """Row store backed by a PostgREST-compatible HTTP API."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        *,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session
        self._headers = {"Accept": "application/json"}
        if api_key:
            self._headers["apikey"] = api_key
            self._headers["Authorization"] = f"Bearer {api_key}"

    def _get(self, url: str, **kwargs: Any) -> requests.Response:
        """GET ``url`` on the injected session, or on a session closed after the call."""

        if self._session is not None:
            return self._session.get(url, timeout=self._timeout, **kwargs)
        session = requests.Session()
        try:
            return session.get(url, timeout=self._timeout, **kwargs)
        finally:
            session.close()

    def query(self, statement: TableQuery | Select) -> QueryResult:
        if not isinstance(statement, TableQuery):
            raise TypeError("RestRowStore only executes TableQuery statements")

        headers = dict(self._headers)
        if statement.count:
            headers["Prefer"] = "count=exact"

        try:
            response = self._get(
                f"{self._base_url}/{statement.table}",
                params=build_rest_params(statement),
                headers=headers,
            )
        except requests.RequestException as exc:
            LOGGER.error("rest_store_request_failed", table=statement.table, error=str(exc))
            raise StoreError(str(exc)) from exc

        if response.status_code >= 300:
            message = _error_message(response)
            LOGGER.error(
                "rest_store_query_failed",
                table=statement.table,
                status_code=response.status_code,
                error=message,
            )
            raise StoreError(message, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise StoreError(f"invalid JSON from {statement.table}") from exc

        rows = payload if isinstance(payload, list) else [payload]
        count = parse_content_range(response.headers.get("Content-Range")) if statement.count else None
        return QueryResult(rows=rows, count=count)


@lru_cache()
def get_sql_store() -> SqlRowStore:
    """Return the row store bound to the configured database engine."""

    from finboard.backend.src.db import get_engine

    return SqlRowStore(get_engine())


@lru_cache()
def get_rest_store() -> RowStore:
    """Return the REST row store, or the SQL store when none is configured."""

    settings = get_settings()
    if not settings.rest_store_enabled:
        LOGGER.info("rest_store_not_configured", fallback="sql")
        return get_sql_store()
    return RestRowStore(
        settings.rest_store_url or "",
        settings.rest_store_key,
        timeout=settings.rest_store_timeout,
    )


__all__ = [
    "Embed",
    "Filter",
    "Order",
    "QueryResult",
    "RestRowStore",
    "RowStore",
    "SqlRowStore",
    "TableQuery",
    "build_rest_params",
    "get_rest_store",
    "get_sql_store",
    "parse_content_range",
]
