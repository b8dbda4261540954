"""SQLite access helpers: opening connections, running statements, transactions."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager, suppress
from dataclasses import dataclass, field
from os import PathLike
from typing import Any, Generic, TypeVar, Union

from work_record.logs import log_exception

Params = Union[Sequence[Any], Mapping[str, Any]]

T = TypeVar("T")


class DaoError(Exception):
    """A database operation failed."""


class NotFoundError(DaoError, LookupError):
    """The requested row does not exist."""


@dataclass
class Page(Generic[T]):
    """One page of query results together with the total number of matches."""

    items: list[T] = field(default_factory=list)
    total: int = 0


def _failure(message: str, context: str) -> DaoError:
    error = DaoError(message)
    log_exception(error, context)
    return error


def open_db(path: str | PathLike[str]) -> sqlite3.Connection:
    """Open a database in autocommit mode with foreign keys enforced."""
    try:
        conn = sqlite3.connect(path, isolation_level=None, check_same_thread=False)
    except sqlite3.Error as exc:
        raise _failure(f"数据库连接失败: {exc}", "open_db") from exc
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def execute(
    conn: sqlite3.Connection, sql: str, params: Params = (), context: str = ""
) -> sqlite3.Cursor:
    """Run one statement and return its cursor; failures raise DaoError."""
    try:
        return conn.execute(sql, params)
    except sqlite3.Error as exc:
        raise _failure(f"SQL执行失败: {exc}\nSQL: {sql}", context) from exc


def fetch_all(
    conn: sqlite3.Connection, sql: str, params: Params = (), context: str = ""
) -> list[Any]:
    """Run a query and return every row it produces."""
    try:
        return conn.execute(sql, params).fetchall()
    except sqlite3.Error as exc:
        raise _failure(f"SQL执行失败: {exc}\nSQL: {sql}", context) from exc


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Commit the enclosed work, or roll it back if the block raises."""
    try:
        conn.execute("BEGIN;")
    except sqlite3.Error as exc:
        raise _failure(f"BEGIN TRANSACTION failed: {exc}", "transaction") from exc
    try:
        yield conn
    except BaseException:
        with suppress(sqlite3.Error):
            conn.execute("ROLLBACK;")
        raise
    try:
        conn.execute("COMMIT;")
    except sqlite3.Error as exc:
        with suppress(sqlite3.Error):
            conn.execute("ROLLBACK;")
        raise _failure(f"COMMIT failed: {exc}", "transaction") from exc