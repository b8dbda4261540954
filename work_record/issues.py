"""Access to the issue table, with joined dictionary and employee names."""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from typing import Any, Union

from work_record.db import DaoError, Page, execute, fetch_all
from work_record.logs import log_exception
from work_record.models import IssueRecord

_SELECT_COLUMNS = (
    "SELECT i.id, i.issue_title, i.reported_by, i.description, i.progress_id, "
    "d.progress as progress_name, d.progress_class as progress_class, "
    "i.responsible_person, i.affected_id, a.affected as affected_name, "
    "i.source_type_id, m.type as source_type_name, i.create_time, i.update_time, "
    "i.employee_id, e.name as employee_name, e.department_id "
    "FROM issue_record i "
    "LEFT JOIN issue_progress_dict d ON i.progress_id = d.id "
    "LEFT JOIN affected_type_dict a ON i.affected_id = a.id "
    "LEFT JOIN source_type_dict m ON i.source_type_id = m.id "
    "LEFT JOIN employee_dict e ON i.employee_id = e.id "
)

SQL_SELECT_ALL_ISSUES = _SELECT_COLUMNS + "ORDER BY i.id DESC;"
SQL_SELECT_ISSUES_PAGED_BASE = _SELECT_COLUMNS
SQL_COUNT_ISSUES_BASE = "SELECT COUNT(*) FROM issue_record i "
SQL_INSERT_ISSUE = (
    "INSERT INTO issue_record (issue_title, employee_id, description, progress_id, "
    "responsible_person, affected_id, source_type_id, reported_by) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?);"
)
SQL_UPDATE_ISSUE = (
    "UPDATE issue_record SET issue_title=?, employee_id=?, description=?, progress_id=?, "
    "responsible_person=?, affected_id=?, source_type_id=?, reported_by=? WHERE id=?;"
)
SQL_DELETE_ISSUE = "DELETE FROM issue_record WHERE id=?;"

_FIELDS = (
    "id",
    "issue_title",
    "reported_by",
    "description",
    "progress_id",
    "progress_name",
    "progress_class",
    "responsible_person",
    "affected_id",
    "affected_name",
    "source_type_id",
    "source_type_name",
    "create_time",
    "update_time",
    "employee_id",
    "employee_name",
    "department_id",
)
_INT_FIELDS = frozenset(
    {"id", "progress_id", "affected_id", "source_type_id", "employee_id", "department_id"}
)

Filter = Union[str, int, None]


def _convert(name: str, value: Any) -> Any:
    if name in _INT_FIELDS:
        return int(value) if value is not None else 0
    return "" if value is None else str(value)


def _issue(row: Sequence[Any]) -> IssueRecord:
    return IssueRecord(
        **{name: _convert(name, value) for name, value in zip(_FIELDS, tuple(row))}
    )


def _issue_params(issue: IssueRecord) -> tuple[Any, ...]:
    return (
        issue.issue_title,
        issue.employee_id,
        issue.description,
        issue.progress_id,
        issue.responsible_person,
        issue.affected_id,
        issue.source_type_id,
        issue.reported_by,
    )


def _filter_value(value: Filter, name: str) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        error = DaoError(f"invalid {name}: {value!r}")
        log_exception(error, "queryIssuesPaged")
        raise error from exc


def query_all_issues(conn: sqlite3.Connection) -> list[IssueRecord]:
    """Every issue, newest first."""
    return [_issue(row) for row in fetch_all(conn, SQL_SELECT_ALL_ISSUES, (), "queryAllIssues")]


def insert_issue(conn: sqlite3.Connection, issue: IssueRecord) -> int:
    """Store a new issue; return its row id."""
    cursor = execute(conn, SQL_INSERT_ISSUE, _issue_params(issue), "insertIssue")
    return int(cursor.lastrowid or 0)


def update_issue(conn: sqlite3.Connection, issue: IssueRecord) -> None:
    """Overwrite the issue with the given id."""
    execute(conn, SQL_UPDATE_ISSUE, (*_issue_params(issue), issue.id), "updateIssue")


def delete_issue(conn: sqlite3.Connection, issue_id: int) -> None:
    """Remove the issue with this id."""
    execute(conn, SQL_DELETE_ISSUE, (issue_id,), "deleteIssue")


def query_issues_paged(
    conn: sqlite3.Connection,
    page: int,
    page_size: int,
    source_type_id: Filter = "",
    affected_id: Filter = "",
) -> Page[IssueRecord]:
    """One page of issues, newest first, optionally filtered by source type and affected area.

    An empty or None filter matches everything. Pages are numbered from 1.
    """
    conditions: list[str] = []
    params: list[int] = []
    for column, value, name in (
        ("i.source_type_id", source_type_id, "source_type_id"),
        ("i.affected_id", affected_id, "affected_id"),
    ):
        number = _filter_value(value, name)
        if number is not None:
            conditions.append(f"{column} = ?")
            params.append(number)
    where = "WHERE " + " AND ".join(conditions) if conditions else ""

    count_rows = fetch_all(
        conn, SQL_COUNT_ISSUES_BASE + where + ";", params, "queryIssuesPaged_count"
    )
    total = int(count_rows[-1][0]) if count_rows else 0

    sql = SQL_SELECT_ISSUES_PAGED_BASE + where + " ORDER BY i.id DESC LIMIT ? OFFSET ?;"
    offset = (page - 1) * page_size
    rows = fetch_all(conn, sql, [*params, page_size, offset], "queryIssuesPaged")
    return Page(items=[_issue(row) for row in rows], total=total)