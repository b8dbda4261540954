"""Access to the requirement table, with joined status, dictionary and employee names."""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from typing import Any, Union

from work_record.db import DaoError, NotFoundError, Page, execute, fetch_all
from work_record.logs import log_exception
from work_record.models import RequirementRecord

_SELECT_COLUMNS = (
    "SELECT r.id, r.title, r.requirement_status_id, d.status as requirement_status_name, "
    "d.requirement_status_class as requirement_status_class, r.affected_id, "
    "a.affected as affected_name, r.source_type_id, m.type as source_type_name, "
    "r.create_time, r.update_time, r.employee_id, e.name as employee_name, e.department_id "
    "FROM requirement_record r "
    "LEFT JOIN requirement_status_dict d ON r.requirement_status_id = d.id "
    "LEFT JOIN affected_type_dict a ON r.affected_id = a.id "
    "LEFT JOIN source_type_dict m ON r.source_type_id = m.id "
    "LEFT JOIN employee_dict e ON r.employee_id = e.id "
)

SQL_SELECT_ALL_REQUIREMENTS = _SELECT_COLUMNS + "ORDER BY r.id DESC;"
SQL_SELECT_REQUIREMENTS_PAGED_BASE = _SELECT_COLUMNS
SQL_COUNT_REQUIREMENTS_BASE = "SELECT COUNT(*) FROM requirement_record r "
SQL_SELECT_REQUIREMENT_BY_ID = (
    "SELECT r.id, r.title, r.requirement_status_id, r.affected_id, "
    "a.affected as affected_name, r.source_type_id, s.type as source_type_name, "
    "r.create_time, r.update_time "
    "FROM requirement_record r "
    "LEFT JOIN affected_type_dict a ON r.affected_id = a.id "
    "LEFT JOIN source_type_dict s ON r.source_type_id = s.id "
    "WHERE r.id = ?;"
)
SQL_INSERT_REQUIREMENT = (
    "INSERT INTO requirement_record (title, requirement_status_id, source_type_id, "
    "affected_id, employee_id) VALUES (?, ?, ?, ?, ?);"
)
SQL_UPDATE_REQUIREMENT = (
    "UPDATE requirement_record SET title=?, requirement_status_id=?, source_type_id=?, "
    "affected_id=?, employee_id=? WHERE id=?;"
)
SQL_DELETE_REQUIREMENT = "DELETE FROM requirement_record WHERE id = ?;"
SQL_COUNT_WORK_RECORDS_BY_REQUIREMENT = (
    "SELECT COUNT(*) FROM work_record WHERE requirement_id = ?;"
)

_LIST_FIELDS = (
    "id",
    "title",
    "requirement_status_id",
    "requirement_status_name",
    "requirement_status_class",
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
_DETAIL_FIELDS = (
    "id",
    "title",
    "requirement_status_id",
    "affected_id",
    "affected_name",
    "source_type_id",
    "source_type_name",
    "create_time",
    "update_time",
)
_INT_FIELDS = frozenset(
    {
        "id",
        "requirement_status_id",
        "affected_id",
        "source_type_id",
        "employee_id",
        "department_id",
    }
)

Filter = Union[str, int, None]


def _convert(name: str, value: Any) -> Any:
    if name in _INT_FIELDS:
        return int(value) if value is not None else 0
    return "" if value is None else str(value)


def _requirement(fields: Sequence[str], row: Sequence[Any]) -> RequirementRecord:
    return RequirementRecord(
        **{name: _convert(name, value) for name, value in zip(fields, tuple(row))}
    )


def _requirement_params(record: RequirementRecord) -> tuple[Any, ...]:
    return (
        record.title,
        record.requirement_status_id,
        record.source_type_id,
        record.affected_id,
        record.employee_id,
    )


def _filter_value(value: Filter, name: str) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        error = DaoError(f"invalid {name}: {value!r}")
        log_exception(error, "queryRequirementRecordsPaged")
        raise error from exc


def query_all_requirements(conn: sqlite3.Connection) -> list[RequirementRecord]:
    """Every requirement, newest first."""
    rows = fetch_all(conn, SQL_SELECT_ALL_REQUIREMENTS, (), "queryAllRequirementRecords")
    return [_requirement(_LIST_FIELDS, row) for row in rows]


def get_requirement(conn: sqlite3.Connection, requirement_id: int) -> RequirementRecord:
    """The requirement with this id; raises NotFoundError if there is none.

    Only the requirement's own columns and its affected-area and source-type
    names are filled in.
    """
    rows = fetch_all(
        conn, SQL_SELECT_REQUIREMENT_BY_ID, (requirement_id,), "getRequirementById"
    )
    if not rows:
        raise NotFoundError(f"requirement {requirement_id} not found")
    return _requirement(_DETAIL_FIELDS, rows[-1])


def insert_requirement(conn: sqlite3.Connection, record: RequirementRecord) -> int:
    """Store a new requirement; return its row id."""
    cursor = execute(
        conn, SQL_INSERT_REQUIREMENT, _requirement_params(record), "insertRequirementRecord"
    )
    return int(cursor.lastrowid or 0)


def update_requirement(conn: sqlite3.Connection, record: RequirementRecord) -> None:
    """Overwrite the requirement with the record's id."""
    execute(
        conn,
        SQL_UPDATE_REQUIREMENT,
        (*_requirement_params(record), record.id),
        "updateRequirementRecord",
    )


def count_work_records_by_requirement(conn: sqlite3.Connection, requirement_id: int) -> int:
    """How many work records belong to this requirement."""
    rows = fetch_all(
        conn,
        SQL_COUNT_WORK_RECORDS_BY_REQUIREMENT,
        (requirement_id,),
        "countWorkRecordByRequirement",
    )
    return int(rows[-1][0]) if rows else 0


def delete_requirement(conn: sqlite3.Connection, requirement_id: int) -> None:
    """Remove the requirement with this id."""
    execute(conn, SQL_DELETE_REQUIREMENT, (requirement_id,), "deleteRequirementRecord")


def query_requirements_paged(
    conn: sqlite3.Connection,
    page: int,
    page_size: int,
    status_id: Filter = "",
    affected_id: Filter = "",
    source_type_id: Filter = "",
) -> Page[RequirementRecord]:
    """One page of requirements, newest first, optionally filtered.

    An empty or None filter matches everything. Pages are numbered from 1.
    """
    conditions: list[str] = []
    params: list[int] = []
    for column, value, name in (
        ("r.requirement_status_id", status_id, "status_id"),
        ("r.affected_id", affected_id, "affected_id"),
        ("r.source_type_id", source_type_id, "source_type_id"),
    ):
        number = _filter_value(value, name)
        if number is not None:
            conditions.append(f"{column} = ?")
            params.append(number)
    where = "WHERE " + " AND ".join(conditions) if conditions else ""

    count_rows = fetch_all(
        conn,
        SQL_COUNT_REQUIREMENTS_BASE + where + ";",
        params,
        "queryRequirementRecordsPaged_count",
    )
    total = int(count_rows[-1][0]) if count_rows else 0

    sql = SQL_SELECT_REQUIREMENTS_PAGED_BASE + where + " ORDER BY r.id DESC LIMIT ? OFFSET ?"
    offset = (page - 1) * page_size
    rows = fetch_all(conn, sql, [*params, page_size, offset], "queryRequirementRecordsPaged")
    return Page(items=[_requirement(_LIST_FIELDS, row) for row in rows], total=total)