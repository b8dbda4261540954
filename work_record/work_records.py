"""Access to the work-record table, with joined names and attached files."""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Iterable, Sequence
from contextlib import suppress
from typing import Any, Union

from work_record.db import DaoError, NotFoundError, Page, execute, fetch_all
from work_record.logs import log_exception
from work_record.models import WorkRecord

_SELECT_COLUMNS = (
    "SELECT w.id, w.requirement_id, r.title as requirement_title, w.work_type_id, "
    "t.type as work_type, w.affected_id, a.affected as affected_name, w.source_type_id, "
    "m.type as source_type_name, w.work_record_status_id, d.status_name, "
    "d.status_class as status_class, w.work_content, w.create_time, w.completion_time, "
    "w.employee_id, e.name as employee_name, e.department_id "
    "FROM work_record w "
    "LEFT JOIN requirement_record r ON w.requirement_id = r.id "
    "LEFT JOIN work_type_dict t ON w.work_type_id = t.id "
    "LEFT JOIN affected_type_dict a ON w.affected_id = a.id "
    "LEFT JOIN source_type_dict m ON w.source_type_id = m.id "
    "LEFT JOIN work_record_status_dict d ON w.work_record_status_id = d.id "
    "LEFT JOIN employee_dict e ON w.employee_id = e.id "
)

SQL_INSERT_WORK_RECORD = (
    "INSERT INTO work_record (requirement_id, work_type_id, affected_id, source_type_id, "
    "work_record_status_id, work_content, employee_id, completion_time) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?);"
)
SQL_SELECT_WORK_RECORD_BY_ID = _SELECT_COLUMNS + "WHERE w.id = ?;"
SQL_UPDATE_WORK_RECORD = (
    "UPDATE work_record SET requirement_id=?, work_type_id=?, affected_id=?, "
    "source_type_id=?, work_record_status_id=?, work_content=?, employee_id=?, "
    "completion_time=? WHERE id=?;"
)
SQL_SELECT_WORK_RECORD_PAGED_BASE = _SELECT_COLUMNS
SQL_COUNT_WORK_RECORD_BASE = "SELECT COUNT(*) FROM work_record w "
SQL_SELECT_WORK_FILES_BY_IDS_BASE = (
    "SELECT wf.work_record_id, f.id, f.file_name, f.file_path, f.create_time "
    "FROM work_record_files wf JOIN file_record f ON wf.file_record_id = f.id "
    "WHERE wf.work_record_id IN "
)

_SCOPE_CONDITIONS = {
    "month": "strftime('%Y-%m', w.completion_time) = strftime('%Y-%m', 'now', 'localtime')",
    "year": "strftime('%Y', w.completion_time) = strftime('%Y', 'now', 'localtime')",
}

_FIELDS = (
    "id",
    "requirement_id",
    "requirement_title",
    "work_type_id",
    "work_type",
    "affected_id",
    "affected_name",
    "source_type_id",
    "source_type_name",
    "work_record_status_id",
    "status_name",
    "status_class",
    "work_content",
    "create_time",
    "completion_time",
    "employee_id",
    "employee_name",
    "department_id",
)
_INT_FIELDS = frozenset(
    {
        "id",
        "requirement_id",
        "work_type_id",
        "affected_id",
        "source_type_id",
        "work_record_status_id",
        "employee_id",
        "department_id",
    }
)

Filter = Union[str, int, None]


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _convert(name: str, value: Any) -> Any:
    if name in _INT_FIELDS:
        return int(value) if value is not None else 0
    return _text(value)


def _work_record(row: Sequence[Any]) -> WorkRecord:
    return WorkRecord(**{name: _convert(name, value) for name, value in zip(_FIELDS, tuple(row))})


def _record_params(record: WorkRecord) -> tuple[Any, ...]:
    return (
        record.requirement_id,
        record.work_type_id,
        record.affected_id,
        record.source_type_id,
        record.work_record_status_id,
        record.work_content,
        record.employee_id,
        record.completion_time,
    )


def _file_json(file_id: int, name: Any, path: Any, upload_time: Any) -> str:
    return json.dumps(
        {"id": file_id, "name": _text(name), "path": _text(path), "upload_time": _text(upload_time)},
        ensure_ascii=False,
        separators=(",", ":"),
        sort_keys=True,
    )


def _attach_files(conn: sqlite3.Connection, records: Iterable[WorkRecord], context: str) -> None:
    """Fill in file_info; a failing file lookup leaves the records without files."""
    by_id: dict[int, WorkRecord] = {}
    for record in records:
        by_id.setdefault(record.id, record)
    if not by_id:
        return
    placeholders = "(" + ",".join("?" for _ in by_id) + ");"
    with suppress(DaoError):
        rows = fetch_all(conn, SQL_SELECT_WORK_FILES_BY_IDS_BASE + placeholders, list(by_id), context)
        for work_id, file_id, name, path, upload_time in (tuple(row) for row in rows):
            record = by_id.get(int(work_id or 0))
            if record is not None:
                fid = int(file_id or 0)
                record.file_info[fid] = _file_json(fid, name, path, upload_time)


def _filter_value(value: Filter, name: str) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        error = DaoError(f"invalid {name}: {value!r}")
        log_exception(error, "queryWorkRecordsPaged")
        raise error from exc


def insert_work_record(conn: sqlite3.Connection, record: WorkRecord) -> int:
    """Store a new work record; return its row id."""
    cursor = execute(conn, SQL_INSERT_WORK_RECORD, _record_params(record), "insertWorkRecord")
    return int(cursor.lastrowid or 0)


def get_work_record(conn: sqlite3.Connection, work_record_id: int) -> WorkRecord:
    """The work record with this id and its attached files; raises NotFoundError if absent."""
    rows = fetch_all(conn, SQL_SELECT_WORK_RECORD_BY_ID, (work_record_id,), "getWorkRecordById")
    if not rows:
        raise NotFoundError(f"work record {work_record_id} not found")
    record = _work_record(rows[-1])
    record.id = int(work_record_id) if record.id == 0 else record.id
    _attach_files(conn, [record], "getWorkRecordById_files")
    return record


def update_work_record(conn: sqlite3.Connection, record: WorkRecord) -> None:
    """Overwrite the work record with the record's id."""
    execute(
        conn,
        SQL_UPDATE_WORK_RECORD,
        (*_record_params(record), record.id),
        "updateWorkRecord",
    )


def query_work_records_paged(
    conn: sqlite3.Connection,
    scope: str = "",
    page: int = 1,
    page_size: int = 10,
    status_id: Filter = "",
    affected_id: Filter = "",
    source_type_id: Filter = "",
    requirement_id: Filter = "",
    work_type_id: Filter = "",
) -> Page[WorkRecord]:
    """One page of work records, latest completion first, with their files.

    ``scope`` "month" or "year" keeps records completed in the current month or
    year; any other value keeps all. An empty or None filter matches everything.
    Pages are numbered from 1.
    """
    conditions: list[str] = []
    scope_condition = _SCOPE_CONDITIONS.get(scope)
    if scope_condition:
        conditions.append(scope_condition)
    params: list[int] = []
    for column, value, name in (
        ("w.work_record_status_id", status_id, "status_id"),
        ("w.affected_id", affected_id, "affected_id"),
        ("w.source_type_id", source_type_id, "source_type_id"),
        ("w.requirement_id", requirement_id, "requirement_id"),
        ("w.work_type_id", work_type_id, "work_type_id"),
    ):
        number = _filter_value(value, name)
        if number is not None:
            conditions.append(f"{column} = ?")
            params.append(number)
    where = " WHERE " + " AND ".join(conditions) if conditions else ""

    sql = (
        SQL_SELECT_WORK_RECORD_PAGED_BASE
        + where
        + " ORDER BY w.completion_time DESC LIMIT ? OFFSET ?;"
    )
    offset = (page - 1) * page_size
    rows = fetch_all(conn, sql, [*params, page_size, offset], "queryWorkRecordsPaged")
    records = [_work_record(row) for row in rows]

    count_rows = fetch_all(
        conn, SQL_COUNT_WORK_RECORD_BASE + where + ";", params, "queryWorkRecordsPaged_count"
    )
    total = int(count_rows[-1][0]) if count_rows else 0

    _attach_files(conn, records, "queryWorkRecordsPaged_files")
    return Page(items=records, total=total)