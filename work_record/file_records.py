"""Access to uploaded-file records and their links to work records."""

from __future__ import annotations

import sqlite3

from work_record.db import NotFoundError, execute, fetch_all
from work_record.models import FileRecord

SQL_INSERT_FILE_RECORD = "INSERT INTO file_record (file_name, file_path) VALUES (?, ?);"
SQL_SELECT_FILE_RECORD_BY_ID = (
    "SELECT id, file_name, file_path, create_time FROM file_record WHERE id = ?;"
)
SQL_DELETE_FILE_RECORD = "DELETE FROM file_record WHERE id = ?;"
SQL_INSERT_WORK_FILE_REL = (
    "INSERT INTO work_record_files (work_record_id, file_record_id) VALUES (?, ?);"
)
SQL_DELETE_WORK_FILE_REL = "DELETE FROM work_record_files WHERE work_record_id = ?;"


def _text(value: object) -> str:
    return "" if value is None else str(value)


def insert_file_record(conn: sqlite3.Connection, record: FileRecord) -> int:
    """Store a file's name and path; return the new row id."""
    cursor = execute(
        conn, SQL_INSERT_FILE_RECORD, (record.file_name, record.file_path), "insertFileRecord"
    )
    return int(cursor.lastrowid or 0)


def get_file_record(conn: sqlite3.Connection, file_id: int) -> FileRecord:
    """The file record with this id; raises NotFoundError if there is none."""
    rows = fetch_all(conn, SQL_SELECT_FILE_RECORD_BY_ID, (file_id,), "getFileRecordById")
    if not rows:
        raise NotFoundError(f"file record {file_id} not found")
    record_id, name, path, create_time = tuple(rows[-1])
    return FileRecord(
        id=int(record_id or 0),
        file_name=_text(name),
        file_path=_text(path),
        create_time=_text(create_time),
    )


def delete_file_record(conn: sqlite3.Connection, file_id: int) -> None:
    """Remove the file record with this id."""
    execute(conn, SQL_DELETE_FILE_RECORD, (file_id,), "deleteFileRecord")


def insert_work_file_rel(conn: sqlite3.Connection, work_id: int, file_id: int) -> None:
    """Attach a file to a work record."""
    execute(conn, SQL_INSERT_WORK_FILE_REL, (work_id, file_id), "insertWorkFileRel")


def delete_work_file_rels(conn: sqlite3.Connection, work_id: int) -> None:
    """Detach every file from a work record."""
    execute(conn, SQL_DELETE_WORK_FILE_REL, (work_id,), "deleteWorkFileRelByWork")