"""Access to the simple lookup tables: affected areas, sources, work types and the like."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any, Union

from work_record.db import execute, fetch_all
from work_record.models import (
    AffectedTypeDict,
    DepartmentDict,
    IssueProgressDict,
    RequirementStatusDict,
    SourceTypeDict,
    WorkRecordStatusDict,
    WorkTypeDict,
)

DictItem = Union[
    AffectedTypeDict,
    DepartmentDict,
    IssueProgressDict,
    RequirementStatusDict,
    SourceTypeDict,
    WorkRecordStatusDict,
    WorkTypeDict,
]


@dataclass(frozen=True)
class DictTable:
    """How one lookup table maps onto its model.

    ``select_fields`` names the model fields in the order the select statement
    returns them; ``columns`` names the fields bound by insert and update, in
    bind order (update binds the id after them).
    """

    name: str
    model: type
    select_fields: tuple[str, ...]
    columns: tuple[str, ...]
    select_sql: str
    insert_sql: str
    update_sql: str
    delete_sql: str

    @property
    def label(self) -> str:
        """The model name, used to tag log messages."""
        return self.model.__name__


TABLES: dict[str, DictTable] = {
    table.name: table
    for table in (
        DictTable(
            name="affected_type_dict",
            model=AffectedTypeDict,
            select_fields=("id", "affected", "comment"),
            columns=("affected", "comment"),
            select_sql="SELECT id, affected, comment FROM affected_type_dict ORDER BY id;",
            insert_sql="INSERT INTO affected_type_dict (affected, comment) VALUES (?, ?);",
            update_sql="UPDATE affected_type_dict SET affected = ?, comment = ? WHERE id = ?;",
            delete_sql="DELETE FROM affected_type_dict WHERE id = ?;",
        ),
        DictTable(
            name="source_type_dict",
            model=SourceTypeDict,
            select_fields=("id", "type", "comment"),
            columns=("type", "comment"),
            select_sql="SELECT id, type, comment FROM source_type_dict ORDER BY id;",
            insert_sql="INSERT INTO source_type_dict (type, comment) VALUES (?, ?);",
            update_sql="UPDATE source_type_dict SET type = ?, comment = ? WHERE id = ?;",
            delete_sql="DELETE FROM source_type_dict WHERE id = ?;",
        ),
        DictTable(
            name="work_type_dict",
            model=WorkTypeDict,
            select_fields=("id", "type", "comment"),
            columns=("type", "comment"),
            select_sql="SELECT id, type, comment FROM work_type_dict ORDER BY id;",
            insert_sql="INSERT INTO work_type_dict (type, comment) VALUES (?, ?);",
            update_sql="UPDATE work_type_dict SET type = ?, comment = ? WHERE id = ?;",
            delete_sql="DELETE FROM work_type_dict WHERE id = ?;",
        ),
        DictTable(
            name="work_record_status_dict",
            model=WorkRecordStatusDict,
            select_fields=("id", "status_name", "status_class"),
            columns=("status_name", "status_class"),
            select_sql=(
                "SELECT id, status_name, status_class FROM work_record_status_dict ORDER BY id;"
            ),
            insert_sql=(
                "INSERT INTO work_record_status_dict (status_name, status_class) VALUES (?, ?);"
            ),
            update_sql=(
                "UPDATE work_record_status_dict SET status_name = ?, status_class = ? WHERE id = ?;"
            ),
            delete_sql="DELETE FROM work_record_status_dict WHERE id = ?;",
        ),
        DictTable(
            name="department_dict",
            model=DepartmentDict,
            select_fields=("id", "name", "description", "create_time"),
            columns=("name", "description"),
            select_sql=(
                "SELECT id, name, description, create_time FROM department_dict ORDER BY id;"
            ),
            insert_sql="INSERT INTO department_dict (name, description) VALUES (?, ?);",
            update_sql="UPDATE department_dict SET name = ?, description = ? WHERE id = ?;",
            delete_sql="DELETE FROM department_dict WHERE id = ?;",
        ),
        DictTable(
            name="issue_progress_dict",
            model=IssueProgressDict,
            select_fields=("id", "progress", "progress_class", "comment"),
            columns=("progress", "progress_class", "comment"),
            select_sql=(
                "SELECT id, progress, progress_class, comment FROM issue_progress_dict ORDER BY id;"
            ),
            insert_sql=(
                "INSERT INTO issue_progress_dict (progress, progress_class, comment) "
                "VALUES (?, ?, ?);"
            ),
            update_sql=(
                "UPDATE issue_progress_dict SET progress = ?, progress_class = ?, comment = ? "
                "WHERE id = ?;"
            ),
            delete_sql="DELETE FROM issue_progress_dict WHERE id = ?;",
        ),
        DictTable(
            name="requirement_status_dict",
            model=RequirementStatusDict,
            select_fields=("id", "status", "comment", "requirement_status_class"),
            columns=("status", "comment", "requirement_status_class"),
            select_sql=(
                "SELECT id, status, comment, requirement_status_class "
                "FROM requirement_status_dict ORDER BY id;"
            ),
            insert_sql=(
                "INSERT INTO requirement_status_dict (status, comment, requirement_status_class) "
                "VALUES (?, ?, ?);"
            ),
            update_sql=(
                "UPDATE requirement_status_dict SET status = ?, comment = ?, "
                "requirement_status_class = ? WHERE id = ?;"
            ),
            delete_sql="DELETE FROM requirement_status_dict WHERE id = ?;",
        ),
    )
}


def get_table(name: str) -> DictTable:
    """Return the description of the lookup table with this name."""
    try:
        return TABLES[name]
    except KeyError:
        raise KeyError(f"unknown dictionary table: {name}") from None


def _column_value(field_name: str, value: Any) -> Any:
    if field_name == "id":
        return int(value) if value is not None else 0
    return "" if value is None else str(value)


class DictionaryDao:
    """Reads and writes the rows of one lookup table; failures raise DaoError."""

    def __init__(self, conn: sqlite3.Connection, table: DictTable | str) -> None:
        self.conn = conn
        self.table = get_table(table) if isinstance(table, str) else table

    def _check(self, item: Any) -> None:
        if not isinstance(item, self.table.model):
            raise TypeError(
                f"{self.table.name} expects {self.table.label}, got {type(item).__name__}"
            )

    def _values(self, item: Any) -> list[Any]:
        return [getattr(item, column) for column in self.table.columns]

    def query_all(self) -> list[Any]:
        """Every row of the table, ordered by id."""
        table = self.table
        rows = fetch_all(self.conn, table.select_sql, (), f"queryAll{table.label}")
        return [
            table.model(
                **{
                    name: _column_value(name, value)
                    for name, value in zip(table.select_fields, tuple(row))
                }
            )
            for row in rows
        ]

    def insert(self, item: Any) -> int:
        """Store a new row, set the item's id to the new row id and return it."""
        self._check(item)
        cursor = execute(
            self.conn, self.table.insert_sql, self._values(item), f"insert{self.table.label}"
        )
        item.id = int(cursor.lastrowid or 0)
        return item.id

    def update(self, item: Any) -> None:
        """Overwrite the row whose id matches the item's."""
        self._check(item)
        execute(
            self.conn,
            self.table.update_sql,
            [*self._values(item), item.id],
            f"update{self.table.label}",
        )

    def delete(self, item_id: int) -> None:
        """Remove the row with this id."""
        execute(self.conn, self.table.delete_sql, (item_id,), f"delete{self.table.label}")