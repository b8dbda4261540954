"""Access to the employee table, resolving departments by name."""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from typing import Any

from work_record.db import execute, fetch_all
from work_record.models import EmployeeDict

SQL_SELECT_ALL_EMPLOYEES = (
    "SELECT e.id, e.name, e.employee_number, d.name as department_name "
    "FROM employee_dict e LEFT JOIN department_dict d ON e.department_id = d.id "
    "ORDER BY e.id;"
)
SQL_SELECT_DEPARTMENT_ID_BY_NAME = "SELECT id FROM department_dict WHERE name = ?;"
SQL_INSERT_EMPLOYEE = (
    "INSERT INTO employee_dict (name, employee_number, department_id) VALUES (?, ?, ?);"
)
SQL_UPDATE_EMPLOYEE = (
    "UPDATE employee_dict SET name = ?, employee_number = ?, department_id = ? WHERE id = ?;"
)
SQL_DELETE_EMPLOYEE = "DELETE FROM employee_dict WHERE id = ?;"
SQL_SELECT_EMPLOYEES_BY_DEPARTMENT = (
    "SELECT e.id, e.name, e.employee_number, d.name as department_name "
    "FROM employee_dict e LEFT JOIN department_dict d ON e.department_id = d.id "
    "WHERE e.department_id = ? ORDER BY e.id;"
)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _employee(row: Sequence[Any]) -> EmployeeDict:
    employee_id, name, number, department_name = tuple(row)
    return EmployeeDict(
        id=int(employee_id or 0),
        name=_text(name),
        employee_number=_text(number),
        department_name=_text(department_name),
    )


def _department_id(conn: sqlite3.Connection, name: str, context: str) -> int:
    """The id of the department with this name, or 0 when there is none."""
    if not name:
        return 0
    rows = fetch_all(conn, SQL_SELECT_DEPARTMENT_ID_BY_NAME, (name,), context)
    return int(rows[-1][0] or 0) if rows else 0


def query_all_employees(conn: sqlite3.Connection) -> list[EmployeeDict]:
    """Every employee with the name of their department, ordered by id."""
    rows = fetch_all(conn, SQL_SELECT_ALL_EMPLOYEES, (), "queryAllEmployeeDict")
    return [_employee(row) for row in rows]


def insert_employee(conn: sqlite3.Connection, item: EmployeeDict) -> int:
    """Store a new employee, placing them in the department named by department_name.

    Sets the item's id to the new row id and returns it.
    """
    department_id = _department_id(conn, item.department_name, "insertEmployeeDict_dept")
    cursor = execute(
        conn,
        SQL_INSERT_EMPLOYEE,
        (item.name, item.employee_number, department_id),
        "insertEmployeeDict",
    )
    item.id = int(cursor.lastrowid or 0)
    return item.id


def update_employee(conn: sqlite3.Connection, item: EmployeeDict) -> None:
    """Overwrite the employee with the item's id, resolving department_name again."""
    department_id = _department_id(conn, item.department_name, "updateEmployeeDict_dept")
    execute(
        conn,
        SQL_UPDATE_EMPLOYEE,
        (item.name, item.employee_number, department_id, item.id),
        "updateEmployeeDict",
    )


def delete_employee(conn: sqlite3.Connection, employee_id: int) -> None:
    """Remove the employee with this id."""
    execute(conn, SQL_DELETE_EMPLOYEE, (employee_id,), "deleteEmployeeDict")


def query_employees_by_department(
    conn: sqlite3.Connection, department_id: int
) -> list[EmployeeDict]:
    """The employees of one department, ordered by id."""
    rows = fetch_all(
        conn, SQL_SELECT_EMPLOYEES_BY_DEPARTMENT, (department_id,), "queryEmployeeByDepartment"
    )
    return [_employee(row) for row in rows]