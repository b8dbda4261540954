import pytest

from work_record.db import DaoError, open_db
from work_record.issues import (
    delete_issue,
    insert_issue,
    query_all_issues,
    query_issues_paged,
    update_issue,
)
from work_record.models import IssueRecord

SCHEMA = """
CREATE TABLE issue_progress_dict (
    id INTEGER PRIMARY KEY AUTOINCREMENT, progress TEXT, progress_class TEXT, comment TEXT
);
CREATE TABLE affected_type_dict (
    id INTEGER PRIMARY KEY AUTOINCREMENT, affected TEXT, comment TEXT
);
CREATE TABLE source_type_dict (
    id INTEGER PRIMARY KEY AUTOINCREMENT, type TEXT, comment TEXT
);
CREATE TABLE employee_dict (
    id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, employee_number TEXT, department_id INTEGER
);
CREATE TABLE issue_record (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    issue_title TEXT,
    employee_id INTEGER,
    description TEXT,
    progress_id INTEGER,
    responsible_person TEXT,
    affected_id INTEGER,
    source_type_id INTEGER,
    reported_by TEXT,
    create_time TEXT DEFAULT CURRENT_TIMESTAMP,
    update_time TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


@pytest.fixture
def conn():
    connection = open_db(":memory:")
    connection.executescript(SCHEMA)
    connection.execute(
        "INSERT INTO issue_progress_dict (progress, progress_class, comment) "
        "VALUES ('open', 'badge-open', '')"
    )
    connection.execute("INSERT INTO affected_type_dict (affected, comment) VALUES ('web', '')")
    connection.execute("INSERT INTO affected_type_dict (affected, comment) VALUES ('app', '')")
    connection.execute("INSERT INTO source_type_dict (type, comment) VALUES ('email', '')")
    connection.execute("INSERT INTO source_type_dict (type, comment) VALUES ('phone', '')")
    connection.execute(
        "INSERT INTO employee_dict (name, employee_number, department_id) "
        "VALUES ('Eve', 'E1', 3)"
    )
    yield connection
    connection.close()


def make_issue(title, source=1, affected=1, employee=1):
    return IssueRecord(
        issue_title=title,
        reported_by="reporter",
        description="desc",
        progress_id=1,
        responsible_person="owner",
        affected_id=affected,
        source_type_id=source,
        employee_id=employee,
    )


def test_insert_and_query_joins_names(conn):
    new_id = insert_issue(conn, make_issue("broken"))
    [issue] = query_all_issues(conn)
    assert issue.id == new_id
    assert (issue.issue_title, issue.reported_by, issue.responsible_person) == (
        "broken",
        "reporter",
        "owner",
    )
    assert (issue.progress_name, issue.progress_class) == ("open", "badge-open")
    assert (issue.affected_name, issue.source_type_name) == ("web", "email")
    assert (issue.employee_name, issue.department_id) == ("Eve", 3)
    assert issue.create_time


def test_missing_employee_gives_empty_name(conn):
    insert_issue(conn, make_issue("orphan", employee=99))
    [issue] = query_all_issues(conn)
    assert issue.employee_name == ""
    assert issue.department_id == 0


def test_query_all_newest_first(conn):
    ids = [insert_issue(conn, make_issue(t)) for t in ("a", "b", "c")]
    assert [i.id for i in query_all_issues(conn)] == sorted(ids, reverse=True)


def test_update_and_delete(conn):
    new_id = insert_issue(conn, make_issue("old"))
    changed = make_issue("new", source=2, affected=2)
    changed.id = new_id
    update_issue(conn, changed)
    [issue] = query_all_issues(conn)
    assert (issue.issue_title, issue.source_type_name, issue.affected_name) == (
        "new",
        "phone",
        "app",
    )
    delete_issue(conn, new_id)
    assert query_all_issues(conn) == []


def test_paging(conn):
    ids = [insert_issue(conn, make_issue(str(n))) for n in range(5)]
    newest = sorted(ids, reverse=True)
    first = query_issues_paged(conn, 1, 2)
    assert first.total == len(ids)
    assert [i.id for i in first.items] == newest[:2]
    last = query_issues_paged(conn, 3, 2)
    assert [i.id for i in last.items] == newest[4:]


def test_filters(conn):
    email = insert_issue(conn, make_issue("e", source=1, affected=1))
    phone_web = insert_issue(conn, make_issue("p1", source=2, affected=1))
    phone_app = insert_issue(conn, make_issue("p2", source=2, affected=2))
    by_source = query_issues_paged(conn, 1, 10, source_type_id="2")
    assert by_source.total == 2
    assert [i.id for i in by_source.items] == [phone_app, phone_web]
    both = query_issues_paged(conn, 1, 10, source_type_id=2, affected_id="1")
    assert [i.id for i in both.items] == [phone_web]
    unfiltered = query_issues_paged(conn, 1, 10, source_type_id="", affected_id=None)
    assert {i.id for i in unfiltered.items} == {email, phone_web, phone_app}


def test_invalid_filter_raises(conn):
    with pytest.raises(DaoError):
        query_issues_paged(conn, 1, 10, source_type_id="1 OR 1=1")


def test_missing_table_raises():
    connection = open_db(":memory:")
    with pytest.raises(DaoError):
        query_all_issues(connection)
    connection.close()