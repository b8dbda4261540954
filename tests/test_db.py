import logging

import pytest

from work_record.db import (
    DaoError,
    NotFoundError,
    Page,
    execute,
    fetch_all,
    open_db,
    transaction,
)


@pytest.fixture
def conn():
    connection = open_db(":memory:")
    execute(connection, "CREATE TABLE item (id INTEGER PRIMARY KEY, name TEXT)")
    yield connection
    connection.close()


def _count(conn):
    return fetch_all(conn, "SELECT COUNT(*) FROM item")[0][0]


def test_foreign_keys_enabled(conn):
    rows = fetch_all(conn, "PRAGMA foreign_keys")
    assert [tuple(r) for r in rows] == [(1,)]


def test_foreign_key_violation_raises(conn):
    execute(conn, "CREATE TABLE child (id INTEGER PRIMARY KEY, item_id INTEGER REFERENCES item(id))")
    with pytest.raises(DaoError):
        execute(conn, "INSERT INTO child (item_id) VALUES (?)", (42,), "child")


def test_execute_returns_lastrowid(conn):
    first = execute(conn, "INSERT INTO item (name) VALUES (?)", ("a",))
    second = execute(conn, "INSERT INTO item (name) VALUES (?)", ("b",))
    assert second.lastrowid == first.lastrowid + 1
    rows = fetch_all(conn, "SELECT name FROM item WHERE id = ?", (second.lastrowid,))
    assert rows[0]["name"] == "b"


def test_fetch_all_bad_sql_raises_and_logs(conn, caplog):
    with caplog.at_level(logging.ERROR):
        with pytest.raises(DaoError) as info:
            fetch_all(conn, "SELECT * FROM missing_table", (), "lookup")
    assert "missing_table" in str(info.value)
    assert any(m.startswith("lookup: Exception:") for m in caplog.messages)


def test_transaction_commits(conn):
    with transaction(conn):
        execute(conn, "INSERT INTO item (name) VALUES (?)", ("x",))
        execute(conn, "INSERT INTO item (name) VALUES (?)", ("y",))
    assert _count(conn) == 2
    assert not conn.in_transaction


def test_transaction_rolls_back_on_error(conn):
    with pytest.raises(RuntimeError):
        with transaction(conn):
            execute(conn, "INSERT INTO item (name) VALUES (?)", ("x",))
            raise RuntimeError("abort")
    assert _count(conn) == 0
    assert not conn.in_transaction


def test_nested_transaction_fails(conn):
    with pytest.raises(DaoError):
        with transaction(conn):
            with transaction(conn):
                pass
    assert not conn.in_transaction


def test_open_db_in_missing_directory(tmp_path):
    with pytest.raises(DaoError):
        open_db(tmp_path / "missing" / "nested" / "x.db")


def test_not_found_is_dao_and_lookup_error():
    err = NotFoundError("gone")
    assert isinstance(err, LookupError)
    assert isinstance(err, DaoError)
    assert "gone" in str(err)


def test_page_defaults_are_independent():
    a = Page()
    b = Page()
    a.items.append(1)
    assert b.items == []
    assert Page(items=["r"], total=7).total == 7