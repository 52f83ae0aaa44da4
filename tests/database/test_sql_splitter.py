from __future__ import annotations

from pathlib import Path

from src.hr_console.hr_console.database.bootstrap import iter_sql_statements

REPO_ROOT = Path(__file__).resolve().parents[2]


def test_splits_on_semicolons_outside_quotes():
    sql = """
    -- comment; with a semicolon
    INSERT INTO t(a) VALUES('x;y');
    INSERT INTO t(a) VALUES("it's; fine");
    SELECT 1
    """
    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t(a) VALUES('x;y')",
        "INSERT INTO t(a) VALUES(\"it's; fine\")",
        "SELECT 1",
    ]


def test_doubled_quotes_stay_inside_literal():
    stmts = list(iter_sql_statements("INSERT INTO t VALUES('doctor''s; note'); SELECT 2;"))
    assert stmts == ["INSERT INTO t VALUES('doctor''s; note')", "SELECT 2"]


def test_schema_file_defines_every_table():
    sql = (REPO_ROOT / "database" / "schema.sql").read_text(encoding="utf-8")
    creates = [s for s in iter_sql_statements(sql) if s.upper().startswith("CREATE TABLE")]
    names = {s.split()[5] for s in creates}
    assert names == {
        "departments",
        "department_approvers",
        "users",
        "user_roles",
        "leave_requests",
        "leave_approvals",
        "audit_logs",
    }
