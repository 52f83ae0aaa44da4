from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Union

import mysql.connector

from ..core.constants import DEFAULT_DEPARTMENTS, DEMO_USERS
from .connection import DBConfig


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside quotes. Line comments ('-- ') are dropped."""
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]
    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: Union[str, Path]) -> None:
    target = DBConfig.from_dict(db_config)
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: Union[str, Path]) -> None:
    ensure_database_exists(db_config)
    _run_script(db_config, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: Union[str, Path]) -> None:
    _run_script(db_config, seed_path)


def ensure_default_registry(db_config: dict, *, with_demo_users: bool = True) -> None:
    """Upsert the default department chains (and demo directory entries)."""
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        for code, (name, chain) in DEFAULT_DEPARTMENTS.items():
            cur.execute(
                "INSERT INTO departments(dept_code, dept_name) VALUES(%s,%s) ON DUPLICATE KEY UPDATE dept_name=VALUES(dept_name)",
                (code, name),
            )
            cur.execute("DELETE FROM department_approvers WHERE dept_code=%s", (code,))
            cur.executemany(
                "INSERT INTO department_approvers(dept_code, step_no, role_code) VALUES(%s,%s,%s)",
                [(code, step_no, role.value) for step_no, role in enumerate(chain)],
            )

        if with_demo_users:
            for user_id, username, full_name, roles, dept, position in DEMO_USERS:
                cur.execute(
                    """
                    INSERT INTO users(user_id, username, full_name, dept_code, position)
                    VALUES(%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE full_name=VALUES(full_name), dept_code=VALUES(dept_code), position=VALUES(position)
                    """,
                    (user_id, username, full_name, dept, position),
                )
                cur.execute("DELETE FROM user_roles WHERE user_id=%s", (user_id,))
                cur.executemany(
                    "INSERT INTO user_roles(user_id, role_code) VALUES(%s,%s)",
                    [(user_id, role.value) for role in roles],
                )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
