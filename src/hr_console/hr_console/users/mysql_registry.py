from __future__ import annotations

from typing import FrozenSet, Optional, Sequence, Tuple

from ..core.enums import Role
from ..core.exceptions import UnknownDepartmentError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .department_model import Department
from .repository import ApprovalRegistry


class MySQLApprovalRegistry(ApprovalRegistry):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def chain_for(self, department_code: str) -> Tuple[Role, ...]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT dept_code FROM departments WHERE dept_code=%s", (department_code,))
            if not fetchone(cur):
                raise UnknownDepartmentError(department_code)
            cur.execute(
                """
                SELECT role_code
                FROM department_approvers
                WHERE dept_code=%s
                ORDER BY step_no
                """,
                (department_code,),
            )
            return tuple(Role(r["role_code"]) for r in fetchall(cur))

    def roles_of(self, user_id: str) -> FrozenSet[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role_code FROM user_roles WHERE user_id=%s", (str(user_id),))
            return frozenset(Role(r["role_code"]) for r in fetchall(cur))

    def department_of(self, user_id: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT dept_code FROM users WHERE user_id=%s", (str(user_id),))
            r = fetchone(cur)
            return r.get("dept_code") if r else None

    def display_name_of(self, user_id: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT full_name FROM users WHERE user_id=%s", (str(user_id),))
            r = fetchone(cur)
            return r["full_name"] if r else None

    def list_departments(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT d.dept_code, d.dept_name, a.role_code
                FROM departments d
                LEFT JOIN department_approvers a ON a.dept_code = d.dept_code
                ORDER BY d.dept_code, a.step_no
                """
            )
            rows = fetchall(cur)

        names: dict[str, str] = {}
        chains: dict[str, list[Role]] = {}
        for r in rows:
            code = r["dept_code"]
            names[code] = r["dept_name"]
            chains.setdefault(code, [])
            if r.get("role_code"):
                chains[code].append(Role(r["role_code"]))
        return [Department(code=code, name=names[code], approvers=tuple(chains[code])) for code in names]
