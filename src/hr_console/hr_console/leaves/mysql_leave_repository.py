from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from ..core.constants import DONE
from ..core.enums import Decision, LeaveStatus, Role
from ..core.exceptions import ConcurrentModificationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime
from .model import ApprovalRecord, LeaveRequest
from .repository import LeaveRequestRepository

_REQUEST_COLUMNS = """
    request_id, requester_id, department_code, leave_type,
    start_date, end_date, reason, approval_chain,
    current_approver_role, status, version, created_at
"""


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    """``leave_requests`` + ``leave_approvals`` tables.

    An upsert rewrites the request row and its approval rows in one
    transaction, so the approvals never get ahead of the status columns.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_model(r: Dict[str, Any], approvals: List[ApprovalRecord]) -> LeaveRequest:
        current = r["current_approver_role"]
        return LeaveRequest(
            request_id=r["request_id"],
            requester_id=r["requester_id"],
            department_code=r.get("department_code"),
            leave_type=r["leave_type"],
            start_date=r["start_date"],
            end_date=r["end_date"],
            reason=r.get("reason") or "",
            approval_chain=tuple(Role(code) for code in json.loads(r["approval_chain"])),
            current_approver_role=DONE if current == DONE else Role(current),
            status=LeaveStatus(r["status"]),
            created_at=from_db_datetime(r["created_at"]),
            approvals=tuple(approvals),
            version=int(r["version"]),
        )

    @staticmethod
    def _to_approval(r: Dict[str, Any]) -> ApprovalRecord:
        return ApprovalRecord(
            role=Role(r["role_code"]),
            approver_id=r["approver_id"],
            decided_at=from_db_datetime(r["decided_at"]),
            decision=Decision(r["decision"]),
            note=r.get("note"),
        )

    def get_all(self) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_REQUEST_COLUMNS} FROM leave_requests ORDER BY seq")
            rows = fetchall(cur)
            cur.execute(
                """
                SELECT request_id, step_no, role_code, approver_id, decision, decided_at, note
                FROM leave_approvals
                ORDER BY request_id, step_no
                """
            )
            approval_rows = fetchall(cur)

        by_request: Dict[str, List[ApprovalRecord]] = {}
        for a in approval_rows:
            by_request.setdefault(a["request_id"], []).append(self._to_approval(a))
        return [self._to_model(r, by_request.get(r["request_id"], [])) for r in rows]

    def get_by_id(self, request_id: str) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_REQUEST_COLUMNS} FROM leave_requests WHERE request_id=%s", (request_id,))
            r = fetchone(cur)
            if not r:
                return None
            cur.execute(
                """
                SELECT request_id, step_no, role_code, approver_id, decision, decided_at, note
                FROM leave_approvals
                WHERE request_id=%s
                ORDER BY step_no
                """,
                (request_id,),
            )
            approvals = [self._to_approval(a) for a in fetchall(cur)]
            return self._to_model(r, approvals)

    def upsert(self, request: LeaveRequest, *, expected_version: Optional[int] = None) -> None:
        values = (
            request.requester_id,
            request.department_code,
            request.leave_type,
            request.start_date,
            request.end_date,
            request.reason,
            json.dumps([role.value for role in request.approval_chain]),
            request.current_role_code,
            request.status.value,
            int(request.version),
            to_db_datetime(request.created_at),
        )

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT version FROM leave_requests WHERE request_id=%s FOR UPDATE", (request.request_id,))
            stored = fetchone(cur)
            if expected_version is not None:
                actual = int(stored["version"]) if stored else None
                if actual != expected_version:
                    raise ConcurrentModificationError(request.request_id, expected_version, actual)

            if stored is None:
                cur.execute(
                    """
                    INSERT INTO leave_requests(
                        requester_id, department_code, leave_type, start_date, end_date, reason,
                        approval_chain, current_approver_role, status, version, created_at, request_id
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    values + (request.request_id,),
                )
            else:
                cur.execute(
                    """
                    UPDATE leave_requests
                    SET requester_id=%s, department_code=%s, leave_type=%s, start_date=%s, end_date=%s,
                        reason=%s, approval_chain=%s, current_approver_role=%s, status=%s,
                        version=%s, created_at=%s
                    WHERE request_id=%s
                    """,
                    values + (request.request_id,),
                )

            cur.execute("DELETE FROM leave_approvals WHERE request_id=%s", (request.request_id,))
            if request.approvals:
                cur.executemany(
                    """
                    INSERT INTO leave_approvals(request_id, step_no, role_code, approver_id, decision, decided_at, note)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    [
                        (
                            request.request_id,
                            step_no,
                            a.role.value,
                            a.approver_id,
                            a.decision.value,
                            to_db_datetime(a.decided_at),
                            a.note,
                        )
                        for step_no, a in enumerate(request.approvals)
                    ],
                )

    def delete_by_id(self, request_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_approvals WHERE request_id=%s", (request_id,))
            cur.execute("DELETE FROM leave_requests WHERE request_id=%s", (request_id,))
            return cur.rowcount > 0
