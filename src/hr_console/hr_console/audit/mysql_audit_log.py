from __future__ import annotations

import uuid
from typing import Callable, Sequence

from ..common.datetime_utils import now_utc
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, from_db_datetime, to_db_datetime
from .model import AuditEntry
from .repository import AuditLogSink


class MySQLAuditLog(AuditLogSink):
    def __init__(self, conn_factory: DatabaseConnection, *, clock: Callable = now_utc):
        self._conn_factory = conn_factory
        self._clock = clock

    def append(self, actor_id: str, action: str, details: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs(entry_id, created_at, user_id, action, details)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (uuid.uuid4().hex, to_db_datetime(self._clock()), str(actor_id), str(action), details),
            )

    def list_recent(self, *, limit: int = 100) -> Sequence[AuditEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT entry_id, created_at, user_id, action, details
                FROM audit_logs
                ORDER BY created_at DESC, seq DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                AuditEntry(
                    entry_id=r["entry_id"],
                    timestamp=from_db_datetime(r["created_at"]),
                    user_id=r["user_id"],
                    action=r["action"],
                    details=r.get("details") or "",
                )
                for r in fetchall(cur)
            ]
