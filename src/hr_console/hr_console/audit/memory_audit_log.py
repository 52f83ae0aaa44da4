from __future__ import annotations

import threading
import uuid
from typing import Callable, List, Sequence

from ..common.datetime_utils import now_utc
from .model import AuditEntry
from .repository import AuditLogSink


class InMemoryAuditLog(AuditLogSink):
    def __init__(self, *, clock: Callable = now_utc):
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: List[AuditEntry] = []

    def append(self, actor_id: str, action: str, details: str) -> None:
        entry = AuditEntry(
            entry_id=uuid.uuid4().hex,
            timestamp=self._clock(),
            user_id=str(actor_id),
            action=str(action),
            details=details,
        )
        with self._lock:
            self._entries.insert(0, entry)

    def list_recent(self, *, limit: int = 100) -> Sequence[AuditEntry]:
        with self._lock:
            return list(self._entries[: int(limit)])
