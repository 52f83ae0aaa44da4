from __future__ import annotations

from typing import Protocol, Sequence

from .model import AuditEntry


class AuditLogSink(Protocol):
    def append(self, actor_id: str, action: str, details: str) -> None:
        raise NotImplementedError

    def list_recent(self, *, limit: int = 100) -> Sequence[AuditEntry]:
        """Newest first."""

        raise NotImplementedError
