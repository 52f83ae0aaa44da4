from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AuditEntry:
    entry_id: str
    timestamp: datetime
    user_id: str
    action: str
    details: str
