from __future__ import annotations

import threading
from typing import Dict, Optional, Sequence

from ..core.exceptions import ConcurrentModificationError
from .model import LeaveRequest
from .repository import LeaveRequestRepository


def check_version(request_id: str, stored: Optional[LeaveRequest], expected_version: Optional[int]) -> None:
    if expected_version is None:
        return
    actual = stored.version if stored is not None else None
    if actual != expected_version:
        raise ConcurrentModificationError(request_id, expected_version, actual)


class InMemoryLeaveRequestRepository(LeaveRequestRepository):
    """Process-local store; dict order is insertion order."""

    def __init__(self, requests: Sequence[LeaveRequest] = ()):
        self._lock = threading.Lock()
        self._items: Dict[str, LeaveRequest] = {r.request_id: r for r in requests}

    def get_all(self) -> Sequence[LeaveRequest]:
        with self._lock:
            return list(self._items.values())

    def get_by_id(self, request_id: str) -> Optional[LeaveRequest]:
        with self._lock:
            return self._items.get(request_id)

    def upsert(self, request: LeaveRequest, *, expected_version: Optional[int] = None) -> None:
        with self._lock:
            check_version(request.request_id, self._items.get(request.request_id), expected_version)
            self._items[request.request_id] = request

    def delete_by_id(self, request_id: str) -> bool:
        with self._lock:
            return self._items.pop(request_id, None) is not None
