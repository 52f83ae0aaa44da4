from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import LeaveRequest


class LeaveRequestRepository(Protocol):
    """Persistence port for leave requests.

    Adapters own every storage concern, including field-name translation
    (snake_case columns, camelCase JSON documents).
    """

    def get_all(self) -> Sequence[LeaveRequest]:
        """All requests in store iteration order (insertion order)."""

        raise NotImplementedError

    def get_by_id(self, request_id: str) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def upsert(self, request: LeaveRequest, *, expected_version: Optional[int] = None) -> None:
        """Insert if the id is unseen, else replace the stored request.

        When ``expected_version`` is given and the stored version differs,
        raise ``ConcurrentModificationError`` and write nothing.
        """

        raise NotImplementedError

    def delete_by_id(self, request_id: str) -> bool:
        raise NotImplementedError
