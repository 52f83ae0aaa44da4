from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..core.enums import LeaveStatus
from ..core.exceptions import LeaveRequestNotFoundError
from ..users.authorization import authorize
from ..users.repository import ApprovalRegistry
from .model import LeaveRequest, StepView
from .repository import LeaveRequestRepository


@dataclass(frozen=True)
class LeaveSearchFilter:
    """Absent fields match everything."""

    text: Optional[str] = None
    leave_type: Optional[str] = None
    status: Optional[LeaveStatus] = None


class LeaveQueryService:
    """Read-only projections over the leave store."""

    def __init__(self, requests: LeaveRequestRepository, registry: ApprovalRegistry):
        self._requests = requests
        self._registry = registry

    def get(self, request_id: str) -> LeaveRequest:
        req = self._requests.get_by_id(request_id)
        if req is None:
            raise LeaveRequestNotFoundError(request_id)
        return req

    def timeline(self, request_id: str) -> List[StepView]:
        return self.get(request_id).timeline()

    def pending_for(self, user_id: str) -> List[LeaveRequest]:
        """Requests waiting on a step this user may decide, oldest first."""
        roles = self._registry.roles_of(user_id)
        pending = [
            r
            for r in self._requests.get_all()
            if r.status == LeaveStatus.PENDING and authorize(roles, r.current_approver_role)
        ]
        # sorted() is stable: equal timestamps keep store order.
        return sorted(pending, key=lambda r: r.created_at)

    def history_for(self, user_id: str) -> List[LeaveRequest]:
        mine = [r for r in self._requests.get_all() if r.requester_id == str(user_id)]
        return sorted(mine, key=lambda r: r.start_date, reverse=True)

    def search_all(self, search: Optional[LeaveSearchFilter] = None) -> List[LeaveRequest]:
        search = search or LeaveSearchFilter()
        needle = (search.text or "").strip().lower()

        out: List[LeaveRequest] = []
        for r in self._requests.get_all():
            if search.leave_type and r.leave_type != search.leave_type:
                continue
            if search.status is not None and r.status != search.status:
                continue
            if needle and not self._matches_text(r, needle):
                continue
            out.append(r)
        return sorted(out, key=lambda r: r.start_date, reverse=True)

    def _matches_text(self, req: LeaveRequest, needle: str) -> bool:
        name = self._registry.display_name_of(req.requester_id) or req.requester_id
        return needle in name.lower() or needle in (req.reason or "").lower()

    def count_by_status(self, requests: Sequence[LeaveRequest]) -> dict:
        counts = {status.value: 0 for status in LeaveStatus}
        for r in requests:
            counts[r.status.value] += 1
        return counts
