from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

import pytest

from src.hr_console.hr_console.core.constants import DONE
from src.hr_console.hr_console.core.enums import Decision, LeaveStatus, Role, StepState
from src.hr_console.hr_console.core.exceptions import LeaveRequestNotFoundError
from src.hr_console.hr_console.leaves.memory_repository import InMemoryLeaveRequestRepository
from src.hr_console.hr_console.leaves.model import ApprovalRecord, LeaveRequest
from src.hr_console.hr_console.leaves.query_service import LeaveQueryService, LeaveSearchFilter

T0 = datetime(2026, 1, 10, 9, 0, tzinfo=timezone.utc)


class FakeDirectory:
    def __init__(self):
        self._roles = {
            "somsak": {Role.EMPLOYEE},
            "mana": {Role.EMPLOYEE, Role.DM},
            "om-user": {Role.OM},
            "root": {Role.SUPERUSER},
        }
        self._names = {"somsak": "Somsak Khayan", "mana": "Mana Huana"}

    def chain_for(self, department_code):
        return (Role.OM, Role.DM, Role.CEO)

    def roles_of(self, user_id):
        return frozenset(self._roles.get(user_id, set()))

    def department_of(self, user_id):
        return "ACC"

    def display_name_of(self, user_id):
        return self._names.get(user_id)


def leave(request_id, requester, *, start, current=Role.OM, status=LeaveStatus.PENDING, created_offset=0, leave_type="Vacation", reason=""):
    return LeaveRequest(
        request_id=request_id,
        requester_id=requester,
        leave_type=leave_type,
        start_date=start,
        end_date=start + timedelta(days=1),
        reason=reason,
        approval_chain=(Role.OM, Role.DM, Role.CEO),
        current_approver_role=current,
        status=status,
        created_at=T0 + timedelta(minutes=created_offset),
    )


def make_service(requests):
    return LeaveQueryService(InMemoryLeaveRequestRepository(requests), FakeDirectory())


def test_pending_for_matches_current_role_only():
    svc = make_service(
        [
            leave("a", "somsak", start=date(2026, 2, 1), current=Role.OM),
            leave("b", "somsak", start=date(2026, 2, 5), current=Role.DM),
            leave("c", "mana", start=date(2026, 2, 9), current=DONE, status=LeaveStatus.APPROVED),
        ]
    )

    assert [r.request_id for r in svc.pending_for("om-user")] == ["a"]
    assert [r.request_id for r in svc.pending_for("mana")] == ["b"]
    assert svc.pending_for("somsak") == []


def test_pending_for_superuser_returns_every_pending_request():
    svc = make_service(
        [
            leave("a", "somsak", start=date(2026, 2, 1), current=Role.OM),
            leave("b", "somsak", start=date(2026, 2, 5), current=Role.CEO),
            leave("c", "mana", start=date(2026, 2, 9), current=DONE, status=LeaveStatus.REJECTED),
            leave("d", "mana", start=date(2026, 2, 9), current=Role.DM),
        ]
    )

    assert {r.request_id for r in svc.pending_for("root")} == {"a", "b", "d"}


def test_pending_for_orders_oldest_first_with_store_order_tiebreak():
    svc = make_service(
        [
            leave("late", "somsak", start=date(2026, 2, 1), created_offset=30),
            leave("tie-1", "somsak", start=date(2026, 2, 2), created_offset=10),
            leave("early", "mana", start=date(2026, 2, 3), created_offset=0),
            leave("tie-2", "mana", start=date(2026, 2, 4), created_offset=10),
        ]
    )

    assert [r.request_id for r in svc.pending_for("om-user")] == ["early", "tie-1", "tie-2", "late"]


def test_history_for_sorted_by_start_date_desc():
    svc = make_service(
        [
            leave("old", "somsak", start=date(2025, 12, 1)),
            leave("other", "mana", start=date(2026, 3, 1)),
            leave("new", "somsak", start=date(2026, 2, 1), status=LeaveStatus.REJECTED, current=DONE),
            leave("mid", "somsak", start=date(2026, 1, 1)),
        ]
    )

    assert [r.request_id for r in svc.history_for("somsak")] == ["new", "mid", "old"]
    assert svc.history_for("nobody") == []


@pytest.fixture
def history_service():
    return make_service(
        [
            leave("a", "somsak", start=date(2026, 1, 5), leave_type="Sick Leave", reason="Flu"),
            leave("b", "mana", start=date(2026, 3, 1), leave_type="Vacation", reason="Beach trip"),
            leave("c", "somsak", start=date(2026, 2, 1), leave_type="Vacation", reason="Wedding", status=LeaveStatus.APPROVED, current=DONE),
            leave("d", "ghost", start=date(2026, 4, 1), leave_type="Personal Leave", reason="Moving house"),
        ]
    )


def test_search_all_without_filters_returns_everything_by_start_desc(history_service):
    assert [r.request_id for r in history_service.search_all()] == ["d", "b", "c", "a"]
    assert [r.request_id for r in history_service.search_all(LeaveSearchFilter())] == ["d", "b", "c", "a"]


def test_search_all_text_matches_name_or_reason_case_insensitively(history_service):
    assert [r.request_id for r in history_service.search_all(LeaveSearchFilter(text="SOMSAK"))] == ["c", "a"]
    assert [r.request_id for r in history_service.search_all(LeaveSearchFilter(text="beach"))] == ["b"]
    # requester without a directory entry is searched by id
    assert [r.request_id for r in history_service.search_all(LeaveSearchFilter(text="ghost"))] == ["d"]


def test_search_all_combines_filters(history_service):
    found = history_service.search_all(LeaveSearchFilter(text="somsak", leave_type="Vacation"))
    assert [r.request_id for r in found] == ["c"]

    found = history_service.search_all(LeaveSearchFilter(leave_type="Vacation", status=LeaveStatus.PENDING))
    assert [r.request_id for r in found] == ["b"]

    assert history_service.search_all(LeaveSearchFilter(leave_type="Vacation ")) == []


def test_count_by_status(history_service):
    counts = history_service.count_by_status(history_service.search_all())
    assert counts == {"PENDING": 3, "APPROVED": 1, "REJECTED": 0}


def test_get_and_timeline():
    req = leave("a", "somsak", start=date(2026, 2, 1), current=Role.DM)
    req = replace(
        req,
        approvals=(ApprovalRecord(role=Role.OM, approver_id="om-user", decided_at=T0, decision=Decision.APPROVED),),
    )
    svc = make_service([req])

    steps = svc.timeline("a")
    assert [(s.role, s.state) for s in steps] == [
        (Role.OM, StepState.APPROVED),
        (Role.DM, StepState.PENDING),
        (Role.CEO, StepState.WAITING),
    ]
    assert steps[0].approver_id == "om-user"

    with pytest.raises(LeaveRequestNotFoundError):
        svc.get("missing")


def test_timeline_after_rejection_leaves_later_steps_waiting():
    req = leave("a", "somsak", start=date(2026, 2, 1), current=DONE, status=LeaveStatus.REJECTED)
    req = replace(
        req,
        approvals=(ApprovalRecord(role=Role.OM, approver_id="om-user", decided_at=T0, decision=Decision.REJECTED),),
    )

    assert [s.state for s in req.timeline()] == [StepState.REJECTED, StepState.WAITING, StepState.WAITING]
    assert req.step_index is None
    assert req.is_final
