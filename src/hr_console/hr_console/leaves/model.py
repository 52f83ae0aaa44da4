from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Tuple, Union

from ..core.constants import DONE
from ..core.enums import Decision, LeaveStatus, Role, StepState


@dataclass(frozen=True)
class ApprovalRecord:
    """One completed step of an approval chain."""

    role: Role
    approver_id: str
    decided_at: datetime
    decision: Decision
    note: Optional[str] = None


@dataclass(frozen=True)
class StepView:
    role: Role
    state: StepState
    approver_id: Optional[str] = None
    decided_at: Optional[datetime] = None


@dataclass(frozen=True)
class LeaveRequest:
    """Leave request aggregate.

    ``approval_chain`` is copied from the department template at submission
    and never changes. ``approvals`` only grows, one record per completed
    step, and ``current_approver_role`` is ``DONE`` once the status is final.
    """

    request_id: str
    requester_id: str
    leave_type: str
    start_date: date
    end_date: date
    reason: str
    approval_chain: Tuple[Role, ...]
    current_approver_role: Union[Role, str]
    status: LeaveStatus
    created_at: datetime
    approvals: Tuple[ApprovalRecord, ...] = ()
    department_code: Optional[str] = None
    version: int = 0

    @property
    def is_final(self) -> bool:
        return self.status != LeaveStatus.PENDING

    @property
    def step_index(self) -> Optional[int]:
        """Position of the pending step in the chain, None when finished."""
        if self.current_approver_role == DONE:
            return None
        return self.approval_chain.index(self.current_approver_role)

    @property
    def current_role_code(self) -> str:
        """``current_approver_role`` as a plain string (role code or ``DONE``)."""
        current = self.current_approver_role
        return current.value if isinstance(current, Role) else str(current)

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def timeline(self) -> List[StepView]:
        steps: List[StepView] = []
        for idx, role in enumerate(self.approval_chain):
            if idx < len(self.approvals):
                rec = self.approvals[idx]
                steps.append(StepView(role=role, state=StepState(rec.decision.value), approver_id=rec.approver_id, decided_at=rec.decided_at))
            elif self.status == LeaveStatus.PENDING and self.current_approver_role == role:
                steps.append(StepView(role=role, state=StepState.PENDING))
            else:
                steps.append(StepView(role=role, state=StepState.WAITING))
        return steps
