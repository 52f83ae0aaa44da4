"""Leave approval workflow engine.

A request walks its approval chain one role at a time. Each decision either
advances it to the next role, finishes it as APPROVED after the last role,
or ends it as REJECTED at once. Finished requests accept no further
decisions.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable, Optional

from ..audit.repository import AuditLogSink
from ..common.datetime_utils import now_utc
from ..common.validators import ranges_overlap, require_date_order, require_non_empty
from ..core.constants import DONE
from ..core.enums import AuditAction, Decision, LeaveStatus
from ..core.exceptions import (
    AlreadyFinalizedError,
    LeaveRequestNotFoundError,
    NoApprovalChainConfiguredError,
    NotAuthorizedError,
    ValidationError,
)
from ..users.authorization import authorize
from ..users.repository import ApprovalRegistry
from .model import ApprovalRecord, LeaveRequest
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkflowPolicy:
    """Submission checks that the legacy console left implicit."""

    enforce_date_order: bool = True
    reject_overlapping: bool = False


def _new_request_id() -> str:
    return uuid.uuid4().hex


class LeaveWorkflowService:
    """Use cases: submit a leave request, decide the pending approval step."""

    def __init__(
        self,
        requests: LeaveRequestRepository,
        registry: ApprovalRegistry,
        audit: AuditLogSink,
        *,
        policy: Optional[WorkflowPolicy] = None,
        clock: Callable[[], datetime] = now_utc,
        id_factory: Callable[[], str] = _new_request_id,
    ):
        self._requests = requests
        self._registry = registry
        self._audit = audit
        self._policy = policy or WorkflowPolicy()
        self._clock = clock
        self._id_factory = id_factory

    @property
    def policy(self) -> WorkflowPolicy:
        return self._policy

    def submit(
        self,
        *,
        requester_id: str,
        department_code: str,
        leave_type: str,
        start_date: date,
        end_date: date,
        reason: str = "",
    ) -> LeaveRequest:
        chain = tuple(self._registry.chain_for(department_code))
        if not chain:
            raise NoApprovalChainConfiguredError(department_code)

        leave_type = require_non_empty(leave_type, "Leave type")
        if self._policy.enforce_date_order:
            require_date_order(start_date, end_date)
        if self._policy.reject_overlapping:
            self._ensure_no_overlap(requester_id, start_date, end_date)

        request = LeaveRequest(
            request_id=self._id_factory(),
            requester_id=str(requester_id),
            department_code=department_code,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=(reason or "").strip(),
            approval_chain=chain,
            current_approver_role=chain[0],
            status=LeaveStatus.PENDING,
            created_at=self._clock(),
        )
        self._requests.upsert(request)
        logger.info(
            "Leave request %s submitted by %s (%s, chain=%s)",
            request.request_id,
            requester_id,
            department_code,
            "/".join(role.value for role in chain),
        )

        self._record(
            str(requester_id),
            AuditAction.LEAVE_REQUEST,
            f"Requested {leave_type} from {start_date.isoformat()}",
        )
        return request

    def decide(self, *, request_id: str, actor_id: str, approved: bool, note: Optional[str] = None) -> LeaveRequest:
        req = self._requests.get_by_id(request_id)
        if req is None:
            raise LeaveRequestNotFoundError(request_id)
        if req.status != LeaveStatus.PENDING:
            logger.warning("Refused decision by %s on finalized leave request %s (%s)", actor_id, request_id, req.status.value)
            raise AlreadyFinalizedError(request_id, req.status.value)

        roles = self._registry.roles_of(actor_id)
        if not authorize(roles, req.current_approver_role):
            logger.warning("User %s may not act for %s on leave request %s", actor_id, req.current_approver_role.value, request_id)
            raise NotAuthorizedError(f"Only {req.current_approver_role.value} may decide this step")

        step = req.approval_chain.index(req.current_approver_role)
        record = ApprovalRecord(
            role=req.current_approver_role,
            approver_id=str(actor_id),
            decided_at=self._clock(),
            decision=Decision.APPROVED if approved else Decision.REJECTED,
            note=(note or "").strip() or None,
        )

        if not approved:
            status, current = LeaveStatus.REJECTED, DONE
        elif step == len(req.approval_chain) - 1:
            status, current = LeaveStatus.APPROVED, DONE
        else:
            status, current = LeaveStatus.PENDING, req.approval_chain[step + 1]

        updated = replace(
            req,
            approvals=req.approvals + (record,),
            status=status,
            current_approver_role=current,
            version=req.version + 1,
        )
        self._requests.upsert(updated, expected_version=req.version)
        logger.info(
            "Leave request %s step %d/%d %s by %s -> %s",
            request_id,
            step + 1,
            len(req.approval_chain),
            record.decision.value,
            actor_id,
            status.value,
        )

        self._record(
            str(actor_id),
            AuditAction.APPROVE_LEAVE if approved else AuditAction.REJECT_LEAVE,
            f"Leave ID {request_id} decision made.",
        )
        return updated

    def approve(self, *, request_id: str, actor_id: str, note: Optional[str] = None) -> LeaveRequest:
        return self.decide(request_id=request_id, actor_id=actor_id, approved=True, note=note)

    def reject(self, *, request_id: str, actor_id: str, note: Optional[str] = None) -> LeaveRequest:
        return self.decide(request_id=request_id, actor_id=actor_id, approved=False, note=note)

    def _ensure_no_overlap(self, requester_id: str, start_date: date, end_date: date) -> None:
        for other in self._requests.get_all():
            if other.requester_id != str(requester_id) or other.status == LeaveStatus.REJECTED:
                continue
            if ranges_overlap(other.start_date, other.end_date, start_date, end_date):
                raise ValidationError(
                    f"Overlaps leave request {other.request_id} "
                    f"({other.start_date.isoformat()} - {other.end_date.isoformat()})"
                )

    def _record(self, actor_id: str, action: AuditAction, details: str) -> None:
        # The state change is already persisted; a failing sink must not undo it.
        try:
            self._audit.append(actor_id, action.value, details)
        except Exception:
            logger.exception("Audit append failed: %s %s %s", actor_id, action.value, details)
