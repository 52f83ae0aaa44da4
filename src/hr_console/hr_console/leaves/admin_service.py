from __future__ import annotations

import logging

from ..audit.repository import AuditLogSink
from ..core.constants import HISTORY_ROLES
from ..core.enums import AuditAction
from ..core.exceptions import AuthorizationError, LeaveRequestNotFoundError
from ..users.authorization import has_any_role
from ..users.repository import ApprovalRegistry
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)


class LeaveAdminService:
    """Use case: purge a leave request (HR/admin housekeeping).

    Deletion bypasses the approval state machine entirely.
    """

    def __init__(self, requests: LeaveRequestRepository, registry: ApprovalRegistry, audit: AuditLogSink):
        self._requests = requests
        self._registry = registry
        self._audit = audit

    def purge(self, *, actor_id: str, request_id: str) -> None:
        if not has_any_role(self._registry.roles_of(actor_id), HISTORY_ROLES):
            raise AuthorizationError("Only HR or administrators may delete leave requests")

        if not self._requests.delete_by_id(request_id):
            raise LeaveRequestNotFoundError(request_id)

        logger.info("Leave request %s deleted by %s", request_id, actor_id)
        self._audit.append(str(actor_id), AuditAction.DELETE_LEAVE.value, f"Leave ID {request_id} deleted.")
