from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class UnknownDepartmentError(ValidationError):
    """Raised when a department code has no approval chain template."""

    def __init__(self, department_code: str):
        self.department_code = department_code
        super().__init__(f"Unknown department: {department_code!r}")


class NoApprovalChainConfiguredError(ValidationError):
    """Raised when a department resolves to an empty approval chain."""

    def __init__(self, department_code: str):
        self.department_code = department_code
        super().__init__(f"No approval chain configured for department {department_code!r}")


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotAuthorizedError(AuthorizationError):
    """Raised when an actor's roles do not cover the pending approval step."""


class LeaveRequestNotFoundError(DomainError):
    def __init__(self, request_id: str):
        self.request_id = request_id
        super().__init__(f"Leave request {request_id!r} does not exist")


class AlreadyFinalizedError(DomainError):
    """Raised when deciding a request that is already APPROVED or REJECTED."""

    def __init__(self, request_id: str, status: str):
        self.request_id = request_id
        self.status = status
        super().__init__(f"Leave request {request_id!r} is already {status}")


class ConcurrentModificationError(DomainError):
    """Raised when the stored version differs from the version that was read."""

    def __init__(self, request_id: str, expected_version: int, actual_version: Optional[int]):
        self.request_id = request_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Leave request {request_id!r} was modified concurrently "
            f"(expected version {expected_version}, found {actual_version})"
        )
