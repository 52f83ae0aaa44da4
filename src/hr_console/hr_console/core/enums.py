from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for approval chains and permission checks.

    A user may hold several roles at once. ``SUPERUSER`` implicitly satisfies
    every other role (see ``users.authorization.authorize``).
    """

    EMPLOYEE = "EMPLOYEE"
    ADMIN = "ADMIN"
    HR = "HR"
    OM = "OM"  # Operation Manager
    DM = "DM"  # Department Manager
    PM = "PM"  # Plant Manager
    CEO = "CEO"
    SUPERUSER = "SUPERUSER"
    FM = "FM"  # Foreman
    SUP = "SUP"  # Supervisor


class LeaveStatus(str, Enum):
    """Overall state of a leave request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Decision(str, Enum):
    """Outcome recorded for a single approval step."""

    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class StepState(str, Enum):
    """Display state of one step of an approval chain."""

    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PENDING = "PENDING"
    WAITING = "WAITING"


class AuditAction(str, Enum):
    LEAVE_REQUEST = "LEAVE_REQUEST"
    APPROVE_LEAVE = "APPROVE_LEAVE"
    REJECT_LEAVE = "REJECT_LEAVE"
    DELETE_LEAVE = "DELETE_LEAVE"
