from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .audit.memory_audit_log import InMemoryAuditLog
from .audit.mysql_audit_log import MySQLAuditLog
from .audit.repository import AuditLogSink
from .database.connection import DBConfig, DatabaseConnection
from .leaves.admin_service import LeaveAdminService
from .leaves.json_repository import JsonFileLeaveRequestRepository
from .leaves.memory_repository import InMemoryLeaveRequestRepository
from .leaves.mysql_leave_repository import MySQLLeaveRequestRepository
from .leaves.query_service import LeaveQueryService
from .leaves.repository import LeaveRequestRepository
from .leaves.workflow import LeaveWorkflowService, WorkflowPolicy
from .users.mysql_registry import MySQLApprovalRegistry
from .users.repository import ApprovalRegistry
from .users.static_registry import StaticApprovalRegistry


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    registry: ApprovalRegistry
    leaves_repo: LeaveRequestRepository
    audit_log: AuditLogSink

    workflow_service: LeaveWorkflowService
    query_service: LeaveQueryService
    admin_service: LeaveAdminService


def _build_leaves_repo(settings: Any, conn: Optional[DatabaseConnection]) -> LeaveRequestRepository:
    backend = str(getattr(settings, "LEAVE_STORE", "memory")).lower()
    if backend == "mysql":
        return MySQLLeaveRequestRepository(conn)
    if backend == "json":
        return JsonFileLeaveRequestRepository(getattr(settings, "LEAVE_STORE_PATH", "instance/leaves.json"))
    if backend == "memory":
        return InMemoryLeaveRequestRepository()
    raise ValueError(f"Unknown LEAVE_STORE backend: {backend!r}")


def build_container(settings: Any) -> Container:
    """Wire repositories and services from a settings module (or any object with the same attributes)."""
    registry_backend = str(getattr(settings, "REGISTRY_BACKEND", "static")).lower()
    audit_backend = str(getattr(settings, "AUDIT_BACKEND", "memory")).lower()
    leave_backend = str(getattr(settings, "LEAVE_STORE", "memory")).lower()

    conn = None
    if "mysql" in {registry_backend, audit_backend, leave_backend}:
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))

    if registry_backend == "mysql":
        registry: ApprovalRegistry = MySQLApprovalRegistry(conn)
    else:
        registry = StaticApprovalRegistry.from_defaults(with_demo_users=bool(getattr(settings, "DEMO_USERS", True)))

    audit_log: AuditLogSink = MySQLAuditLog(conn) if audit_backend == "mysql" else InMemoryAuditLog()
    leaves_repo = _build_leaves_repo(settings, conn)

    policy = WorkflowPolicy(
        enforce_date_order=bool(getattr(settings, "ENFORCE_LEAVE_DATE_ORDER", True)),
        reject_overlapping=bool(getattr(settings, "REJECT_OVERLAPPING_LEAVES", False)),
    )
    workflow_service = LeaveWorkflowService(leaves_repo, registry, audit_log, policy=policy)
    query_service = LeaveQueryService(leaves_repo, registry)
    admin_service = LeaveAdminService(leaves_repo, registry, audit_log)

    return Container(
        conn=conn,
        registry=registry,
        leaves_repo=leaves_repo,
        audit_log=audit_log,
        workflow_service=workflow_service,
        query_service=query_service,
        admin_service=admin_service,
    )
