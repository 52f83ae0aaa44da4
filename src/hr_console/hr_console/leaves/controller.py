from __future__ import annotations

from functools import wraps
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request, session

from ..audit.model import AuditEntry
from ..common.datetime_utils import parse_iso_date, to_iso_z
from ..core.constants import AUDIT_ROLES, DEFAULT_AUDIT_LIMIT, HISTORY_ROLES
from ..core.enums import LeaveStatus
from ..core.exceptions import (
    AlreadyFinalizedError,
    AuthorizationError,
    ConcurrentModificationError,
    DomainError,
    LeaveRequestNotFoundError,
    ValidationError,
)
from ..container import Container
from ..users.authorization import has_any_role
from .model import LeaveRequest
from .query_service import LeaveSearchFilter

_STATUS_CODES = (
    (LeaveRequestNotFoundError, 404),
    (AuthorizationError, 403),
    (AlreadyFinalizedError, 409),
    (ConcurrentModificationError, 409),
    (ValidationError, 400),
)


def status_code_for(exc: DomainError) -> int:
    for exc_type, code in _STATUS_CODES:
        if isinstance(exc, exc_type):
            return code
    return 400


def register(app: Flask, container: Container) -> None:
    registry = container.registry

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"error": "AuthenticationRequired", "detail": "Please sign in to continue"}), 401
            return view(*args, **kwargs)

        return wrapper

    def roles_required(allowed):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                if "user_id" not in session:
                    return jsonify({"error": "AuthenticationRequired", "detail": "Please sign in to continue"}), 401
                if not has_any_role(registry.roles_of(str(session["user_id"])), allowed):
                    return jsonify({"error": "Forbidden", "detail": "You do not have access to this page"}), 403
                return view(*args, **kwargs)

            return wrapper

        return decorator

    def _current_user_id() -> str:
        return str(session["user_id"])

    def _serialize(req: LeaveRequest) -> Dict[str, Any]:
        return {
            "id": req.request_id,
            "requester_id": req.requester_id,
            "requester_name": registry.display_name_of(req.requester_id) or req.requester_id,
            "department_code": req.department_code,
            "leave_type": req.leave_type,
            "start_date": req.start_date.isoformat(),
            "end_date": req.end_date.isoformat(),
            "days": req.days,
            "reason": req.reason,
            "status": req.status.value,
            "current_approver_role": req.current_role_code,
            "approval_chain": [role.value for role in req.approval_chain],
            "approvals": [
                {
                    "role": a.role.value,
                    "approver_id": a.approver_id,
                    "decided_at": to_iso_z(a.decided_at),
                    "decision": a.decision.value,
                    "note": a.note,
                }
                for a in req.approvals
            ],
            "created_at": to_iso_z(req.created_at),
            "version": req.version,
        }

    def _serialize_detail(req: LeaveRequest) -> Dict[str, Any]:
        data = _serialize(req)
        data["timeline"] = [
            {
                "role": step.role.value,
                "state": step.state.value,
                "approver_id": step.approver_id,
                "decided_at": to_iso_z(step.decided_at) if step.decided_at else None,
            }
            for step in req.timeline()
        ]
        return data

    def _serialize_audit(entry: AuditEntry) -> Dict[str, Any]:
        return {
            "id": entry.entry_id,
            "timestamp": to_iso_z(entry.timestamp),
            "user_id": entry.user_id,
            "action": entry.action,
            "details": entry.details,
        }

    def _json_body() -> Dict[str, Any]:
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            raise ValidationError("Expected a JSON object body")
        return body

    def _optional_note() -> Optional[str]:
        body = request.get_json(silent=True)
        if body is None:
            return None
        if not isinstance(body, dict):
            raise ValidationError("Expected a JSON object body")
        note = body.get("note")
        return str(note) if note is not None else None

    def _parse_date(value: Optional[str], field_name: str):
        try:
            return parse_iso_date(value or "")
        except ValueError:
            raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")

    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        return jsonify({"error": type(exc).__name__, "detail": str(exc)}), status_code_for(exc)

    @app.route("/api/departments", methods=["GET"], endpoint="departments")
    @login_required
    def departments():
        return jsonify(
            {
                "items": [
                    {"code": d.code, "name": d.name, "approval_chain": [role.value for role in d.approvers]}
                    for d in registry.list_departments()
                ]
            }
        )

    @app.route("/api/leaves", methods=["POST"], endpoint="submit_leave")
    @login_required
    def submit_leave():
        body = _json_body()
        user_id = _current_user_id()
        department_code = registry.department_of(user_id)
        if not department_code:
            raise ValidationError("Your account has no department assigned")

        req = container.workflow_service.submit(
            requester_id=user_id,
            department_code=department_code,
            leave_type=str(body.get("leave_type") or ""),
            start_date=_parse_date(body.get("start_date"), "start_date"),
            end_date=_parse_date(body.get("end_date"), "end_date"),
            reason=str(body.get("reason") or ""),
        )
        return jsonify(_serialize_detail(req)), 201

    @app.route("/api/leaves/mine", methods=["GET"], endpoint="my_leaves")
    @login_required
    def my_leaves():
        items = container.query_service.history_for(_current_user_id())
        return jsonify({"items": [_serialize(r) for r in items]})

    @app.route("/api/leaves/pending", methods=["GET"], endpoint="pending_leaves")
    @login_required
    def pending_leaves():
        items = container.query_service.pending_for(_current_user_id())
        return jsonify({"items": [_serialize(r) for r in items]})

    @app.route("/api/leaves/<request_id>", methods=["GET"], endpoint="leave_detail")
    @login_required
    def leave_detail(request_id: str):
        req = container.query_service.get(request_id)
        user_id = _current_user_id()
        roles = registry.roles_of(user_id)
        involved = req.requester_id == user_id or any(a.approver_id == user_id for a in req.approvals)
        if not involved and not has_any_role(roles, set(req.approval_chain) | HISTORY_ROLES):
            raise AuthorizationError("You do not have access to this leave request")
        return jsonify(_serialize_detail(req))

    @app.route("/api/leaves/<request_id>/approve", methods=["POST"], endpoint="approve_leave")
    @login_required
    def approve_leave(request_id: str):
        note = _optional_note()
        req = container.workflow_service.decide(request_id=request_id, actor_id=_current_user_id(), approved=True, note=note)
        return jsonify(_serialize_detail(req))

    @app.route("/api/leaves/<request_id>/reject", methods=["POST"], endpoint="reject_leave")
    @login_required
    def reject_leave(request_id: str):
        note = _optional_note()
        req = container.workflow_service.decide(request_id=request_id, actor_id=_current_user_id(), approved=False, note=note)
        return jsonify(_serialize_detail(req))

    @app.route("/api/leaves", methods=["GET"], endpoint="leave_history")
    @roles_required(HISTORY_ROLES)
    def leave_history():
        leave_type = (request.args.get("type") or "").strip()
        status_arg = (request.args.get("status") or "").strip().upper()
        try:
            status = LeaveStatus(status_arg) if status_arg and status_arg != "ALL" else None
        except ValueError:
            raise ValidationError(f"Unknown status: {status_arg}")

        items = container.query_service.search_all(
            LeaveSearchFilter(
                text=request.args.get("q") or None,
                leave_type=leave_type if leave_type and leave_type != "ALL" else None,
                status=status,
            )
        )
        return jsonify(
            {
                "items": [_serialize(r) for r in items],
                "counts": container.query_service.count_by_status(items),
            }
        )

    @app.route("/api/leaves/<request_id>", methods=["DELETE"], endpoint="delete_leave")
    @login_required
    def delete_leave(request_id: str):
        container.admin_service.purge(actor_id=_current_user_id(), request_id=request_id)
        return "", 204

    @app.route("/api/audit-logs", methods=["GET"], endpoint="audit_logs")
    @roles_required(AUDIT_ROLES)
    def audit_logs():
        try:
            limit = int(request.args.get("limit", DEFAULT_AUDIT_LIMIT))
        except ValueError:
            raise ValidationError("limit must be an integer")
        entries = container.audit_log.list_recent(limit=max(1, min(limit, 500)))
        return jsonify({"items": [_serialize_audit(e) for e in entries]})
