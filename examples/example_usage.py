"""Example: drive the leave workflow through the service layer (no Flask).

Uses the in-memory stores from the testing settings and the demo directory.
"""

import importlib
from datetime import date

from src.hr_console.hr_console.container import build_container


def main():
    settings = importlib.import_module("config.testing")
    container = build_container(settings)

    req = container.workflow_service.submit(
        requester_id="u4",
        department_code="HR",
        leave_type="Vacation",
        start_date=date(2026, 3, 2),
        end_date=date(2026, 3, 4),
        reason="Family trip",
    )
    print("submitted:", req.request_id, req.current_role_code)

    # u1 is superuser, so it can act for OM, DM and CEO in turn.
    for _ in req.approval_chain:
        req = container.workflow_service.approve(request_id=req.request_id, actor_id="u1")
        print("->", req.status.value, req.current_role_code)

    for step in container.query_service.timeline(req.request_id):
        print(step.role.value, step.state.value, step.approver_id)

    for entry in container.audit_log.list_recent(limit=5):
        print(entry.timestamp.isoformat(), entry.user_id, entry.action, entry.details)


if __name__ == "__main__":
    main()
