from __future__ import annotations

from types import SimpleNamespace

import pytest

from src.hr_console.hr_console.audit.memory_audit_log import InMemoryAuditLog
from src.hr_console.hr_console.container import build_container
from src.hr_console.hr_console.leaves.json_repository import JsonFileLeaveRequestRepository
from src.hr_console.hr_console.leaves.memory_repository import InMemoryLeaveRequestRepository
from src.hr_console.hr_console.users.static_registry import StaticApprovalRegistry


def make_settings(**overrides):
    values = {
        "LEAVE_STORE": "memory",
        "REGISTRY_BACKEND": "static",
        "AUDIT_BACKEND": "memory",
        "DEMO_USERS": True,
        "DB_CONFIG": {},
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def test_memory_backends_need_no_database():
    container = build_container(make_settings())

    assert container.conn is None
    assert isinstance(container.leaves_repo, InMemoryLeaveRequestRepository)
    assert isinstance(container.registry, StaticApprovalRegistry)
    assert isinstance(container.audit_log, InMemoryAuditLog)
    assert container.workflow_service.policy.enforce_date_order is True
    assert container.workflow_service.policy.reject_overlapping is False


def test_json_store_uses_configured_path(tmp_path):
    path = tmp_path / "leaves.json"
    container = build_container(make_settings(LEAVE_STORE="json", LEAVE_STORE_PATH=str(path)))

    assert isinstance(container.leaves_repo, JsonFileLeaveRequestRepository)
    assert container.leaves_repo.get_all() == []


def test_policy_flags_are_read_from_settings():
    container = build_container(make_settings(ENFORCE_LEAVE_DATE_ORDER=False, REJECT_OVERLAPPING_LEAVES=True))

    assert container.workflow_service.policy.enforce_date_order is False
    assert container.workflow_service.policy.reject_overlapping is True


def test_demo_users_can_be_left_out():
    container = build_container(make_settings(DEMO_USERS=False))

    assert container.registry.roles_of("u1") == frozenset()
    assert container.registry.chain_for("HR")


def test_unknown_leave_store_is_rejected():
    with pytest.raises(ValueError):
        build_container(make_settings(LEAVE_STORE="redis"))
