from __future__ import annotations

import pytest

from src.hr_console.hr_console.core.constants import DEFAULT_DEPARTMENTS, DONE
from src.hr_console.hr_console.core.enums import Role
from src.hr_console.hr_console.core.exceptions import UnknownDepartmentError, ValidationError
from src.hr_console.hr_console.users.authorization import authorize, has_any_role
from src.hr_console.hr_console.users.department_model import Department
from src.hr_console.hr_console.users.model import User
from src.hr_console.hr_console.users.static_registry import StaticApprovalRegistry


def test_default_chains():
    registry = StaticApprovalRegistry.from_defaults()

    assert registry.chain_for("ACC") == (Role.OM, Role.DM, Role.CEO)
    assert registry.chain_for("SALES") == (Role.SUP, Role.OM, Role.DM, Role.CEO)
    assert registry.chain_for("PROD") == (Role.FM, Role.SUP, Role.PM, Role.DM)
    assert {d.code for d in registry.list_departments()} == set(DEFAULT_DEPARTMENTS)


def test_unknown_department():
    registry = StaticApprovalRegistry.from_defaults()
    with pytest.raises(UnknownDepartmentError) as exc_info:
        registry.chain_for("XYZ")
    assert exc_info.value.department_code == "XYZ"


def test_demo_directory_lookups():
    registry = StaticApprovalRegistry.from_defaults()

    assert registry.roles_of("u1") == frozenset({Role.SUPERUSER, Role.CEO, Role.ADMIN})
    assert registry.roles_of("u3") == frozenset({Role.EMPLOYEE, Role.DM})
    assert registry.department_of("u2") == "PROD"
    assert registry.display_name_of("u4") == "Hana Bukkhon"


def test_unknown_user_has_no_roles():
    registry = StaticApprovalRegistry.from_defaults(with_demo_users=False)

    assert registry.roles_of("u1") == frozenset()
    assert registry.department_of("u1") is None
    assert registry.display_name_of("u1") is None


def test_custom_registry():
    registry = StaticApprovalRegistry(
        [Department(code="LAB", name="Lab", approvers=(Role.SUP, Role.CEO))],
        [User(user_id="x", username="x", full_name="X", roles=frozenset({Role.SUP}), department_code="LAB")],
    )
    assert registry.chain_for("LAB") == (Role.SUP, Role.CEO)
    assert registry.get_user("x").department_code == "LAB"


def test_department_rejects_duplicate_roles():
    with pytest.raises(ValidationError):
        Department(code="BAD", name="Bad", approvers=(Role.OM, Role.DM, Role.OM))


def test_department_steps():
    assert Department(code="A", name="A", approvers=(Role.OM, Role.CEO)).steps == 2


@pytest.mark.parametrize(
    "roles,required,expected",
    [
        ({Role.OM}, Role.OM, True),
        ({Role.EMPLOYEE, Role.DM}, Role.DM, True),
        ({Role.EMPLOYEE}, Role.OM, False),
        (set(), Role.CEO, False),
        ({Role.SUPERUSER}, Role.CEO, True),
        ({Role.SUPERUSER}, Role.FM, True),
        ({Role.ADMIN}, Role.CEO, False),
        ({Role.OM}, DONE, False),
    ],
)
def test_authorize(roles, required, expected):
    assert authorize(frozenset(roles), required) is expected


def test_has_any_role():
    assert has_any_role(frozenset({Role.HR}), {Role.HR, Role.ADMIN})
    assert has_any_role(frozenset({Role.SUPERUSER}), {Role.HR})
    assert not has_any_role(frozenset({Role.EMPLOYEE, Role.DM}), {Role.HR, Role.ADMIN})
