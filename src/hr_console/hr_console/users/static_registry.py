from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Optional, Sequence, Tuple

from ..core.constants import DEFAULT_DEPARTMENTS, DEMO_USERS
from ..core.enums import Role
from ..core.exceptions import UnknownDepartmentError
from .department_model import Department
from .model import User
from .repository import ApprovalRegistry


class StaticApprovalRegistry(ApprovalRegistry):
    """Registry backed by in-process department templates and users."""

    def __init__(self, departments: Iterable[Department], users: Iterable[User] = ()):
        self._departments: Dict[str, Department] = {d.code: d for d in departments}
        self._users: Dict[str, User] = {u.user_id: u for u in users}

    @classmethod
    def from_defaults(cls, *, with_demo_users: bool = True) -> "StaticApprovalRegistry":
        departments = [Department(code=code, name=name, approvers=tuple(chain)) for code, (name, chain) in DEFAULT_DEPARTMENTS.items()]
        users = []
        if with_demo_users:
            users = [
                User(
                    user_id=user_id,
                    username=username,
                    full_name=full_name,
                    roles=frozenset(roles),
                    department_code=dept,
                    position=position,
                )
                for user_id, username, full_name, roles, dept, position in DEMO_USERS
            ]
        return cls(departments, users)

    def chain_for(self, department_code: str) -> Tuple[Role, ...]:
        dept = self._departments.get(department_code)
        if dept is None:
            raise UnknownDepartmentError(department_code)
        return dept.approvers

    def roles_of(self, user_id: str) -> FrozenSet[Role]:
        user = self._users.get(user_id)
        return user.roles if user else frozenset()

    def department_of(self, user_id: str) -> Optional[str]:
        user = self._users.get(user_id)
        return user.department_code if user else None

    def display_name_of(self, user_id: str) -> Optional[str]:
        user = self._users.get(user_id)
        return user.full_name if user else None

    def list_departments(self) -> Sequence[Department]:
        return sorted(self._departments.values(), key=lambda d: d.code)

    def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)
