from __future__ import annotations

from typing import FrozenSet, Optional, Protocol, Sequence, Tuple

from ..core.enums import Role
from .department_model import Department


class ApprovalRegistry(Protocol):
    """Read-only reference data consumed by the leave workflow.

    Note (DIP): services depend on this interface, never on a concrete store.
    """

    def chain_for(self, department_code: str) -> Tuple[Role, ...]:
        """Ordered approver roles for a department.

        Raises ``UnknownDepartmentError`` when the code has no template.
        """

        raise NotImplementedError

    def roles_of(self, user_id: str) -> FrozenSet[Role]:
        """Roles held by a user; empty for unknown users."""

        raise NotImplementedError

    def department_of(self, user_id: str) -> Optional[str]:
        raise NotImplementedError

    def display_name_of(self, user_id: str) -> Optional[str]:
        raise NotImplementedError

    def list_departments(self) -> Sequence[Department]:
        """Every department with its approval chain, ordered by code."""

        raise NotImplementedError
