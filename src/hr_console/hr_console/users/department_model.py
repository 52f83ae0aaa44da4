from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..core.enums import Role
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Department:
    """A department and its approval chain template (ordered approver roles)."""

    code: str
    name: str
    approvers: Tuple[Role, ...]

    def __post_init__(self) -> None:
        seen = set()
        for role in self.approvers:
            if role in seen:
                raise ValidationError(f"Role {role.value} appears twice in the chain of department {self.code}")
            seen.add(role)

    @property
    def steps(self) -> int:
        return len(self.approvers)
