from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a directory entry as seen by the approval workflow.

    Note: plain data object (no DB access). Credentials stay with the
    external login collaborator.
    """

    user_id: str
    username: str
    full_name: str
    roles: FrozenSet[Role] = field(default_factory=frozenset)
    department_code: Optional[str] = None
    position: str = ""
