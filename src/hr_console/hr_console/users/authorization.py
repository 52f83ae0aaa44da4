"""Role checks shared by the workflow engine, the query service and controllers.

The superuser bypass is defined here and nowhere else.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable

from ..core.enums import Role


def authorize(user_roles: AbstractSet[Role], required_role: object) -> bool:
    """True when ``user_roles`` may act for ``required_role``.

    ``required_role`` may be a non-role value such as the ``DONE`` sentinel;
    only a superuser is authorized for it, and callers check request status
    before acting.
    """
    if Role.SUPERUSER in user_roles:
        return True
    return required_role in user_roles


def has_any_role(user_roles: AbstractSet[Role], allowed: Iterable[Role]) -> bool:
    return any(authorize(user_roles, role) for role in allowed)
