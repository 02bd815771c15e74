"""
Role hierarchy for staff authorization

Roles are totally ordered (admin > sub-admin > soporte) and that ordering is
the only access-control rule: a caller may act when its level is at least the
level the action requires.
"""

from enum import Enum
from typing import Optional, Union

class Role(str, Enum):
    ADMIN = "admin"
    SUB_ADMIN = "sub-admin"
    SOPORTE = "soporte"

ROLE_LEVELS = {
    Role.ADMIN: 3,
    Role.SUB_ADMIN: 2,
    Role.SOPORTE: 1,
}

RoleLike = Union[Role, str, None]

def parse_role(value: RoleLike) -> Optional[Role]:
    """Convert a stored role value to a Role, or None when it is not one"""
    if value is None:
        return None
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None

def has_permission(caller_role: RoleLike, required_role: RoleLike) -> bool:
    """
    Check whether caller_role satisfies required_role.

    Unknown or missing roles on either side fail closed.
    """
    caller = parse_role(caller_role)
    required = parse_role(required_role)
    if caller is None or required is None:
        return False
    return ROLE_LEVELS[caller] >= ROLE_LEVELS[required]

def is_admin(role: RoleLike) -> bool:
    return parse_role(role) is Role.ADMIN

def is_sub_admin(role: RoleLike) -> bool:
    return parse_role(role) is Role.SUB_ADMIN

def is_soporte(role: RoleLike) -> bool:
    return parse_role(role) is Role.SOPORTE
