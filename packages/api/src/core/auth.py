# This project was developed with assistance from AI tools.
"""Pure role predicates with no FastAPI or HTTP dependencies.

Used by the middleware layer (route gating) and by the access-arbitration
core (reviewer and top-up authorization).  Every ``UserRole`` member is
handled explicitly; adding a role without updating these functions raises.
"""

from db.enums import UserRole


def is_admin(role: UserRole) -> bool:
    """True for roles that may review any request and manage credit."""
    if role == UserRole.SUPER_ADMIN:
        return True
    if role == UserRole.ADMIN:
        return True
    if role == UserRole.AFFILIATE:
        return False
    raise ValueError(f"Unhandled role: {role!r}")


def is_affiliate(role: UserRole) -> bool:
    """True for client-bound users who search, request and print."""
    if role == UserRole.AFFILIATE:
        return True
    if role in (UserRole.SUPER_ADMIN, UserRole.ADMIN):
        return False
    raise ValueError(f"Unhandled role: {role!r}")


ADMIN_ROLES: tuple[UserRole, ...] = tuple(r for r in UserRole if is_admin(r))
ALL_ROLES: tuple[UserRole, ...] = tuple(UserRole)
