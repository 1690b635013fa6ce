from enum import Enum as PyEnum

from readtrack.core.exceptions import AuthenticationRequired, InsufficientPermissions


class Role(str, PyEnum):
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"


STAFF_ROLES = (Role.TEACHER, Role.ADMIN)


def require_role(actor, *roles: Role) -> None:
    """Valida que el actor exista y tenga alguno de los roles indicados."""
    if actor is None:
        raise AuthenticationRequired()
    if Role(actor.role) not in roles:
        raise InsufficientPermissions()
