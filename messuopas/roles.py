"""User roles and their Finnish display labels."""

from enum import Enum


class Role(str, Enum):
    """Roles a user can hold."""

    ADMIN = "admin"
    CUSTOMER_ADMIN = "customer_admin"
    PREMIUM_USER = "premium_user"
    USER = "user"


ROLE_LABELS_FI = {
    Role.ADMIN.value: "Ylläpitäjä",
    Role.CUSTOMER_ADMIN.value: "Organisaation ylläpitäjä",
    Role.PREMIUM_USER.value: "Premium käyttäjä",
    Role.USER.value: "Käyttäjä",
}

VALID_ROLES = frozenset(ROLE_LABELS_FI)


def get_role_label_fi(role: str | None) -> str:
    """Return the Finnish label for a role."""
    if role is None or role == "":
        return "Ei määritetty"
    return ROLE_LABELS_FI.get(role, ROLE_LABELS_FI[Role.USER.value])


def sees_all_events(role: str | None) -> bool:
    """Admins and organization admins are never restricted by event access lists."""
    return role in (Role.ADMIN.value, Role.CUSTOMER_ADMIN.value)
