"""Role-based access rules for payroll endpoints.

Authentication happens upstream; this module only decides what an already
identified role may do.
"""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles issued by the identity provider."""

    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


class Capability(str, Enum):
    """Actions guarded on the payroll API."""

    VIEW_PAYROLL = "view_payroll"
    MANAGE_PAYROLL = "manage_payroll"
    DELETE_PAY_PERIOD = "delete_pay_period"


MANAGEMENT_ROLES = frozenset({Role.MANAGER, Role.ADMIN})
ADMIN_ONLY = frozenset({Role.ADMIN})

CAPABILITY_ROLES: dict[Capability, frozenset[Role]] = {
    Capability.VIEW_PAYROLL: MANAGEMENT_ROLES,
    Capability.MANAGE_PAYROLL: MANAGEMENT_ROLES,
    Capability.DELETE_PAY_PERIOD: ADMIN_ONLY,
}


def has_capability(role: Role | str, capability: Capability) -> bool:
    """Check whether ``role`` grants ``capability``. Unknown roles grant nothing."""
    try:
        role = Role(role)
    except ValueError:
        return False
    return role in CAPABILITY_ROLES.get(capability, frozenset())
