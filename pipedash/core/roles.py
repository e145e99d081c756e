"""Role catalogue and permission helpers for the role display screen."""

from __future__ import annotations

from dataclasses import dataclass

from pipedash.core.enums import UserRole

RESOURCES = ("opportunities", "jobs", "accounts", "users", "reports", "dashboards", "import", "export")
ACTIONS = ("create", "read", "update", "delete", "manage")


@dataclass(frozen=True)
class Role:
    id: str
    name: str
    description: str
    level: int
    color: str
    permissions: frozenset[str]


# Permission strings are "resource:action"; "*" grants everything.
ROLE_CATALOGUE: dict[str, Role] = {
    role.id: role
    for role in (
        Role(
            id=UserRole.ADMIN.value,
            name="Administrator",
            description="Full system access across all industry groups and functions",
            level=100,
            color="#8B5CF6",
            permissions=frozenset({"*"}),
        ),
        Role(
            id=UserRole.INDUSTRY_LEADER.value,
            name="Industry Group Leader",
            description="Full access to respective industry data and team management",
            level=80,
            color="#3B82F6",
            permissions=frozenset(
                {
                    "opportunities:manage",
                    "jobs:manage",
                    "accounts:manage",
                    "users:read",
                    "reports:create",
                    "dashboards:manage",
                    "import:create",
                    "export:create",
                }
            ),
        ),
        Role(
            id=UserRole.ACCOUNT_OWNER.value,
            name="Account Owner",
            description="Team-specific data access and account management",
            level=60,
            color="#10B981",
            permissions=frozenset(
                {
                    "opportunities:manage",
                    "jobs:manage",
                    "accounts:read",
                    "accounts:update",
                    "reports:read",
                    "dashboards:read",
                    "export:create",
                }
            ),
        ),
        Role(
            id=UserRole.CLIENT_LEADER.value,
            name="Client Leader",
            description="Own pipeline access with read-only account visibility",
            level=40,
            color="#F59E0B",
            permissions=frozenset(
                {
                    "opportunities:manage",
                    "jobs:read",
                    "jobs:update",
                    "accounts:read",
                    "reports:read",
                    "dashboards:read",
                }
            ),
        ),
    )
}


def get_role(role: str) -> Role | None:
    return ROLE_CATALOGUE.get(role.lower())


def get_permissions_for_role(role: str) -> frozenset[str]:
    """Return permissions granted to a role."""
    found = get_role(role)
    return found.permissions if found else frozenset()


def has_permission(role: str, permission: str) -> bool:
    """Check a single ``resource:action`` permission, honouring ``*`` and ``resource:manage``."""
    granted = get_permissions_for_role(role)
    if "*" in granted:
        return True
    if permission in granted:
        return True
    resource = permission.split(":", 1)[0]
    return f"{resource}:manage" in granted


def has_permissions(role: str, required: list[str] | set[str] | tuple[str, ...]) -> bool:
    """Check if role includes every required permission."""
    return all(has_permission(role, permission) for permission in required)
