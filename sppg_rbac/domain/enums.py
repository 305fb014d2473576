"""Domain enumerations for the RBAC subsystem.

Enums represent fixed sets of domain values (trust tier, access decision).
"""

from enum import Enum

from sppg_rbac.shared.enums import _ValuesMixin


class UserType(_ValuesMixin, str, Enum):
    """Trust tier of an identity.

    PLATFORM_ADMIN operates across tenants and has no tenant_id;
    TENANT_USER always belongs to exactly one tenant. The tier is
    independent of role assignments.
    """

    PLATFORM_ADMIN = "PLATFORM_ADMIN"
    TENANT_USER = "TENANT_USER"


class AccessDecision(_ValuesMixin, str, Enum):
    """Outcome of the tenant scope guard.

    UNAUTHENTICATED maps to HTTP 401, FORBIDDEN to 403.
    """

    AUTHORIZED = "authorized"
    FORBIDDEN = "forbidden"
    UNAUTHENTICATED = "unauthenticated"

    @property
    def allowed(self) -> bool:
        return self is AccessDecision.AUTHORIZED


class TenantStatus(_ValuesMixin, str, Enum):
    """Tenant (SPPG) lifecycle status as mirrored from the directory."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
