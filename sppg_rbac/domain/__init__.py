"""Domain layer: RBAC rules, exceptions, enums and the typed registry.

No infrastructure imports here.
"""

from sppg_rbac.domain.enums import AccessDecision, TenantStatus, UserType
from sppg_rbac.domain.registry import PermissionName, RoleCode, validate_registry

__all__ = [
    "AccessDecision",
    "PermissionName",
    "RoleCode",
    "TenantStatus",
    "UserType",
    "validate_registry",
]
