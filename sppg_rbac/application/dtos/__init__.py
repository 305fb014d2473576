"""Read-models returned by repositories and services (no ORM types)."""

from sppg_rbac.application.dtos.identity import IdentityResult
from sppg_rbac.application.dtos.permission import PermissionResult
from sppg_rbac.application.dtos.provisioning import ProvisioningReport, UpsertOutcome
from sppg_rbac.application.dtos.role import RoleResult
from sppg_rbac.application.dtos.user_role import UserRoleResult

__all__ = [
    "IdentityResult",
    "PermissionResult",
    "ProvisioningReport",
    "RoleResult",
    "UpsertOutcome",
    "UserRoleResult",
]
