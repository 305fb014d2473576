"""RBAC application services.

Each service takes a unit-of-work factory; mutations accept an optional
``uow`` so several of them can share one transaction.
"""

from sppg_rbac.application.services.authorization_service import AuthorizationService
from sppg_rbac.application.services.permission_catalog import PermissionCatalogService
from sppg_rbac.application.services.provisioning_loader import ProvisioningLoader
from sppg_rbac.application.services.role_binding import RoleBindingService
from sppg_rbac.application.services.role_catalog import RoleCatalogService
from sppg_rbac.application.services.tenant_scope_guard import TenantScopeGuard
from sppg_rbac.application.services.user_role_assignment import (
    UserRoleAssignmentService,
)

__all__ = [
    "AuthorizationService",
    "PermissionCatalogService",
    "ProvisioningLoader",
    "RoleBindingService",
    "RoleCatalogService",
    "TenantScopeGuard",
    "UserRoleAssignmentService",
]
