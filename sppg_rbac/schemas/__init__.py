"""Pydantic request/response schemas for the API."""

from sppg_rbac.schemas.authorization import (
    AuthorizeRequest,
    AuthorizeResponse,
    UserPermissionsResponse,
)
from sppg_rbac.schemas.health import HealthResponse
from sppg_rbac.schemas.permission import (
    PermissionResponse,
    RolePermissionsResponse,
    RolePermissionsUpdate,
)
from sppg_rbac.schemas.provisioning import (
    ProvisioningDefinitionFile,
    ProvisioningReportResponse,
    ProvisioningRequest,
)
from sppg_rbac.schemas.role import RoleCreateRequest, RoleResponse, RoleUpdate
from sppg_rbac.schemas.user_role import (
    UserRoleAssignRequest,
    UserRoleResponse,
    UserRoleRevokeResponse,
)

__all__ = [
    "AuthorizeRequest",
    "AuthorizeResponse",
    "HealthResponse",
    "PermissionResponse",
    "ProvisioningDefinitionFile",
    "ProvisioningReportResponse",
    "ProvisioningRequest",
    "RoleCreateRequest",
    "RolePermissionsResponse",
    "RolePermissionsUpdate",
    "RoleResponse",
    "RoleUpdate",
    "UserPermissionsResponse",
    "UserRoleAssignRequest",
    "UserRoleResponse",
    "UserRoleRevokeResponse",
]
