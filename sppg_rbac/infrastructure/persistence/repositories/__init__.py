"""SQLAlchemy repositories implementing the application ports."""

from sppg_rbac.infrastructure.persistence.repositories.directory_repo import (
    IdentityDirectoryRepository,
)
from sppg_rbac.infrastructure.persistence.repositories.permission_repo import (
    PermissionRepository,
)
from sppg_rbac.infrastructure.persistence.repositories.permission_resolver import (
    SqlPermissionResolver,
)
from sppg_rbac.infrastructure.persistence.repositories.role_permission_repo import (
    RolePermissionRepository,
)
from sppg_rbac.infrastructure.persistence.repositories.role_repo import RoleRepository
from sppg_rbac.infrastructure.persistence.repositories.user_role_repo import (
    UserRoleRepository,
)

__all__ = [
    "IdentityDirectoryRepository",
    "PermissionRepository",
    "RolePermissionRepository",
    "RoleRepository",
    "SqlPermissionResolver",
    "UserRoleRepository",
]
