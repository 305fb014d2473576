"""Persistence models: ORM entities and mixins."""

from sppg_rbac.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin
from sppg_rbac.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserRole,
)
from sppg_rbac.infrastructure.persistence.models.role import Role
from sppg_rbac.infrastructure.persistence.models.tenant import Tenant
from sppg_rbac.infrastructure.persistence.models.user import User

__all__ = [
    "CuidMixin",
    "Permission",
    "Role",
    "RolePermission",
    "Tenant",
    "TimestampMixin",
    "User",
    "UserRole",
]
