"""SQL permission resolver: one join from user to permission names."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sppg_rbac.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserRole,
)
from sppg_rbac.infrastructure.persistence.models.role import Role


class SqlPermissionResolver:
    """Union of permission names over a user's active assignments of active roles."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_user_permissions(self, user_id: str) -> set[str]:
        result = await self.db.execute(
            select(Permission.name)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(Role, Role.id == RolePermission.role_id)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(
                UserRole.user_id == user_id,
                UserRole.is_active.is_(True),
                Role.is_active.is_(True),
            )
            .distinct()
        )
        return set(result.scalars().all())
