"""Role-permission binding repository."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from sppg_rbac.application.dtos.permission import PermissionResult
from sppg_rbac.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
)
from sppg_rbac.infrastructure.persistence.repositories.base import BaseRepository
from sppg_rbac.infrastructure.persistence.repositories.permission_repo import (
    _permission_to_result,
)


class RolePermissionRepository(BaseRepository[RolePermission]):
    """Bindings between roles and permissions."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, RolePermission)

    async def get_permissions_for_role(self, role_id: str) -> list[PermissionResult]:
        result = await self.db.execute(
            select(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
            .order_by(Permission.name)
        )
        return [_permission_to_result(p) for p in result.scalars().all()]

    async def replace_permissions(self, role_id: str, permission_ids: set[str]) -> bool:
        """Delete bindings outside permission_ids, insert missing ones (same transaction)."""
        result = await self.db.execute(
            select(RolePermission.permission_id).where(RolePermission.role_id == role_id)
        )
        current = set(result.scalars().all())
        to_remove = current - permission_ids
        to_add = permission_ids - current
        if to_remove:
            await self.db.execute(
                delete(RolePermission).where(
                    RolePermission.role_id == role_id,
                    RolePermission.permission_id.in_(to_remove),
                )
            )
        if to_add:
            self.db.add_all(
                RolePermission(role_id=role_id, permission_id=pid) for pid in to_add
            )
            await self.db.flush()
        return bool(to_remove or to_add)
