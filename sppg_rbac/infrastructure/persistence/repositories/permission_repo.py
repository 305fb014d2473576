"""Permission repository. Read methods return PermissionResult (DTO)."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sppg_rbac.application.dtos.permission import PermissionResult
from sppg_rbac.domain.exceptions import ResourceNotFoundException, ValidationException
from sppg_rbac.infrastructure.persistence.models.permission import Permission
from sppg_rbac.infrastructure.persistence.repositories.base import BaseRepository


def _permission_to_result(p: Permission) -> PermissionResult:
    """Map ORM Permission to application PermissionResult."""
    return PermissionResult(
        id=p.id,
        name=p.name,
        module=p.module,
        action=p.action,
        description=p.description,
    )


class PermissionRepository(BaseRepository[Permission]):
    """Global permission catalog."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Permission)

    async def get_by_name(self, name: str) -> PermissionResult | None:
        result = await self.db.execute(select(Permission).where(Permission.name == name))
        row = result.scalar_one_or_none()
        return _permission_to_result(row) if row else None

    async def get_by_names(self, names: Iterable[str]) -> list[PermissionResult]:
        wanted = list(set(names))
        if not wanted:
            return []
        result = await self.db.execute(
            select(Permission).where(Permission.name.in_(wanted))
        )
        return [_permission_to_result(p) for p in result.scalars().all()]

    async def list_permissions(self, module: str | None = None) -> list[PermissionResult]:
        q = select(Permission)
        if module is not None:
            q = q.where(Permission.module == module)
        result = await self.db.execute(q.order_by(Permission.module, Permission.action))
        return [_permission_to_result(p) for p in result.scalars().all()]

    async def create_permission(
        self,
        name: str,
        module: str,
        action: str,
        description: str | None = None,
    ) -> PermissionResult:
        permission = Permission(
            name=name, module=module, action=action, description=description
        )
        try:
            created = await self.create(permission)
        except IntegrityError:
            raise ValidationException(
                f"Permission '{name}' already exists", "name"
            ) from None
        return _permission_to_result(created)

    async def update_permission(
        self,
        permission_id: str,
        module: str,
        action: str,
        description: str | None,
    ) -> PermissionResult:
        permission = await self.get_entity(permission_id)
        if permission is None:
            raise ResourceNotFoundException("Permission", permission_id)
        permission.module = module
        permission.action = action
        permission.description = description
        return _permission_to_result(await self.save(permission))
