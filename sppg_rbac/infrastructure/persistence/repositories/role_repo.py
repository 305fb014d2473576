"""Role repository. Read methods return RoleResult (DTO)."""

from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sppg_rbac.application.dtos.role import RoleResult
from sppg_rbac.domain.exceptions import DuplicateRoleError, RoleNotFoundError
from sppg_rbac.infrastructure.persistence.models.role import Role
from sppg_rbac.infrastructure.persistence.repositories.base import BaseRepository


def _role_to_result(r: Role) -> RoleResult:
    """Map ORM Role to application RoleResult."""
    return RoleResult(
        id=r.id,
        tenant_id=r.tenant_id,
        code=r.code,
        name=r.name,
        description=r.description,
        is_system_role=r.is_system_role,
        is_active=r.is_active,
    )


class RoleRepository(BaseRepository[Role]):
    """System and tenant roles."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    async def _require(self, role_id: str) -> Role:
        role = await self.get_entity(role_id)
        if role is None:
            raise RoleNotFoundError(role_id)
        return role

    async def get_by_id(self, role_id: str) -> RoleResult | None:
        role = await self.get_entity(role_id)
        return _role_to_result(role) if role else None

    async def get_by_code(self, code: str, tenant_id: str | None) -> RoleResult | None:
        q = select(Role).where(Role.code == code)
        if tenant_id is None:
            q = q.where(Role.tenant_id.is_(None), Role.is_system_role.is_(True))
        else:
            q = q.where(Role.tenant_id == tenant_id)
        result = await self.db.execute(q)
        row = result.scalar_one_or_none()
        return _role_to_result(row) if row else None

    async def list_by_tenant(
        self,
        tenant_id: str,
        include_system: bool = False,
        include_inactive: bool = False,
    ) -> list[RoleResult]:
        scope = Role.tenant_id == tenant_id
        if include_system:
            scope = or_(scope, Role.is_system_role.is_(True))
        q = select(Role).where(scope)
        if not include_inactive:
            q = q.where(Role.is_active.is_(True))
        result = await self.db.execute(q.order_by(Role.is_system_role.desc(), Role.code))
        return [_role_to_result(r) for r in result.scalars().all()]

    async def list_system_roles(self, include_inactive: bool = False) -> list[RoleResult]:
        q = select(Role).where(Role.is_system_role.is_(True))
        if not include_inactive:
            q = q.where(Role.is_active.is_(True))
        result = await self.db.execute(q.order_by(Role.code))
        return [_role_to_result(r) for r in result.scalars().all()]

    async def create_role(
        self,
        code: str,
        name: str,
        description: str | None,
        is_system_role: bool,
        tenant_id: str | None,
    ) -> RoleResult:
        role = Role(
            code=code,
            name=name,
            description=description,
            is_system_role=is_system_role,
            tenant_id=tenant_id,
            is_active=True,
        )
        try:
            created = await self.create(role)
        except IntegrityError:
            raise DuplicateRoleError(code, tenant_id) from None
        return _role_to_result(created)

    async def update_role(
        self, role_id: str, name: str, description: str | None
    ) -> RoleResult:
        role = await self._require(role_id)
        role.name = name
        role.description = description
        return _role_to_result(await self.save(role))

    async def set_active(self, role_id: str, is_active: bool) -> RoleResult:
        role = await self._require(role_id)
        role.is_active = is_active
        return _role_to_result(await self.save(role))

    async def lock_for_update(self, role_id: str) -> RoleResult | None:
        """SELECT ... FOR UPDATE (a no-op on SQLite, which locks the whole database on write)."""
        result = await self.db.execute(
            select(Role).where(Role.id == role_id).with_for_update()
        )
        row = result.scalar_one_or_none()
        return _role_to_result(row) if row else None
