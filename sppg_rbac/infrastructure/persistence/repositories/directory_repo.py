"""Identity directory backed by the mirrored tenant and app_user tables."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sppg_rbac.application.dtos.identity import IdentityResult
from sppg_rbac.domain.enums import TenantStatus, UserType
from sppg_rbac.infrastructure.persistence.models.tenant import Tenant
from sppg_rbac.infrastructure.persistence.models.user import User
from sppg_rbac.shared.utils.generators import generate_cuid


def _user_to_identity(u: User) -> IdentityResult:
    """Map ORM User to application IdentityResult."""
    return IdentityResult(
        user_id=u.id,
        tenant_id=u.tenant_id,
        user_type=UserType(u.user_type),
        is_active=u.is_active,
        email=u.email,
    )


class IdentityDirectoryRepository:
    """Read side used by the RBAC services, plus writers for seeding the mirror."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_identity(self, user_id: str) -> IdentityResult | None:
        result = await self.db.execute(
            select(User).where(User.id == user_id, User.is_active.is_(True))
        )
        row = result.scalar_one_or_none()
        return _user_to_identity(row) if row else None

    async def tenant_exists(self, tenant_id: str) -> bool:
        result = await self.db.execute(
            select(Tenant.id).where(
                Tenant.id == tenant_id, Tenant.status == TenantStatus.ACTIVE.value
            )
        )
        return result.scalar_one_or_none() is not None

    async def list_active_tenant_ids(self) -> list[str]:
        result = await self.db.execute(
            select(Tenant.id)
            .where(Tenant.status == TenantStatus.ACTIVE.value)
            .order_by(Tenant.code)
        )
        return list(result.scalars().all())

    async def add_tenant(
        self,
        code: str,
        name: str,
        tenant_id: str | None = None,
        status: TenantStatus = TenantStatus.ACTIVE,
    ) -> str:
        """Insert a tenant row; returns its id."""
        tenant = Tenant(
            id=tenant_id or generate_cuid(), code=code, name=name, status=status.value
        )
        self.db.add(tenant)
        await self.db.flush()
        return tenant.id

    async def add_identity(
        self,
        email: str,
        user_type: UserType = UserType.TENANT_USER,
        tenant_id: str | None = None,
        user_id: str | None = None,
        is_active: bool = True,
    ) -> IdentityResult:
        """Insert an app_user row."""
        user = User(
            id=user_id or generate_cuid(),
            email=email,
            user_type=user_type.value,
            tenant_id=tenant_id,
            is_active=is_active,
        )
        self.db.add(user)
        await self.db.flush()
        return _user_to_identity(user)
