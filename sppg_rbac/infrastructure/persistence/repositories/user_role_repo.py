"""User-role assignment repository. Rows are deactivated, never deleted."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from sppg_rbac.application.dtos.user_role import UserRoleResult
from sppg_rbac.domain.exceptions import ResourceNotFoundException
from sppg_rbac.infrastructure.persistence.models.permission import UserRole
from sppg_rbac.infrastructure.persistence.repositories.base import BaseRepository
from sppg_rbac.shared.utils.datetime import ensure_utc, utc_now
from sppg_rbac.shared.utils.generators import generate_cuid


def _user_role_to_result(ur: UserRole) -> UserRoleResult:
    """Map ORM UserRole to application UserRoleResult."""
    assigned_at = ensure_utc(ur.assigned_at)
    assert assigned_at is not None
    return UserRoleResult(
        id=ur.id,
        user_id=ur.user_id,
        role_id=ur.role_id,
        is_active=ur.is_active,
        assigned_by=ur.assigned_by,
        assigned_at=assigned_at,
        deactivated_at=ensure_utc(ur.deactivated_at),
    )


def _dialect_insert(db: AsyncSession):
    """insert() of the bound dialect (both support ON CONFLICT DO NOTHING)."""
    if db.get_bind().dialect.name == "postgresql":
        return postgresql.insert
    return sqlite.insert


class UserRoleRepository(BaseRepository[UserRole]):
    """Assignments of roles to users."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, UserRole)

    async def _require(self, assignment_id: str) -> UserRole:
        assignment = await self.get_entity(assignment_id)
        if assignment is None:
            raise ResourceNotFoundException("UserRole", assignment_id)
        return assignment

    async def get(self, user_id: str, role_id: str) -> UserRoleResult | None:
        result = await self.db.execute(
            select(UserRole).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        )
        row = result.scalar_one_or_none()
        return _user_role_to_result(row) if row else None

    async def create_assignment(
        self, user_id: str, role_id: str, assigned_by: str | None
    ) -> UserRoleResult:
        """Insert an active assignment; a row already there for (user, role) wins.

        INSERT ... ON CONFLICT DO NOTHING on uq_user_role, then re-read, so a
        concurrent assign of the same pair resolves to one row.
        """
        insert = _dialect_insert(self.db)
        await self.db.execute(
            insert(UserRole)
            .values(
                id=generate_cuid(),
                user_id=user_id,
                role_id=role_id,
                assigned_by=assigned_by,
                assigned_at=utc_now(),
                is_active=True,
            )
            .on_conflict_do_nothing(index_elements=["user_id", "role_id"])
        )
        row = await self.get(user_id, role_id)
        assert row is not None
        return row

    async def reactivate(
        self, assignment_id: str, assigned_by: str | None
    ) -> UserRoleResult:
        assignment = await self._require(assignment_id)
        assignment.is_active = True
        assignment.assigned_by = assigned_by
        assignment.assigned_at = utc_now()
        assignment.deactivated_at = None
        return _user_role_to_result(await self.save(assignment))

    async def deactivate(self, assignment_id: str) -> UserRoleResult:
        assignment = await self._require(assignment_id)
        assignment.is_active = False
        assignment.deactivated_at = utc_now()
        return _user_role_to_result(await self.save(assignment))

    async def list_active_for_user(self, user_id: str) -> list[UserRoleResult]:
        result = await self.db.execute(
            select(UserRole)
            .where(UserRole.user_id == user_id, UserRole.is_active.is_(True))
            .order_by(UserRole.assigned_at)
        )
        return [_user_role_to_result(ur) for ur in result.scalars().all()]

    async def count_active_for_role(self, role_id: str) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(UserRole)
            .where(UserRole.role_id == role_id, UserRole.is_active.is_(True))
        )
        return int(result.scalar_one())

    async def list_active_user_ids_for_role(self, role_id: str) -> list[str]:
        result = await self.db.execute(
            select(UserRole.user_id).where(
                UserRole.role_id == role_id, UserRole.is_active.is_(True)
            )
        )
        return list(result.scalars().all())
