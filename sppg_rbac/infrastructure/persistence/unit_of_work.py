"""SQLAlchemy unit of work: one AsyncSession, one transaction, all RBAC repositories."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from types import TracebackType

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sppg_rbac.core.constants import PROVISIONING_LOCK_KEY
from sppg_rbac.infrastructure.cache.permission_cache import PermissionCacheInvalidator
from sppg_rbac.infrastructure.persistence.repositories import (
    IdentityDirectoryRepository,
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    SqlPermissionResolver,
    UserRoleRepository,
)

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork:
    """IRbacUnitOfWork over an AsyncSession.

    The session autobegins on first statement. Exit commits (unless
    read_only) or rolls back, then closes the session.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        invalidator: PermissionCacheInvalidator | None = None,
        *,
        read_only: bool = False,
    ) -> None:
        self._session_factory = session_factory
        self._invalidator = invalidator
        self.read_only = read_only
        self._stale_users: set[str] = set()
        self._stale_all = False
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        self.session = self._session_factory()
        self.permissions = PermissionRepository(self.session)
        self.roles = RoleRepository(self.session)
        self.role_permissions = RolePermissionRepository(self.session)
        self.user_roles = UserRoleRepository(self.session)
        self.identities = IdentityDirectoryRepository(self.session)
        self.grants = SqlPermissionResolver(self.session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        assert self.session is not None
        try:
            if exc_type is not None or self.read_only:
                await self.session.rollback()
                if exc_type is not None:
                    logger.debug("Transaction rolled back: %s", exc_type.__name__)
                return
            await self._flush_invalidations()
            await self.session.commit()
            await self._flush_invalidations()
        finally:
            await self.session.close()
            self.session = None

    def invalidate_user(self, user_id: str) -> None:
        self._stale_users.add(user_id)

    def invalidate_users(self, user_ids: Iterable[str]) -> None:
        self._stale_users.update(user_ids)

    def invalidate_all(self) -> None:
        self._stale_all = True

    async def acquire_provisioning_lock(self) -> None:
        """pg_advisory_xact_lock on Postgres; SQLite already serializes writers."""
        assert self.session is not None
        if self.session.get_bind().dialect.name != "postgresql":
            return
        await self.session.execute(
            text("SELECT pg_advisory_xact_lock(:key)"), {"key": PROVISIONING_LOCK_KEY}
        )
        logger.debug("Provisioning lock acquired")

    async def _flush_invalidations(self) -> None:
        if self._invalidator is None or not (self._stale_users or self._stale_all):
            return
        await self._invalidator.invalidate(self._stale_users, everything=self._stale_all)


class SqlAlchemyUnitOfWorkFactory:
    """UnitOfWorkFactory producing SqlAlchemyUnitOfWork instances."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        invalidator: PermissionCacheInvalidator | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.invalidator = invalidator

    def __call__(self, *, read_only: bool = False) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(
            self.session_factory, self.invalidator, read_only=read_only
        )
