"""Unit of work port.

One unit of work is one transaction. Services open it through a factory
and never see sessions or stores directly, so the same service code runs
against SQLAlchemy in production and the in-memory store in tests.
"""

from __future__ import annotations

from collections.abc import Iterable
from types import TracebackType
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from sppg_rbac.application.interfaces.repositories import (
        IIdentityDirectory,
        IPermissionRepository,
        IPermissionResolver,
        IRolePermissionRepository,
        IRoleRepository,
        IUserRoleRepository,
    )


class IRbacUnitOfWork(Protocol):
    """Transaction boundary exposing every RBAC repository.

    Leaving the context commits when no exception escaped and rolls back
    otherwise. A read-only unit of work never commits.

    Cache invalidation requested through invalidate_user/invalidate_all is
    applied inside the transaction (before commit) and again after commit.
    """

    permissions: IPermissionRepository
    roles: IRoleRepository
    role_permissions: IRolePermissionRepository
    user_roles: IUserRoleRepository
    identities: IIdentityDirectory
    grants: IPermissionResolver

    async def __aenter__(self) -> IRbacUnitOfWork: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    def invalidate_user(self, user_id: str) -> None:
        """Mark one user's cached permissions stale."""

    def invalidate_users(self, user_ids: Iterable[str]) -> None:
        """Mark several users' cached permissions stale."""

    def invalidate_all(self) -> None:
        """Mark every cached permission set stale (provisioning)."""

    async def acquire_provisioning_lock(self) -> None:
        """Serialize provisioning runs until this transaction ends."""


class UnitOfWorkFactory(Protocol):
    """Callable returning a fresh unit of work."""

    def __call__(self, *, read_only: bool = False) -> IRbacUnitOfWork: ...
