"""Role-permission binding service: atomic full replacement of a role's grants."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum

from sppg_rbac.application.dtos.permission import PermissionResult
from sppg_rbac.application.dtos.role import RoleResult
from sppg_rbac.application.interfaces.unit_of_work import (
    IRbacUnitOfWork,
    UnitOfWorkFactory,
)
from sppg_rbac.application.services.base import transaction
from sppg_rbac.application.services.role_catalog import RoleCatalogService
from sppg_rbac.domain.exceptions import RoleNotFoundError, UnknownPermissionError

logger = logging.getLogger(__name__)


def normalize_permission_names(names: Iterable[str | Enum]) -> list[str]:
    """Return names as plain strings, duplicates collapsed, first-seen order kept."""
    seen: dict[str, None] = {}
    for name in names:
        value = (name.value if isinstance(name, Enum) else name).strip()
        if value:
            seen.setdefault(value, None)
    return list(seen)


class RoleBindingService:
    """Set and read the permissions a role grants."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        role_catalog: RoleCatalogService | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._role_catalog = role_catalog or RoleCatalogService(uow_factory)

    async def set_role_permissions(
        self,
        role_id: str,
        permission_names: Iterable[str | Enum],
        *,
        uow: IRbacUnitOfWork | None = None,
    ) -> bool:
        """Make the role grant exactly permission_names.

        The role row is locked for the rest of the transaction, so
        concurrent replacements on one role apply one after the other and
        the last writer wins. Users currently holding the role get their
        cached permissions invalidated.

        Returns:
            True when the grant set changed.

        Raises:
            RoleNotFoundError: Unknown role id.
            UnknownPermissionError: One or more names are not in the catalog;
                carries all of them and nothing is changed.
        """
        names = normalize_permission_names(permission_names)
        async with transaction(self._uow_factory, uow) as tx:
            role = await tx.roles.lock_for_update(role_id)
            if role is None:
                raise RoleNotFoundError(role_id)
            found = await tx.permissions.get_by_names(names)
            unknown = set(names) - {p.name for p in found}
            if unknown:
                raise UnknownPermissionError(unknown)
            changed = await tx.role_permissions.replace_permissions(
                role_id, {p.id for p in found}
            )
            if changed:
                holders = await tx.user_roles.list_active_user_ids_for_role(role_id)
                tx.invalidate_users(holders)
        if changed:
            logger.info(
                "Role permissions replaced: role=%s tenant_id=%s count=%d",
                role.code,
                role.tenant_id,
                len(found),
            )
        return changed

    async def list_permissions_for_role(self, role_id: str) -> list[PermissionResult]:
        """Return the role's permissions sorted by name; [] for an unknown role."""
        async with self._uow_factory(read_only=True) as uow:
            permissions = await uow.role_permissions.get_permissions_for_role(role_id)
        return sorted(permissions, key=lambda p: p.name)

    async def create_role_with_permissions(
        self,
        code: str | Enum,
        name: str,
        description: str | None = None,
        is_system_role: bool = False,
        tenant_id: str | None = None,
        permission_names: Iterable[str | Enum] = (),
    ) -> RoleResult:
        """Create role and bind its permissions in one transaction."""
        async with self._uow_factory() as uow:
            role = await self._role_catalog.create_role(
                code,
                name,
                description,
                is_system_role=is_system_role,
                tenant_id=tenant_id,
                uow=uow,
            )
            await self.set_role_permissions(role.id, permission_names, uow=uow)
        return role
