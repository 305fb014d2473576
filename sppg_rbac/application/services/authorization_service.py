"""Authorization evaluator: the single "may this identity do this" primitive.

Every answer is recomputed from the store; there is no cache in here (see
CachedPermissionEvaluator for the optional read-through wrapper). Missing
identity, role or binding always yields "no", never an exception.

Platform admin status is a trust tier on the identity, not a permission.
has_permission never consults it: a platform admin holds exactly the
permissions its roles grant.
"""

from __future__ import annotations

from enum import Enum

from sppg_rbac.application.dtos.identity import IdentityResult
from sppg_rbac.application.interfaces.unit_of_work import (
    IRbacUnitOfWork,
    UnitOfWorkFactory,
)
from sppg_rbac.application.services.role_catalog import role_code_value
from sppg_rbac.domain.exceptions import AuthorizationException


def permission_value(permission_name: str | Enum) -> str:
    """Return the plain string of a permission (accepts PermissionName members)."""
    return permission_name.value if isinstance(permission_name, Enum) else permission_name


class AuthorizationService:
    """Read-only permission checks against the authoritative store."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    async def _permissions(self, uow: IRbacUnitOfWork, user_id: str) -> set[str]:
        identity = await uow.identities.get_identity(user_id)
        if identity is None:
            return set()
        return await uow.grants.get_user_permissions(user_id)

    async def get_identity(self, user_id: str | None) -> IdentityResult | None:
        if not user_id:
            return None
        async with self._uow_factory(read_only=True) as uow:
            return await uow.identities.get_identity(user_id)

    async def get_user_permissions(self, user_id: str | None) -> set[str]:
        """Return the union of permission names over the user's active roles."""
        if not user_id:
            return set()
        async with self._uow_factory(read_only=True) as uow:
            return await self._permissions(uow, user_id)

    async def has_permission(
        self, user_id: str | None, permission_name: str | Enum
    ) -> bool:
        """Return True only if an active assignment of an active role grants it."""
        name = permission_value(permission_name)
        if not user_id or not name:
            return False
        return name in await self.get_user_permissions(user_id)

    async def is_platform_admin(self, user_id: str | None) -> bool:
        """Return True for PLATFORM_ADMIN identities, regardless of roles."""
        identity = await self.get_identity(user_id)
        return identity is not None and identity.is_platform_admin

    async def has_role(
        self,
        user_id: str | None,
        role_code: str | Enum,
        tenant_scope: str | None = None,
    ) -> bool:
        """Return True if the user actively holds the active role (code, tenant_scope)."""
        if not user_id:
            return False
        async with self._uow_factory(read_only=True) as uow:
            if await uow.identities.get_identity(user_id) is None:
                return False
            role = await uow.roles.get_by_code(role_code_value(role_code), tenant_scope)
            if role is None or not role.is_active:
                return False
            assignment = await uow.user_roles.get(user_id, role.id)
        return assignment is not None and assignment.is_active

    async def require_permission(
        self, user_id: str | None, permission_name: str | Enum
    ) -> None:
        """Raise AuthorizationException unless has_permission."""
        if not await self.has_permission(user_id, permission_name):
            raise AuthorizationException(permission=permission_value(permission_name))
