"""User-role assignment service: scoped assign, revoke and listing.

Assignment rows are never deleted. Revocation flips is_active off;
re-assignment flips the same row back on.
"""

from __future__ import annotations

import logging
from enum import Enum

from sppg_rbac.application.dtos.role import RoleResult
from sppg_rbac.application.dtos.user_role import UserRoleResult
from sppg_rbac.application.interfaces.unit_of_work import (
    IRbacUnitOfWork,
    UnitOfWorkFactory,
)
from sppg_rbac.application.services.base import transaction
from sppg_rbac.application.services.role_catalog import role_code_value
from sppg_rbac.domain.exceptions import (
    IdentityNotFoundError,
    InvalidScopeError,
    RoleNotFoundError,
    TenantMismatchError,
)
from sppg_rbac.shared.context import get_current_actor_id, get_current_actor_type

logger = logging.getLogger(__name__)


class UserRoleAssignmentService:
    """Grant and revoke roles for identities from the external directory."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    async def assign_role(
        self,
        user_id: str,
        role_code: str | Enum,
        tenant_scope: str | None = None,
        assigned_by: str | None = None,
        *,
        uow: IRbacUnitOfWork | None = None,
    ) -> UserRoleResult:
        """Assign the role (code, tenant_scope) to user.

        tenant_scope None resolves system roles only. Assigning a role the
        user already holds returns the existing row unchanged; an inactive
        row is reactivated. assigned_by defaults to the acting user of the
        current request.

        Raises:
            IdentityNotFoundError: user_id is not an active identity.
            RoleNotFoundError: No active role with that code in that scope.
            InvalidScopeError: System role for a non platform admin.
            TenantMismatchError: Tenant role from another tenant than the user's.
        """
        code = role_code_value(role_code)
        if assigned_by is None:
            assigned_by = get_current_actor_id()
        async with transaction(self._uow_factory, uow) as tx:
            identity = await tx.identities.get_identity(user_id)
            if identity is None:
                raise IdentityNotFoundError(user_id)
            role = await tx.roles.get_by_code(code, tenant_scope)
            if role is None or not role.is_active:
                raise RoleNotFoundError(code, tenant_scope)
            if role.is_system_role:
                if not identity.is_platform_admin:
                    raise InvalidScopeError(
                        f"System role '{code}' can only be assigned to a platform admin",
                        {"user_id": user_id, "role_code": code},
                    )
            elif role.tenant_id != identity.tenant_id:
                raise TenantMismatchError(user_id, identity.tenant_id, role.tenant_id)

            # Same lock retire_role takes: assignments and retirement serialize.
            locked = await tx.roles.lock_for_update(role.id)
            if locked is None or not locked.is_active:
                raise RoleNotFoundError(code, tenant_scope)
            existing = await tx.user_roles.get(user_id, role.id)
            if existing is not None and existing.is_active:
                return existing
            if existing is not None:
                assignment = await tx.user_roles.reactivate(existing.id, assigned_by)
                action = "reactivated"
            else:
                assignment = await tx.user_roles.create_assignment(
                    user_id, role.id, assigned_by
                )
                action = "assigned"
            tx.invalidate_user(user_id)
        logger.info(
            "Role %s: user=%s role=%s tenant_id=%s by=%s (%s)",
            action,
            user_id,
            code,
            tenant_scope,
            assigned_by,
            get_current_actor_type().value,
        )
        return assignment

    async def revoke_role(
        self,
        user_id: str,
        role_code: str | Enum,
        tenant_scope: str | None = None,
        *,
        uow: IRbacUnitOfWork | None = None,
    ) -> bool:
        """Deactivate the user's assignment of (code, tenant_scope).

        Returns:
            True if an active assignment was revoked; False (no-op) when the
            role is unknown or the user does not actively hold it.
        """
        code = role_code_value(role_code)
        async with transaction(self._uow_factory, uow) as tx:
            role = await tx.roles.get_by_code(code, tenant_scope)
            if role is None:
                return False
            existing = await tx.user_roles.get(user_id, role.id)
            if existing is None or not existing.is_active:
                return False
            await tx.user_roles.deactivate(existing.id)
            tx.invalidate_user(user_id)
        logger.info(
            "Role revoked: user=%s role=%s tenant_id=%s", user_id, code, tenant_scope
        )
        return True

    async def list_roles_for_user(self, user_id: str) -> list[RoleResult]:
        """Return active roles the user actively holds."""
        async with self._uow_factory(read_only=True) as uow:
            assignments = await uow.user_roles.list_active_for_user(user_id)
            roles: list[RoleResult] = []
            for assignment in assignments:
                role = await uow.roles.get_by_id(assignment.role_id)
                if role is not None and role.is_active:
                    roles.append(role)
        return sorted(roles, key=lambda r: (r.tenant_id or "", r.code))

    async def list_assignments_for_user(self, user_id: str) -> list[UserRoleResult]:
        async with self._uow_factory(read_only=True) as uow:
            return await uow.user_roles.list_active_for_user(user_id)
