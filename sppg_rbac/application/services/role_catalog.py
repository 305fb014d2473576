"""Role catalog service: scoped role creation, upsert, retirement and listing."""

from __future__ import annotations

import logging
import re
from enum import Enum

from sppg_rbac.application.dtos.provisioning import UpsertOutcome
from sppg_rbac.application.dtos.role import RoleResult
from sppg_rbac.application.interfaces.unit_of_work import (
    IRbacUnitOfWork,
    UnitOfWorkFactory,
)
from sppg_rbac.application.services.base import transaction
from sppg_rbac.domain.exceptions import (
    DuplicateRoleError,
    InvalidScopeError,
    ResourceNotFoundException,
    RoleInUseError,
    RoleNotFoundError,
    ValidationException,
)

logger = logging.getLogger(__name__)

_ROLE_CODE_RE = re.compile(r"^[a-z0-9][a-z0-9_-]{0,63}$")


def role_code_value(code: str | Enum) -> str:
    """Return the plain string of a role code (accepts RoleCode members)."""
    return code.value if isinstance(code, Enum) else code


def validate_role_scope(is_system_role: bool, tenant_id: str | None) -> None:
    """System roles have no tenant; tenant roles have exactly one.

    Raises:
        InvalidScopeError: When the combination is inconsistent.
    """
    if is_system_role and tenant_id is not None:
        raise InvalidScopeError(
            "A system role cannot belong to a tenant",
            {"tenant_id": tenant_id},
        )
    if not is_system_role and tenant_id is None:
        raise InvalidScopeError("A tenant role requires tenant_id")


class RoleCatalogService:
    """Create, update, retire and list roles."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    async def create_role(
        self,
        code: str | Enum,
        name: str,
        description: str | None = None,
        is_system_role: bool = False,
        tenant_id: str | None = None,
        *,
        uow: IRbacUnitOfWork | None = None,
    ) -> RoleResult:
        """Create a role in the given scope.

        Raises:
            ValidationException: code is not a lowercase slug.
            InvalidScopeError: scope and is_system_role disagree.
            ResourceNotFoundException: tenant_id is not an active tenant.
            DuplicateRoleError: (code, tenant_id) already exists.
        """
        code = role_code_value(code)
        if not _ROLE_CODE_RE.fullmatch(code):
            raise ValidationException(
                "Role code must be a lowercase slug (a-z, 0-9, '-', '_')", "code"
            )
        validate_role_scope(is_system_role, tenant_id)
        async with transaction(self._uow_factory, uow) as tx:
            if tenant_id is not None and not await tx.identities.tenant_exists(tenant_id):
                raise ResourceNotFoundException("Tenant", tenant_id)
            if await tx.roles.get_by_code(code, tenant_id) is not None:
                raise DuplicateRoleError(code, tenant_id)
            role = await tx.roles.create_role(
                code=code,
                name=name,
                description=description,
                is_system_role=is_system_role,
                tenant_id=tenant_id,
            )
        logger.info(
            "Role created: code=%s tenant_id=%s system=%s",
            code,
            tenant_id,
            is_system_role,
        )
        return role

    async def upsert_role(
        self,
        code: str | Enum,
        name: str,
        description: str | None = None,
        is_system_role: bool = False,
        tenant_id: str | None = None,
        *,
        uow: IRbacUnitOfWork | None = None,
    ) -> tuple[RoleResult, UpsertOutcome]:
        """Create the role if absent, else refresh its name and description.

        A retired role stays retired; only descriptive fields are touched.
        """
        code = role_code_value(code)
        validate_role_scope(is_system_role, tenant_id)
        async with transaction(self._uow_factory, uow) as tx:
            existing = await tx.roles.get_by_code(code, tenant_id)
            if existing is None:
                role = await self.create_role(
                    code,
                    name,
                    description,
                    is_system_role=is_system_role,
                    tenant_id=tenant_id,
                    uow=tx,
                )
                return role, UpsertOutcome.CREATED
            if (existing.name, existing.description) == (name, description):
                return existing, UpsertOutcome.UNCHANGED
            updated = await tx.roles.update_role(existing.id, name, description)
            return updated, UpsertOutcome.UPDATED

    async def update_role(
        self,
        role_id: str,
        name: str,
        description: str | None = None,
        *,
        uow: IRbacUnitOfWork | None = None,
    ) -> RoleResult:
        """Rename or re-describe a role. The code never changes."""
        async with transaction(self._uow_factory, uow) as tx:
            if await tx.roles.get_by_id(role_id) is None:
                raise RoleNotFoundError(role_id)
            return await tx.roles.update_role(role_id, name, description)

    async def retire_role(
        self, role_id: str, *, uow: IRbacUnitOfWork | None = None
    ) -> RoleResult:
        """Mark a role inactive. Roles are never deleted.

        Raises:
            RoleNotFoundError: Unknown role id.
            RoleInUseError: Active assignments still reference the role.
        """
        async with transaction(self._uow_factory, uow) as tx:
            role = await tx.roles.lock_for_update(role_id)
            if role is None:
                raise RoleNotFoundError(role_id)
            active = await tx.user_roles.count_active_for_role(role_id)
            if active:
                raise RoleInUseError(role_id, active)
            if not role.is_active:
                return role
            retired = await tx.roles.set_active(role_id, False)
        logger.info("Role retired: id=%s code=%s", role_id, role.code)
        return retired

    async def get_role(self, role_id: str) -> RoleResult | None:
        async with self._uow_factory(read_only=True) as uow:
            return await uow.roles.get_by_id(role_id)

    async def get_role_by_code(
        self, code: str | Enum, tenant_id: str | None
    ) -> RoleResult | None:
        async with self._uow_factory(read_only=True) as uow:
            return await uow.roles.get_by_code(role_code_value(code), tenant_id)

    async def list_roles_for_tenant(
        self,
        tenant_id: str,
        include_system: bool = False,
        include_inactive: bool = False,
    ) -> list[RoleResult]:
        """Return the tenant's roles; system roles only when include_system."""
        async with self._uow_factory(read_only=True) as uow:
            return await uow.roles.list_by_tenant(
                tenant_id,
                include_system=include_system,
                include_inactive=include_inactive,
            )

    async def list_system_roles(self, include_inactive: bool = False) -> list[RoleResult]:
        async with self._uow_factory(read_only=True) as uow:
            return await uow.roles.list_system_roles(include_inactive=include_inactive)
