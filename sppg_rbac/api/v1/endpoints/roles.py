"""Roles API: create, list, get, update, retire, and role-permission bindings.

Tenant roles are checked against the role's own tenant. System roles can
be read by anyone holding role.read; changing them needs a platform admin.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from sppg_rbac.api.v1.dependencies import (
    get_guard,
    get_role_binding,
    get_role_catalog,
    get_tenant_id,
    require_caller,
)
from sppg_rbac.application.dtos.identity import IdentityResult
from sppg_rbac.application.dtos.role import RoleResult
from sppg_rbac.application.services import (
    RoleBindingService,
    RoleCatalogService,
    TenantScopeGuard,
)
from sppg_rbac.core.limiter import limit_writes
from sppg_rbac.domain.exceptions import RoleNotFoundError
from sppg_rbac.domain.registry import PermissionName
from sppg_rbac.schemas.permission import (
    RolePermissionsResponse,
    RolePermissionsUpdate,
)
from sppg_rbac.schemas.role import RoleCreateRequest, RoleResponse, RoleUpdate

router = APIRouter()


async def _authorize_scope(
    guard: TenantScopeGuard,
    caller: IdentityResult,
    permission: PermissionName,
    tenant_id: str | None,
    mutate: bool,
) -> None:
    await guard.enforce(caller.user_id, permission, tenant_id)
    if mutate and tenant_id is None:
        await guard.enforce_platform_admin(caller.user_id)


async def _load_role(
    role_id: str,
    catalog: RoleCatalogService,
    guard: TenantScopeGuard,
    caller: IdentityResult,
    permission: PermissionName,
    mutate: bool = False,
) -> RoleResult:
    role = await catalog.get_role(role_id)
    if role is None:
        raise RoleNotFoundError(role_id)
    await _authorize_scope(guard, caller, permission, role.tenant_id, mutate)
    return role


@router.post("", response_model=RoleResponse, status_code=201)
@limit_writes
async def create_role(
    request: Request,
    body: RoleCreateRequest,
    caller: Annotated[IdentityResult, Depends(require_caller)],
    guard: Annotated[TenantScopeGuard, Depends(get_guard)],
    binding: Annotated[RoleBindingService, Depends(get_role_binding)],
):
    """Create a role and bind its permissions in one transaction."""
    await _authorize_scope(
        guard, caller, PermissionName.ROLE_MANAGE, body.tenant_id, mutate=True
    )
    role = await binding.create_role_with_permissions(
        body.code,
        body.name,
        body.description,
        is_system_role=body.is_system_role,
        tenant_id=body.tenant_id,
        permission_names=body.permission_names,
    )
    return RoleResponse.model_validate(role)


@router.get("", response_model=list[RoleResponse])
async def list_roles(
    caller: Annotated[IdentityResult, Depends(require_caller)],
    tenant_id: Annotated[str | None, Depends(get_tenant_id)],
    guard: Annotated[TenantScopeGuard, Depends(get_guard)],
    catalog: Annotated[RoleCatalogService, Depends(get_role_catalog)],
    include_system: bool = False,
    include_inactive: bool = False,
):
    """List the header tenant's roles; without a tenant, list system roles."""
    await _authorize_scope(guard, caller, PermissionName.ROLE_READ, tenant_id, mutate=False)
    if tenant_id is None:
        roles = await catalog.list_system_roles(include_inactive=include_inactive)
    else:
        roles = await catalog.list_roles_for_tenant(
            tenant_id,
            include_system=include_system,
            include_inactive=include_inactive,
        )
    return [RoleResponse.model_validate(r) for r in roles]


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: str,
    caller: Annotated[IdentityResult, Depends(require_caller)],
    guard: Annotated[TenantScopeGuard, Depends(get_guard)],
    catalog: Annotated[RoleCatalogService, Depends(get_role_catalog)],
):
    role = await _load_role(role_id, catalog, guard, caller, PermissionName.ROLE_READ)
    return RoleResponse.model_validate(role)


@router.patch("/{role_id}", response_model=RoleResponse)
@limit_writes
async def update_role(
    request: Request,
    role_id: str,
    body: RoleUpdate,
    caller: Annotated[IdentityResult, Depends(require_caller)],
    guard: Annotated[TenantScopeGuard, Depends(get_guard)],
    catalog: Annotated[RoleCatalogService, Depends(get_role_catalog)],
):
    """Update name and/or description; omitted fields keep their value."""
    role = await _load_role(
        role_id, catalog, guard, caller, PermissionName.ROLE_MANAGE, mutate=True
    )
    updated = await catalog.update_role(
        role_id,
        body.name if body.name is not None else role.name,
        body.description if "description" in body.model_fields_set else role.description,
    )
    return RoleResponse.model_validate(updated)


@router.delete("/{role_id}", response_model=RoleResponse)
@limit_writes
async def retire_role(
    request: Request,
    role_id: str,
    caller: Annotated[IdentityResult, Depends(require_caller)],
    guard: Annotated[TenantScopeGuard, Depends(get_guard)],
    catalog: Annotated[RoleCatalogService, Depends(get_role_catalog)],
):
    """Retire (deactivate) a role. 409 while users still hold it."""
    await _load_role(
        role_id, catalog, guard, caller, PermissionName.ROLE_MANAGE, mutate=True
    )
    retired = await catalog.retire_role(role_id)
    return RoleResponse.model_validate(retired)


@router.get("/{role_id}/permissions", response_model=RolePermissionsResponse)
async def list_role_permissions(
    role_id: str,
    caller: Annotated[IdentityResult, Depends(require_caller)],
    guard: Annotated[TenantScopeGuard, Depends(get_guard)],
    catalog: Annotated[RoleCatalogService, Depends(get_role_catalog)],
    binding: Annotated[RoleBindingService, Depends(get_role_binding)],
):
    await _load_role(role_id, catalog, guard, caller, PermissionName.ROLE_READ)
    permissions = await binding.list_permissions_for_role(role_id)
    return RolePermissionsResponse(
        role_id=role_id, permissions=[p.name for p in permissions]
    )


@router.put("/{role_id}/permissions", response_model=RolePermissionsResponse)
@limit_writes
async def replace_role_permissions(
    request: Request,
    role_id: str,
    body: RolePermissionsUpdate,
    caller: Annotated[IdentityResult, Depends(require_caller)],
    guard: Annotated[TenantScopeGuard, Depends(get_guard)],
    catalog: Annotated[RoleCatalogService, Depends(get_role_catalog)],
    binding: Annotated[RoleBindingService, Depends(get_role_binding)],
):
    """Replace the role's grant set. Unknown names reject the whole request."""
    await _load_role(
        role_id, catalog, guard, caller, PermissionName.ROLE_MANAGE, mutate=True
    )
    changed = await binding.set_role_permissions(role_id, body.permission_names)
    permissions = await binding.list_permissions_for_role(role_id)
    return RolePermissionsResponse(
        role_id=role_id, permissions=[p.name for p in permissions], changed=changed
    )
