"""User-roles API: list, assign and revoke roles of a directory identity."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from sppg_rbac.api.v1.dependencies import (
    get_assignment_service,
    get_evaluator,
    get_guard,
    require_caller,
)
from sppg_rbac.application.dtos.identity import IdentityResult
from sppg_rbac.application.interfaces import IAuthorizationEvaluator
from sppg_rbac.application.services import TenantScopeGuard, UserRoleAssignmentService
from sppg_rbac.core.limiter import limit_writes
from sppg_rbac.domain.exceptions import IdentityNotFoundError
from sppg_rbac.domain.registry import PermissionName
from sppg_rbac.schemas.authorization import UserPermissionsResponse
from sppg_rbac.schemas.role import RoleResponse
from sppg_rbac.schemas.user_role import (
    UserRoleAssignRequest,
    UserRoleResponse,
    UserRoleRevokeResponse,
)

router = APIRouter()


async def _authorize_for_target(
    guard: TenantScopeGuard,
    evaluator: IAuthorizationEvaluator,
    caller: IdentityResult,
    user_id: str,
    permission: PermissionName,
) -> IdentityResult:
    target = await evaluator.get_identity(user_id)
    if target is None:
        raise IdentityNotFoundError(user_id)
    await guard.enforce(caller.user_id, permission, target.tenant_id)
    if target.tenant_id is None:
        await guard.enforce_platform_admin(caller.user_id)
    return target


@router.get("/{user_id}/roles", response_model=list[RoleResponse])
async def list_user_roles(
    user_id: str,
    caller: Annotated[IdentityResult, Depends(require_caller)],
    guard: Annotated[TenantScopeGuard, Depends(get_guard)],
    evaluator: Annotated[IAuthorizationEvaluator, Depends(get_evaluator)],
    service: Annotated[UserRoleAssignmentService, Depends(get_assignment_service)],
):
    """List active roles the user holds. Callers may always list their own."""
    if caller.user_id != user_id:
        await _authorize_for_target(
            guard, evaluator, caller, user_id, PermissionName.ROLE_READ
        )
    roles = await service.list_roles_for_user(user_id)
    return [RoleResponse.model_validate(r) for r in roles]


@router.get("/{user_id}/permissions", response_model=UserPermissionsResponse)
async def list_user_permissions(
    user_id: str,
    caller: Annotated[IdentityResult, Depends(require_caller)],
    guard: Annotated[TenantScopeGuard, Depends(get_guard)],
    evaluator: Annotated[IAuthorizationEvaluator, Depends(get_evaluator)],
):
    """Effective permissions of the user."""
    if caller.user_id == user_id:
        target = caller
    else:
        target = await _authorize_for_target(
            guard, evaluator, caller, user_id, PermissionName.ROLE_READ
        )
    permissions = await evaluator.get_user_permissions(user_id)
    return UserPermissionsResponse(
        user_id=user_id,
        is_platform_admin=target.is_platform_admin,
        permissions=sorted(permissions),
    )


@router.post("/{user_id}/roles", response_model=UserRoleResponse, status_code=201)
@limit_writes
async def assign_role(
    request: Request,
    user_id: str,
    body: UserRoleAssignRequest,
    caller: Annotated[IdentityResult, Depends(require_caller)],
    guard: Annotated[TenantScopeGuard, Depends(get_guard)],
    evaluator: Annotated[IAuthorizationEvaluator, Depends(get_evaluator)],
    service: Annotated[UserRoleAssignmentService, Depends(get_assignment_service)],
):
    """Assign role (code, tenant_id) to the user. Idempotent."""
    await _authorize_for_target(
        guard, evaluator, caller, user_id, PermissionName.ROLE_ASSIGN
    )
    if body.tenant_id is None:
        await guard.enforce_platform_admin(caller.user_id)
    assignment = await service.assign_role(
        user_id, body.role_code, body.tenant_id, assigned_by=caller.user_id
    )
    return UserRoleResponse.model_validate(assignment)


@router.delete("/{user_id}/roles/{role_code}", response_model=UserRoleRevokeResponse)
@limit_writes
async def revoke_role(
    request: Request,
    user_id: str,
    role_code: str,
    caller: Annotated[IdentityResult, Depends(require_caller)],
    guard: Annotated[TenantScopeGuard, Depends(get_guard)],
    evaluator: Annotated[IAuthorizationEvaluator, Depends(get_evaluator)],
    service: Annotated[UserRoleAssignmentService, Depends(get_assignment_service)],
    tenant_id: str | None = None,
):
    """Revoke the user's role; revoked is False when nothing was active."""
    await _authorize_for_target(
        guard, evaluator, caller, user_id, PermissionName.ROLE_ASSIGN
    )
    if tenant_id is None:
        await guard.enforce_platform_admin(caller.user_id)
    revoked = await service.revoke_role(user_id, role_code, tenant_id)
    return UserRoleRevokeResponse(user_id=user_id, role_code=role_code, revoked=revoked)
