"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the unit of work factory, RBAC services
and caller identity. The unit of work factory, evaluator and guard are
built once in the lifespan and stored on app.state; tests override
get_uow_factory (and optionally get_evaluator) instead.

Identity is resolved upstream: the gateway forwards the authenticated
user id in the X-User-ID header (name configurable).
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Annotated, Any

from fastapi import Depends, Request

from sppg_rbac.application.dtos.identity import IdentityResult
from sppg_rbac.application.interfaces import IAuthorizationEvaluator, UnitOfWorkFactory
from sppg_rbac.application.services import (
    AuthorizationService,
    PermissionCatalogService,
    ProvisioningLoader,
    RoleBindingService,
    RoleCatalogService,
    TenantScopeGuard,
    UserRoleAssignmentService,
)
from sppg_rbac.core.config import get_settings
from sppg_rbac.domain.catalog import CANONICAL_DEFINITION
from sppg_rbac.domain.exceptions import AuthenticationException
from sppg_rbac.domain.registry import PermissionName
from sppg_rbac.shared.context import set_current_user


def get_uow_factory(request: Request) -> UnitOfWorkFactory:
    """Unit of work factory created in the lifespan."""
    return request.app.state.uow_factory


def get_evaluator(
    request: Request,
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
) -> IAuthorizationEvaluator:
    """Evaluator from app.state (cache-wrapped when enabled), else uncached."""
    evaluator = getattr(request.app.state, "evaluator", None)
    if evaluator is None:
        return AuthorizationService(uow_factory)
    return evaluator


def get_guard(
    evaluator: Annotated[IAuthorizationEvaluator, Depends(get_evaluator)],
) -> TenantScopeGuard:
    return TenantScopeGuard(evaluator)


def get_permission_catalog(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
) -> PermissionCatalogService:
    return PermissionCatalogService(uow_factory)


def get_role_catalog(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
) -> RoleCatalogService:
    return RoleCatalogService(uow_factory)


def get_role_binding(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
    role_catalog: Annotated[RoleCatalogService, Depends(get_role_catalog)],
) -> RoleBindingService:
    return RoleBindingService(uow_factory, role_catalog)


def get_assignment_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
) -> UserRoleAssignmentService:
    return UserRoleAssignmentService(uow_factory)


def get_provisioning_loader(
    request: Request,
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
) -> ProvisioningLoader:
    definition = getattr(request.app.state, "definition", None) or CANONICAL_DEFINITION
    return ProvisioningLoader(uow_factory, definition)


def get_current_user_id(request: Request) -> str | None:
    """Caller user id from the upstream identity header (None when absent)."""
    value = request.headers.get(get_settings().user_id_header_name, "")
    return value.strip() or None


def get_tenant_id(request: Request) -> str | None:
    """Target tenant from the tenant header (None for platform-level calls)."""
    value = request.headers.get(get_settings().tenant_header_name, "")
    return value.strip() or None


def require_permission(
    permission: PermissionName,
) -> Callable[..., Coroutine[Any, Any, IdentityResult]]:
    """Dependency factory: caller must hold permission inside the header tenant.

    Sets the acting user on the request context so assignments record
    assigned_by.
    """

    async def _require(
        user_id: Annotated[str | None, Depends(get_current_user_id)],
        tenant_id: Annotated[str | None, Depends(get_tenant_id)],
        guard: Annotated[TenantScopeGuard, Depends(get_guard)],
    ) -> IdentityResult:
        identity = await guard.enforce(user_id, permission, tenant_id)
        set_current_user(identity.user_id)
        return identity

    return _require


async def require_platform_admin(
    user_id: Annotated[str | None, Depends(get_current_user_id)],
    guard: Annotated[TenantScopeGuard, Depends(get_guard)],
) -> IdentityResult:
    """Caller must be a platform admin (trust tier, no named permission)."""
    identity = await guard.enforce_platform_admin(user_id)
    set_current_user(identity.user_id)
    return identity


async def require_caller(
    user_id: Annotated[str | None, Depends(get_current_user_id)],
    evaluator: Annotated[IAuthorizationEvaluator, Depends(get_evaluator)],
) -> IdentityResult:
    """Caller must be an active identity; endpoints check permissions themselves."""
    identity = await evaluator.get_identity(user_id) if user_id else None
    if identity is None:
        raise AuthenticationException()
    set_current_user(identity.user_id)
    return identity
