"""Authorization decision API for upstream services (policy decision point)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from sppg_rbac.api.v1.dependencies import get_guard
from sppg_rbac.application.services import TenantScopeGuard
from sppg_rbac.schemas.authorization import AuthorizeRequest, AuthorizeResponse

router = APIRouter()


@router.post("", response_model=AuthorizeResponse)
async def authorize(
    body: AuthorizeRequest,
    guard: Annotated[TenantScopeGuard, Depends(get_guard)],
):
    """Decide (user, permission, tenant). Always 200; the decision is in the body."""
    decision = await guard.authorize(body.user_id, body.permission, body.tenant_id)
    return AuthorizeResponse(
        user_id=body.user_id,
        permission=body.permission,
        tenant_id=body.tenant_id,
        decision=decision,
        allowed=decision.allowed,
    )
