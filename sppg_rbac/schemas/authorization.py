"""Authorization check API schemas."""

from pydantic import BaseModel, Field

from sppg_rbac.domain.enums import AccessDecision


class AuthorizeRequest(BaseModel):
    """Request body for POST /authorize."""

    user_id: str = Field(..., min_length=1)
    permission: str = Field(..., min_length=3, max_length=128)
    tenant_id: str | None = None


class AuthorizeResponse(BaseModel):
    """Decision for one (user, permission, tenant) triple."""

    user_id: str
    permission: str
    tenant_id: str | None
    decision: AccessDecision
    allowed: bool


class UserPermissionsResponse(BaseModel):
    """Effective permission names of a user."""

    user_id: str
    is_platform_admin: bool
    permissions: list[str]
