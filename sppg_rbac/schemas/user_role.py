"""User-role assignment API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserRoleAssignRequest(BaseModel):
    """Request body for POST /users/{user_id}/roles.

    tenant_id None targets a system role.
    """

    role_code: str = Field(..., min_length=1, max_length=64)
    tenant_id: str | None = None


class UserRoleResponse(BaseModel):
    """One assignment row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    role_id: str
    is_active: bool
    assigned_by: str | None
    assigned_at: datetime
    deactivated_at: datetime | None = None


class UserRoleRevokeResponse(BaseModel):
    """Result of DELETE /users/{user_id}/roles/{role_code}."""

    user_id: str
    role_code: str
    revoked: bool
