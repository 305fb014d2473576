"""Role API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RoleCreateRequest(BaseModel):
    """Request body for creating a role.

    tenant_id None creates a system role (platform admins only).
    """

    code: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=500)
    is_system_role: bool = False
    tenant_id: str | None = None
    permission_names: list[str] = Field(default_factory=list, max_length=200)


class RoleUpdate(BaseModel):
    """Request body for updating a role's descriptive fields."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=500)


class RoleResponse(BaseModel):
    """Role list/detail response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str | None
    code: str
    name: str
    description: str | None
    is_system_role: bool
    is_active: bool
