"""Permission API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class PermissionResponse(BaseModel):
    """Permission list/detail response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    module: str
    action: str
    description: str | None


class RolePermissionsUpdate(BaseModel):
    """Request body for PUT /roles/{role_id}/permissions (full replace)."""

    permission_names: list[str] = Field(default_factory=list, max_length=200)


class RolePermissionsResponse(BaseModel):
    """Binding set of a role after read or replace."""

    role_id: str
    permissions: list[str]
    changed: bool | None = None
