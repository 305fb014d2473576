"""Provisioning definition file schema and report response.

The definition file is JSON:

    {
      "permissions": [{"name": "menu.create", "description": "..."}],
      "roles": [
        {"code": "staff-admin", "name": "Staff Admin",
         "is_system_role": false, "permissions": ["menu.view"]}
      ]
    }

module and action are derived from the permission name when omitted.
"""

from pydantic import BaseModel, ConfigDict, Field

from sppg_rbac.domain.provisioning import (
    PermissionSpec,
    ProvisioningDefinition,
    RoleSpec,
)


class PermissionEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=3, max_length=128)
    module: str | None = Field(default=None, max_length=64)
    action: str | None = Field(default=None, max_length=64)
    description: str = ""

    def to_domain(self) -> PermissionSpec:
        spec = PermissionSpec.from_name(self.name, self.description)
        if self.module is None and self.action is None:
            return spec
        return PermissionSpec(
            name=self.name,
            module=self.module or spec.module,
            action=self.action or spec.action,
            description=self.description,
        )


class RoleEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    is_system_role: bool = False
    permissions: list[str] = Field(default_factory=list)

    def to_domain(self) -> RoleSpec:
        return RoleSpec(
            code=self.code,
            name=self.name,
            description=self.description,
            is_system_role=self.is_system_role,
            permissions=tuple(self.permissions),
        )


class ProvisioningDefinitionFile(BaseModel):
    """Top-level document of a provisioning definition file."""

    model_config = ConfigDict(extra="forbid")

    permissions: list[PermissionEntry] = Field(default_factory=list)
    roles: list[RoleEntry] = Field(default_factory=list)

    def to_domain(self) -> ProvisioningDefinition:
        return ProvisioningDefinition(
            permissions=tuple(p.to_domain() for p in self.permissions),
            roles=tuple(r.to_domain() for r in self.roles),
        )


class ProvisioningRequest(BaseModel):
    """Request body for POST /provisioning."""

    tenant_ids: list[str] = Field(default_factory=list)
    all_tenants: bool = False


class ProvisioningReportResponse(BaseModel):
    """Counts of what a provisioning run changed."""

    model_config = ConfigDict(from_attributes=True)

    permissions_created: int
    permissions_updated: int
    roles_created: int
    roles_updated: int
    bindings_replaced: int
    tenants: list[str]
    changed: bool
