"""DTOs for role use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RoleResult:
    """Role read-model. tenant_id is None for system (platform-wide) roles."""

    id: str
    tenant_id: str | None
    code: str
    name: str
    description: str | None
    is_system_role: bool
    is_active: bool
