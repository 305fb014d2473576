"""DTOs for permission use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PermissionResult:
    """Permission read-model (result of get_by_name, upsert_permission, etc.)."""

    id: str
    name: str
    module: str
    action: str
    description: str | None
