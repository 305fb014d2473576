"""DTOs for user-role assignment (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserRoleResult:
    """Assignment read-model. Inactive rows are kept as the audit trail."""

    id: str
    user_id: str
    role_id: str
    is_active: bool
    assigned_by: str | None
    assigned_at: datetime
    deactivated_at: datetime | None = None
