"""DTOs for the external identity directory (no dependency on ORM)."""

from dataclasses import dataclass

from sppg_rbac.domain.enums import UserType


@dataclass(frozen=True)
class IdentityResult:
    """Resolved caller identity as seen by the authorization subsystem."""

    user_id: str
    tenant_id: str | None
    user_type: UserType
    is_active: bool = True
    email: str | None = None

    @property
    def is_platform_admin(self) -> bool:
        return self.user_type == UserType.PLATFORM_ADMIN
