"""Service interfaces (ports) for the application layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from sppg_rbac.application.dtos.identity import IdentityResult


class IAuthorizationEvaluator(Protocol):
    """Decision primitive used by the tenant scope guard.

    Implemented by AuthorizationService and by the read-through
    CachedPermissionEvaluator wrapping it.
    """

    async def get_identity(self, user_id: str) -> IdentityResult | None:
        """Return identity or None; never raises for missing data."""

    async def get_user_permissions(self, user_id: str) -> set[str]:
        """Return every permission name granted to user."""

    async def has_permission(self, user_id: str, permission_name: str) -> bool:
        """Return True only when an active role binding grants the permission."""

    async def is_platform_admin(self, user_id: str) -> bool:
        """Return True when the identity's trust tier is PLATFORM_ADMIN."""
