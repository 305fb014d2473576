"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
Both the SQLAlchemy and the in-memory stores implement every protocol here.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from sppg_rbac.application.dtos.identity import IdentityResult
    from sppg_rbac.application.dtos.permission import PermissionResult
    from sppg_rbac.application.dtos.role import RoleResult
    from sppg_rbac.application.dtos.user_role import UserRoleResult


class IPermissionRepository(Protocol):
    """Protocol for the permission catalog (DIP). Permissions are never deleted."""

    async def get_by_name(self, name: str) -> PermissionResult | None:
        """Return permission by globally unique name."""

    async def get_by_names(self, names: Iterable[str]) -> list[PermissionResult]:
        """Return the permissions that exist among names (unknown names are skipped)."""

    async def list_permissions(self, module: str | None = None) -> list[PermissionResult]:
        """Return all permissions, optionally only one module's."""

    async def create_permission(
        self,
        name: str,
        module: str,
        action: str,
        description: str | None = None,
    ) -> PermissionResult:
        """Insert a permission."""

    async def update_permission(
        self,
        permission_id: str,
        module: str,
        action: str,
        description: str | None,
    ) -> PermissionResult:
        """Update descriptive fields; bindings reference the id and are unaffected."""


class IRoleRepository(Protocol):
    """Protocol for the role catalog (DIP)."""

    async def get_by_id(self, role_id: str) -> RoleResult | None:
        """Return role by id, active or retired."""

    async def get_by_code(self, code: str, tenant_id: str | None) -> RoleResult | None:
        """Return role by (code, tenant_id); tenant_id None resolves system roles only."""

    async def list_by_tenant(
        self,
        tenant_id: str,
        include_system: bool = False,
        include_inactive: bool = False,
    ) -> list[RoleResult]:
        """Return the tenant's roles, plus system roles when include_system."""

    async def list_system_roles(self, include_inactive: bool = False) -> list[RoleResult]:
        """Return platform-wide roles."""

    async def create_role(
        self,
        code: str,
        name: str,
        description: str | None,
        is_system_role: bool,
        tenant_id: str | None,
    ) -> RoleResult:
        """Insert a role. Raises DuplicateRoleError when (code, tenant_id) exists."""

    async def update_role(
        self, role_id: str, name: str, description: str | None
    ) -> RoleResult:
        """Update descriptive fields (name, description)."""

    async def set_active(self, role_id: str, is_active: bool) -> RoleResult:
        """Retire (False) or reactivate (True) a role."""

    async def lock_for_update(self, role_id: str) -> RoleResult | None:
        """Return role and hold a write lock on it until the transaction ends."""


class IRolePermissionRepository(Protocol):
    """Protocol for role-permission bindings (DIP)."""

    async def get_permissions_for_role(self, role_id: str) -> list[PermissionResult]:
        """Return the permissions bound to role."""

    async def replace_permissions(self, role_id: str, permission_ids: set[str]) -> bool:
        """Make the role's binding set exactly permission_ids.

        Deletes bindings not in the set and inserts the missing ones in the
        current transaction. Returns True when anything changed.
        """


class IUserRoleRepository(Protocol):
    """Protocol for user-role assignments (DIP). Rows are never deleted."""

    async def get(self, user_id: str, role_id: str) -> UserRoleResult | None:
        """Return the assignment row for (user, role), active or not."""

    async def create_assignment(
        self, user_id: str, role_id: str, assigned_by: str | None
    ) -> UserRoleResult:
        """Insert an active assignment."""

    async def reactivate(
        self, assignment_id: str, assigned_by: str | None
    ) -> UserRoleResult:
        """Flip an inactive row back to active, refreshing assigned_by/assigned_at."""

    async def deactivate(self, assignment_id: str) -> UserRoleResult:
        """Set is_active False and stamp deactivated_at."""

    async def list_active_for_user(self, user_id: str) -> list[UserRoleResult]:
        """Return the user's active assignments."""

    async def count_active_for_role(self, role_id: str) -> int:
        """Return how many active assignments reference role."""

    async def list_active_user_ids_for_role(self, role_id: str) -> list[str]:
        """Return ids of users currently holding role."""


class IIdentityDirectory(Protocol):
    """Read access to the external user/tenant directory (DIP)."""

    async def get_identity(self, user_id: str) -> IdentityResult | None:
        """Return active identity or None (unknown or deactivated user)."""

    async def tenant_exists(self, tenant_id: str) -> bool:
        """Return True if tenant exists and is active."""

    async def list_active_tenant_ids(self) -> list[str]:
        """Return ids of all active tenants."""


class IPermissionResolver(Protocol):
    """Read query that unions the permission names granted to a user."""

    async def get_user_permissions(self, user_id: str) -> set[str]:
        """Return names granted through active assignments of active roles."""
