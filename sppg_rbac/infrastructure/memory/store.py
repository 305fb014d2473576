"""In-memory RBAC store and unit of work.

Same contracts as the SQLAlchemy implementation, for tests and for
embedding the evaluator without a database. Records are frozen DTOs, so
a transaction works on a shallow copy of the committed state and commit
is a single reference swap: readers see either the old or the new state,
never a half-applied binding set. Writers are serialized by an
asyncio.Lock; readers take no lock.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from types import TracebackType

from sppg_rbac.application.dtos.identity import IdentityResult
from sppg_rbac.application.dtos.permission import PermissionResult
from sppg_rbac.application.dtos.role import RoleResult
from sppg_rbac.application.dtos.user_role import UserRoleResult
from sppg_rbac.domain.enums import TenantStatus, UserType
from sppg_rbac.domain.exceptions import (
    DuplicateRoleError,
    ResourceNotFoundException,
    RoleNotFoundError,
    ValidationException,
)
from sppg_rbac.infrastructure.cache.permission_cache import PermissionCacheInvalidator
from sppg_rbac.shared.utils.datetime import utc_now
from sppg_rbac.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TenantRecord:
    id: str
    code: str
    name: str
    status: TenantStatus = TenantStatus.ACTIVE


@dataclass
class _State:
    tenants: dict[str, TenantRecord] = field(default_factory=dict)
    identities: dict[str, IdentityResult] = field(default_factory=dict)
    permissions: dict[str, PermissionResult] = field(default_factory=dict)
    roles: dict[str, RoleResult] = field(default_factory=dict)
    bindings: dict[str, frozenset[str]] = field(default_factory=dict)
    user_roles: dict[str, UserRoleResult] = field(default_factory=dict)

    def copy(self) -> _State:
        return _State(
            tenants=dict(self.tenants),
            identities=dict(self.identities),
            permissions=dict(self.permissions),
            roles=dict(self.roles),
            bindings=dict(self.bindings),
            user_roles=dict(self.user_roles),
        )


class _ReadOnlyError(RuntimeError):
    pass


class _MemoryRepository:
    def __init__(self, state: _State, writable: bool) -> None:
        self._state = state
        self._writable = writable

    def _check_writable(self) -> None:
        if not self._writable:
            raise _ReadOnlyError("write attempted in a read-only unit of work")


class MemoryPermissionRepository(_MemoryRepository):
    async def get_by_name(self, name: str) -> PermissionResult | None:
        return next((p for p in self._state.permissions.values() if p.name == name), None)

    async def get_by_names(self, names: Iterable[str]) -> list[PermissionResult]:
        wanted = set(names)
        return [p for p in self._state.permissions.values() if p.name in wanted]

    async def list_permissions(self, module: str | None = None) -> list[PermissionResult]:
        perms = [
            p
            for p in self._state.permissions.values()
            if module is None or p.module == module
        ]
        return sorted(perms, key=lambda p: (p.module, p.action))

    async def create_permission(
        self,
        name: str,
        module: str,
        action: str,
        description: str | None = None,
    ) -> PermissionResult:
        self._check_writable()
        if await self.get_by_name(name) is not None:
            raise ValidationException(f"Permission '{name}' already exists", "name")
        permission = PermissionResult(
            id=generate_cuid(),
            name=name,
            module=module,
            action=action,
            description=description,
        )
        self._state.permissions[permission.id] = permission
        return permission

    async def update_permission(
        self,
        permission_id: str,
        module: str,
        action: str,
        description: str | None,
    ) -> PermissionResult:
        self._check_writable()
        current = self._state.permissions.get(permission_id)
        if current is None:
            raise ResourceNotFoundException("Permission", permission_id)
        updated = replace(current, module=module, action=action, description=description)
        self._state.permissions[permission_id] = updated
        return updated


class MemoryRoleRepository(_MemoryRepository):
    async def get_by_id(self, role_id: str) -> RoleResult | None:
        return self._state.roles.get(role_id)

    async def get_by_code(self, code: str, tenant_id: str | None) -> RoleResult | None:
        for role in self._state.roles.values():
            if role.code != code or role.tenant_id != tenant_id:
                continue
            if tenant_id is None and not role.is_system_role:
                continue
            return role
        return None

    async def list_by_tenant(
        self,
        tenant_id: str,
        include_system: bool = False,
        include_inactive: bool = False,
    ) -> list[RoleResult]:
        roles = [
            r
            for r in self._state.roles.values()
            if (r.tenant_id == tenant_id or (include_system and r.is_system_role))
            and (include_inactive or r.is_active)
        ]
        return sorted(roles, key=lambda r: (not r.is_system_role, r.code))

    async def list_system_roles(self, include_inactive: bool = False) -> list[RoleResult]:
        roles = [
            r
            for r in self._state.roles.values()
            if r.is_system_role and (include_inactive or r.is_active)
        ]
        return sorted(roles, key=lambda r: r.code)

    async def create_role(
        self,
        code: str,
        name: str,
        description: str | None,
        is_system_role: bool,
        tenant_id: str | None,
    ) -> RoleResult:
        self._check_writable()
        if any(
            r.code == code and r.tenant_id == tenant_id
            for r in self._state.roles.values()
        ):
            raise DuplicateRoleError(code, tenant_id)
        role = RoleResult(
            id=generate_cuid(),
            tenant_id=tenant_id,
            code=code,
            name=name,
            description=description,
            is_system_role=is_system_role,
            is_active=True,
        )
        self._state.roles[role.id] = role
        return role

    def _require(self, role_id: str) -> RoleResult:
        role = self._state.roles.get(role_id)
        if role is None:
            raise RoleNotFoundError(role_id)
        return role

    async def update_role(
        self, role_id: str, name: str, description: str | None
    ) -> RoleResult:
        self._check_writable()
        updated = replace(self._require(role_id), name=name, description=description)
        self._state.roles[role_id] = updated
        return updated

    async def set_active(self, role_id: str, is_active: bool) -> RoleResult:
        self._check_writable()
        updated = replace(self._require(role_id), is_active=is_active)
        self._state.roles[role_id] = updated
        return updated

    async def lock_for_update(self, role_id: str) -> RoleResult | None:
        # Writers already hold the store lock for the whole transaction.
        return self._state.roles.get(role_id)


class MemoryRolePermissionRepository(_MemoryRepository):
    async def get_permissions_for_role(self, role_id: str) -> list[PermissionResult]:
        ids = self._state.bindings.get(role_id, frozenset())
        perms = [self._state.permissions[pid] for pid in ids if pid in self._state.permissions]
        return sorted(perms, key=lambda p: p.name)

    async def replace_permissions(self, role_id: str, permission_ids: set[str]) -> bool:
        self._check_writable()
        new = frozenset(permission_ids)
        if self._state.bindings.get(role_id, frozenset()) == new:
            return False
        self._state.bindings[role_id] = new
        return True


class MemoryUserRoleRepository(_MemoryRepository):
    async def get(self, user_id: str, role_id: str) -> UserRoleResult | None:
        return next(
            (
                ur
                for ur in self._state.user_roles.values()
                if ur.user_id == user_id and ur.role_id == role_id
            ),
            None,
        )

    def _require(self, assignment_id: str) -> UserRoleResult:
        assignment = self._state.user_roles.get(assignment_id)
        if assignment is None:
            raise ResourceNotFoundException("UserRole", assignment_id)
        return assignment

    async def create_assignment(
        self, user_id: str, role_id: str, assigned_by: str | None
    ) -> UserRoleResult:
        self._check_writable()
        if await self.get(user_id, role_id) is not None:
            raise ValidationException("Role already assigned to user", "role_id")
        assignment = UserRoleResult(
            id=generate_cuid(),
            user_id=user_id,
            role_id=role_id,
            is_active=True,
            assigned_by=assigned_by,
            assigned_at=utc_now(),
        )
        self._state.user_roles[assignment.id] = assignment
        return assignment

    async def reactivate(
        self, assignment_id: str, assigned_by: str | None
    ) -> UserRoleResult:
        self._check_writable()
        updated = replace(
            self._require(assignment_id),
            is_active=True,
            assigned_by=assigned_by,
            assigned_at=utc_now(),
            deactivated_at=None,
        )
        self._state.user_roles[assignment_id] = updated
        return updated

    async def deactivate(self, assignment_id: str) -> UserRoleResult:
        self._check_writable()
        updated = replace(
            self._require(assignment_id), is_active=False, deactivated_at=utc_now()
        )
        self._state.user_roles[assignment_id] = updated
        return updated

    async def list_active_for_user(self, user_id: str) -> list[UserRoleResult]:
        active = [
            ur
            for ur in self._state.user_roles.values()
            if ur.user_id == user_id and ur.is_active
        ]
        return sorted(active, key=lambda ur: ur.assigned_at)

    async def count_active_for_role(self, role_id: str) -> int:
        return sum(
            1
            for ur in self._state.user_roles.values()
            if ur.role_id == role_id and ur.is_active
        )

    async def list_active_user_ids_for_role(self, role_id: str) -> list[str]:
        return [
            ur.user_id
            for ur in self._state.user_roles.values()
            if ur.role_id == role_id and ur.is_active
        ]


class MemoryIdentityDirectory(_MemoryRepository):
    async def get_identity(self, user_id: str) -> IdentityResult | None:
        identity = self._state.identities.get(user_id)
        if identity is None or not identity.is_active:
            return None
        return identity

    async def tenant_exists(self, tenant_id: str) -> bool:
        tenant = self._state.tenants.get(tenant_id)
        return tenant is not None and tenant.status == TenantStatus.ACTIVE

    async def list_active_tenant_ids(self) -> list[str]:
        tenants = sorted(self._state.tenants.values(), key=lambda t: t.code)
        return [t.id for t in tenants if t.status == TenantStatus.ACTIVE]


class MemoryPermissionResolver(_MemoryRepository):
    async def get_user_permissions(self, user_id: str) -> set[str]:
        names: set[str] = set()
        for assignment in self._state.user_roles.values():
            if assignment.user_id != user_id or not assignment.is_active:
                continue
            role = self._state.roles.get(assignment.role_id)
            if role is None or not role.is_active:
                continue
            for pid in self._state.bindings.get(role.id, frozenset()):
                permission = self._state.permissions.get(pid)
                if permission is not None:
                    names.add(permission.name)
        return names


class InMemoryRbacStore:
    """Committed state plus the writer lock. Create one per application or test."""

    def __init__(self, invalidator: PermissionCacheInvalidator | None = None) -> None:
        self.state = _State()
        self.lock = asyncio.Lock()
        self.invalidator = invalidator

    def __call__(self, *, read_only: bool = False) -> InMemoryUnitOfWork:
        """The store doubles as its own UnitOfWorkFactory."""
        return InMemoryUnitOfWork(self, read_only=read_only)

    def add_tenant(
        self,
        code: str,
        name: str | None = None,
        tenant_id: str | None = None,
        status: TenantStatus = TenantStatus.ACTIVE,
    ) -> TenantRecord:
        """Mirror a tenant from the directory (outside any transaction)."""
        tenant = TenantRecord(
            id=tenant_id or generate_cuid(), code=code, name=name or code, status=status
        )
        self.state.tenants[tenant.id] = tenant
        return tenant

    def add_identity(
        self,
        user_id: str | None = None,
        tenant_id: str | None = None,
        user_type: UserType = UserType.TENANT_USER,
        email: str | None = None,
        is_active: bool = True,
    ) -> IdentityResult:
        """Mirror an identity from the directory (outside any transaction)."""
        identity = IdentityResult(
            user_id=user_id or generate_cuid(),
            tenant_id=tenant_id,
            user_type=user_type,
            is_active=is_active,
            email=email,
        )
        self.state.identities[identity.user_id] = identity
        return identity


class InMemoryUnitOfWork:
    """IRbacUnitOfWork over InMemoryRbacStore."""

    def __init__(self, store: InMemoryRbacStore, *, read_only: bool = False) -> None:
        self._store = store
        self.read_only = read_only
        self._stale_users: set[str] = set()
        self._stale_all = False
        self._working: _State | None = None

    async def __aenter__(self) -> InMemoryUnitOfWork:
        if self.read_only:
            self._working = self._store.state
        else:
            await self._store.lock.acquire()
            self._working = self._store.state.copy()
        writable = not self.read_only
        self.permissions = MemoryPermissionRepository(self._working, writable)
        self.roles = MemoryRoleRepository(self._working, writable)
        self.role_permissions = MemoryRolePermissionRepository(self._working, writable)
        self.user_roles = MemoryUserRoleRepository(self._working, writable)
        self.identities = MemoryIdentityDirectory(self._working, writable)
        self.grants = MemoryPermissionResolver(self._working, writable)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self.read_only:
            self._working = None
            return
        try:
            if exc_type is not None:
                logger.debug("Transaction rolled back: %s", exc_type.__name__)
                return
            await self._flush_invalidations()
            assert self._working is not None
            self._store.state = self._working
            await self._flush_invalidations()
        finally:
            self._working = None
            self._store.lock.release()

    def invalidate_user(self, user_id: str) -> None:
        self._stale_users.add(user_id)

    def invalidate_users(self, user_ids: Iterable[str]) -> None:
        self._stale_users.update(user_ids)

    def invalidate_all(self) -> None:
        self._stale_all = True

    async def acquire_provisioning_lock(self) -> None:
        """No-op: writers already hold the store lock."""

    async def _flush_invalidations(self) -> None:
        invalidator = self._store.invalidator
        if invalidator is None or not (self._stale_users or self._stale_all):
            return
        await invalidator.invalidate(self._stale_users, everything=self._stale_all)
