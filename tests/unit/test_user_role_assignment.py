"""UserRoleAssignmentService: scoped assign, idempotence, revoke."""

import asyncio
import dataclasses
from unittest.mock import patch

import pytest

from sppg_rbac.application.services import (
    AuthorizationService,
    RoleCatalogService,
    UserRoleAssignmentService,
)
from sppg_rbac.domain.exceptions import (
    IdentityNotFoundError,
    InvalidScopeError,
    RoleNotFoundError,
    TenantMismatchError,
)
from sppg_rbac.domain.registry import PermissionName, RoleCode
from sppg_rbac.infrastructure.memory.store import MemoryRoleRepository
from sppg_rbac.shared.context import clear_current_user, set_current_user
from conftest import Seeded


async def test_menu_approve_assign_then_revoke(
    seeded: Seeded,
    assignments: UserRoleAssignmentService,
    evaluator: AuthorizationService,
) -> None:
    user = seeded.staff_a
    assert not await evaluator.has_permission(user, PermissionName.MENU_APPROVE)

    await assignments.assign_role(user, RoleCode.MANAGER_OPERASIONAL, seeded.tenant_a)
    assert await evaluator.has_permission(user, PermissionName.MENU_APPROVE)

    assert await assignments.revoke_role(
        user, RoleCode.MANAGER_OPERASIONAL, seeded.tenant_a
    )
    assert not await evaluator.has_permission(user, PermissionName.MENU_APPROVE)


async def test_revoke_keeps_row(seeded: Seeded, assignments: UserRoleAssignmentService) -> None:
    """Revocation flips is_active; the row and its history stay."""
    created = await assignments.assign_role(
        seeded.staff_a, "staff-dapur", seeded.tenant_a
    )
    await assignments.revoke_role(seeded.staff_a, "staff-dapur", seeded.tenant_a)
    row = seeded.store.state.user_roles[created.id]
    assert row.is_active is False
    assert row.deactivated_at is not None


async def test_assign_twice_single_row(
    seeded: Seeded, assignments: UserRoleAssignmentService
) -> None:
    first = await assignments.assign_role(seeded.staff_a, "staff-dapur", seeded.tenant_a)
    second = await assignments.assign_role(seeded.staff_a, "staff-dapur", seeded.tenant_a)
    assert first.id == second.id
    rows = [
        r for r in seeded.store.state.user_roles.values() if r.user_id == seeded.staff_a
    ]
    assert len(rows) == 1


async def test_reassign_reactivates_same_row(
    seeded: Seeded, assignments: UserRoleAssignmentService
) -> None:
    first = await assignments.assign_role(seeded.staff_a, "staff-dapur", seeded.tenant_a)
    await assignments.revoke_role(seeded.staff_a, "staff-dapur", seeded.tenant_a)
    again = await assignments.assign_role(seeded.staff_a, "staff-dapur", seeded.tenant_a)
    assert again.id == first.id
    assert again.is_active is True
    assert again.deactivated_at is None


async def test_cross_tenant_assign_raises(
    seeded: Seeded, assignments: UserRoleAssignmentService
) -> None:
    with pytest.raises(TenantMismatchError):
        await assignments.assign_role(seeded.user_b, "staff-dapur", seeded.tenant_a)


async def test_system_role_to_tenant_user_raises(
    seeded: Seeded, assignments: UserRoleAssignmentService
) -> None:
    with pytest.raises(InvalidScopeError):
        await assignments.assign_role(seeded.staff_a, RoleCode.SUPERADMIN)


async def test_tenant_role_to_platform_admin_raises(
    seeded: Seeded, assignments: UserRoleAssignmentService
) -> None:
    with pytest.raises(TenantMismatchError):
        await assignments.assign_role(
            seeded.platform_admin, "staff-dapur", seeded.tenant_a
        )


async def test_unknown_identity_raises(
    seeded: Seeded, assignments: UserRoleAssignmentService
) -> None:
    with pytest.raises(IdentityNotFoundError):
        await assignments.assign_role("ghost", "staff-dapur", seeded.tenant_a)


async def test_unknown_or_retired_role_raises(
    seeded: Seeded, assignments: UserRoleAssignmentService
) -> None:
    with pytest.raises(RoleNotFoundError):
        await assignments.assign_role(seeded.staff_a, "chef", seeded.tenant_a)
    catalog = RoleCatalogService(seeded.store)
    role = await catalog.get_role_by_code("staff-distribusi", seeded.tenant_a)
    assert role is not None
    await catalog.retire_role(role.id)
    with pytest.raises(RoleNotFoundError):
        await assignments.assign_role(seeded.staff_a, "staff-distribusi", seeded.tenant_a)


async def test_revoke_noop_returns_false(
    seeded: Seeded, assignments: UserRoleAssignmentService
) -> None:
    assert not await assignments.revoke_role(seeded.staff_a, "staff-dapur", seeded.tenant_a)
    assert not await assignments.revoke_role(seeded.staff_a, "chef", seeded.tenant_a)


async def test_assigned_by_defaults_to_request_actor(
    seeded: Seeded, assignments: UserRoleAssignmentService
) -> None:
    set_current_user(seeded.admin_a)
    try:
        row = await assignments.assign_role(
            seeded.staff_a, "staff-dapur", seeded.tenant_a
        )
    finally:
        clear_current_user()
    assert row.assigned_by == seeded.admin_a


async def test_list_roles_for_user(
    seeded: Seeded, assignments: UserRoleAssignmentService
) -> None:
    await assignments.assign_role(seeded.staff_a, "staff-dapur", seeded.tenant_a)
    await assignments.assign_role(seeded.staff_a, "staff-admin", seeded.tenant_a)
    await assignments.revoke_role(seeded.staff_a, "staff-dapur", seeded.tenant_a)
    roles = await assignments.list_roles_for_user(seeded.staff_a)
    assert [r.code for r in roles] == ["staff-admin"]
    active = await assignments.list_assignments_for_user(seeded.staff_a)
    assert len(active) == 1


async def test_role_retired_before_lock_is_not_assigned(
    seeded: Seeded, assignments: UserRoleAssignmentService
) -> None:
    """The role is re-read under its row lock; a retirement that won the lock wins."""
    calls: list[str] = []

    async def retired_under_lock(self, role_id):
        calls.append(role_id)
        role = self._state.roles.get(role_id)
        return dataclasses.replace(role, is_active=False)

    with patch.object(MemoryRoleRepository, "lock_for_update", retired_under_lock):
        with pytest.raises(RoleNotFoundError):
            await assignments.assign_role(
                seeded.staff_a, RoleCode.STAFF_DAPUR, seeded.tenant_a
            )
    assert len(calls) == 1
    assert await assignments.list_assignments_for_user(seeded.staff_a) == []


async def test_concurrent_assign_same_role(
    seeded: Seeded, assignments: UserRoleAssignmentService
) -> None:
    first, second = await asyncio.gather(
        assignments.assign_role(seeded.staff_a, RoleCode.STAFF_DAPUR, seeded.tenant_a),
        assignments.assign_role(seeded.staff_a, RoleCode.STAFF_DAPUR, seeded.tenant_a),
    )
    assert first.id == second.id
    assert len(await assignments.list_assignments_for_user(seeded.staff_a)) == 1
