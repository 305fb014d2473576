"""RoleBindingService: full replacement of a role's grant set."""

import pytest

from sppg_rbac.application.services import (
    AuthorizationService,
    PermissionCatalogService,
    RoleBindingService,
    RoleCatalogService,
    UserRoleAssignmentService,
)
from sppg_rbac.application.services.role_binding import normalize_permission_names
from sppg_rbac.domain.exceptions import (
    DuplicateRoleError,
    RoleNotFoundError,
    UnknownPermissionError,
)
from sppg_rbac.domain.registry import PermissionName
from sppg_rbac.infrastructure.memory import InMemoryRbacStore
from conftest import Seeded


@pytest.fixture
async def role_id(store: InMemoryRbacStore, role_catalog: RoleCatalogService) -> str:
    permissions = PermissionCatalogService(store)
    for name in ("menu.read", "menu.approve", "report.daily", "report.weekly"):
        await permissions.upsert_permission(name)
    tenant_id = store.add_tenant("sppg-a").id
    role = await role_catalog.create_role("gudang", "Gudang", tenant_id=tenant_id)
    return role.id


def test_normalize_permission_names() -> None:
    names = normalize_permission_names(
        [" menu.read", PermissionName.MENU_READ, "menu.approve", ""]
    )
    assert names == ["menu.read", "menu.approve"]


async def test_set_then_replace(binding: RoleBindingService, role_id: str) -> None:
    """The second call leaves exactly the second set."""
    assert await binding.set_role_permissions(role_id, ["menu.read", "menu.approve"])
    assert await binding.set_role_permissions(role_id, ["report.daily"])
    names = [p.name for p in await binding.list_permissions_for_role(role_id)]
    assert names == ["report.daily"]


async def test_same_set_reports_unchanged(binding: RoleBindingService, role_id: str) -> None:
    await binding.set_role_permissions(role_id, ["menu.read"])
    assert await binding.set_role_permissions(role_id, ["menu.read"]) is False


async def test_empty_set_clears(binding: RoleBindingService, role_id: str) -> None:
    await binding.set_role_permissions(role_id, ["menu.read"])
    await binding.set_role_permissions(role_id, [])
    assert await binding.list_permissions_for_role(role_id) == []


async def test_unknown_names_reject_whole_request(
    binding: RoleBindingService, role_id: str
) -> None:
    """Every unknown name is reported and the previous set survives."""
    await binding.set_role_permissions(role_id, ["menu.read"])
    with pytest.raises(UnknownPermissionError) as exc_info:
        await binding.set_role_permissions(
            role_id, ["menu.approve", "menu.cook", "gudang.open"]
        )
    assert exc_info.value.names == ["gudang.open", "menu.cook"]
    names = [p.name for p in await binding.list_permissions_for_role(role_id)]
    assert names == ["menu.read"]


async def test_unknown_role_raises(binding: RoleBindingService, role_id: str) -> None:
    with pytest.raises(RoleNotFoundError):
        await binding.set_role_permissions("missing", ["menu.read"])


async def test_list_for_unknown_role_is_empty(binding: RoleBindingService) -> None:
    assert await binding.list_permissions_for_role("missing") == []


async def test_create_role_with_permissions_is_atomic(seeded: Seeded) -> None:
    """A bad permission name leaves no role behind."""
    catalog = RoleCatalogService(seeded.store)
    binding = RoleBindingService(seeded.store, catalog)
    with pytest.raises(UnknownPermissionError):
        await binding.create_role_with_permissions(
            "gudang",
            "Gudang",
            tenant_id=seeded.tenant_a,
            permission_names=["inventory.read", "inventory.burn"],
        )
    assert await catalog.get_role_by_code("gudang", seeded.tenant_a) is None

    role = await binding.create_role_with_permissions(
        "gudang",
        "Gudang",
        tenant_id=seeded.tenant_a,
        permission_names=[PermissionName.INVENTORY_READ],
    )
    names = [p.name for p in await binding.list_permissions_for_role(role.id)]
    assert names == ["inventory.read"]
    with pytest.raises(DuplicateRoleError):
        await binding.create_role_with_permissions(
            "gudang", "Gudang", tenant_id=seeded.tenant_a
        )


async def test_staff_admin_daily_then_weekly(seeded: Seeded) -> None:
    """Replacing report.daily with report.weekly flips both checks."""
    store = seeded.store
    catalog = RoleCatalogService(store)
    binding = RoleBindingService(store, catalog)
    evaluator = AuthorizationService(store)
    role = await catalog.get_role_by_code("staff-admin", seeded.tenant_a)
    assert role is not None
    await UserRoleAssignmentService(store).assign_role(
        seeded.staff_a, "staff-admin", seeded.tenant_a
    )

    await binding.set_role_permissions(role.id, ["report.daily"])
    assert await evaluator.has_permission(seeded.staff_a, "report.daily")
    assert not await evaluator.has_permission(seeded.staff_a, "report.weekly")

    await binding.set_role_permissions(role.id, ["report.weekly"])
    assert not await evaluator.has_permission(seeded.staff_a, "report.daily")
    assert await evaluator.has_permission(seeded.staff_a, "report.weekly")
