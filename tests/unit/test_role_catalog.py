"""RoleCatalogService: scope rules, uniqueness, update and retirement."""

import pytest

from sppg_rbac.application.dtos.provisioning import UpsertOutcome
from sppg_rbac.application.services import RoleCatalogService, UserRoleAssignmentService
from sppg_rbac.domain.exceptions import (
    DuplicateRoleError,
    InvalidScopeError,
    ResourceNotFoundException,
    RoleInUseError,
    RoleNotFoundError,
    ValidationException,
)
from sppg_rbac.infrastructure.memory import InMemoryRbacStore


@pytest.fixture
def tenant_id(store: InMemoryRbacStore) -> str:
    return store.add_tenant("sppg-a").id


async def test_create_tenant_role(role_catalog: RoleCatalogService, tenant_id: str) -> None:
    role = await role_catalog.create_role("gudang", "Gudang", tenant_id=tenant_id)
    assert role.tenant_id == tenant_id
    assert role.is_system_role is False
    assert role.is_active is True
    assert await role_catalog.get_role_by_code("gudang", tenant_id) == role


async def test_create_system_role(role_catalog: RoleCatalogService) -> None:
    role = await role_catalog.create_role("auditor", "Auditor", is_system_role=True)
    assert role.tenant_id is None
    assert role.is_system_role is True


async def test_same_code_in_two_tenants_is_allowed(
    role_catalog: RoleCatalogService, store: InMemoryRbacStore, tenant_id: str
) -> None:
    other = store.add_tenant("sppg-b").id
    first = await role_catalog.create_role("gudang", "Gudang", tenant_id=tenant_id)
    second = await role_catalog.create_role("gudang", "Gudang", tenant_id=other)
    assert first.id != second.id


async def test_duplicate_code_in_tenant_raises(
    role_catalog: RoleCatalogService, tenant_id: str
) -> None:
    await role_catalog.create_role("gudang", "Gudang", tenant_id=tenant_id)
    with pytest.raises(DuplicateRoleError):
        await role_catalog.create_role("gudang", "Gudang 2", tenant_id=tenant_id)


async def test_duplicate_system_code_raises(role_catalog: RoleCatalogService) -> None:
    await role_catalog.create_role("auditor", "Auditor", is_system_role=True)
    with pytest.raises(DuplicateRoleError):
        await role_catalog.create_role("auditor", "Auditor", is_system_role=True)


@pytest.mark.parametrize(
    ("is_system_role", "with_tenant"),
    [(True, True), (False, False)],
)
async def test_scope_rules(
    role_catalog: RoleCatalogService,
    tenant_id: str,
    is_system_role: bool,
    with_tenant: bool,
) -> None:
    """System roles have no tenant; tenant roles need one."""
    with pytest.raises(InvalidScopeError):
        await role_catalog.create_role(
            "gudang",
            "Gudang",
            is_system_role=is_system_role,
            tenant_id=tenant_id if with_tenant else None,
        )


async def test_unknown_tenant_raises(role_catalog: RoleCatalogService) -> None:
    with pytest.raises(ResourceNotFoundException):
        await role_catalog.create_role("gudang", "Gudang", tenant_id="nope")


@pytest.mark.parametrize("code", ["Gudang", "gudang besar", "-x", ""])
async def test_code_must_be_slug(
    role_catalog: RoleCatalogService, tenant_id: str, code: str
) -> None:
    with pytest.raises(ValidationException):
        await role_catalog.create_role(code, "Gudang", tenant_id=tenant_id)


async def test_upsert_role_outcomes(role_catalog: RoleCatalogService, tenant_id: str) -> None:
    _, created = await role_catalog.upsert_role("gudang", "Gudang", tenant_id=tenant_id)
    _, unchanged = await role_catalog.upsert_role("gudang", "Gudang", tenant_id=tenant_id)
    role, updated = await role_catalog.upsert_role(
        "gudang", "Gudang Pusat", tenant_id=tenant_id
    )
    assert (created, unchanged, updated) == (
        UpsertOutcome.CREATED,
        UpsertOutcome.UNCHANGED,
        UpsertOutcome.UPDATED,
    )
    assert role.name == "Gudang Pusat"


async def test_update_role_keeps_code(
    role_catalog: RoleCatalogService, tenant_id: str
) -> None:
    role = await role_catalog.create_role("gudang", "Gudang", tenant_id=tenant_id)
    updated = await role_catalog.update_role(role.id, "Gudang Utama", "Stok")
    assert updated.code == "gudang"
    assert (updated.name, updated.description) == ("Gudang Utama", "Stok")


async def test_update_unknown_role_raises(role_catalog: RoleCatalogService) -> None:
    with pytest.raises(RoleNotFoundError):
        await role_catalog.update_role("missing", "X")


async def test_retire_role(role_catalog: RoleCatalogService, tenant_id: str) -> None:
    role = await role_catalog.create_role("gudang", "Gudang", tenant_id=tenant_id)
    retired = await role_catalog.retire_role(role.id)
    assert retired.is_active is False
    assert await role_catalog.list_roles_for_tenant(tenant_id) == []
    listed = await role_catalog.list_roles_for_tenant(tenant_id, include_inactive=True)
    assert [r.id for r in listed] == [role.id]


async def test_retire_role_in_use_raises(
    store: InMemoryRbacStore,
    role_catalog: RoleCatalogService,
    assignments: UserRoleAssignmentService,
    tenant_id: str,
) -> None:
    role = await role_catalog.create_role("gudang", "Gudang", tenant_id=tenant_id)
    user = store.add_identity("u1", tenant_id)
    await assignments.assign_role(user.user_id, "gudang", tenant_id)
    with pytest.raises(RoleInUseError):
        await role_catalog.retire_role(role.id)
    await assignments.revoke_role(user.user_id, "gudang", tenant_id)
    assert (await role_catalog.retire_role(role.id)).is_active is False


async def test_list_roles_for_tenant_scoping(
    store: InMemoryRbacStore, role_catalog: RoleCatalogService, tenant_id: str
) -> None:
    other = store.add_tenant("sppg-b").id
    await role_catalog.create_role("gudang", "Gudang", tenant_id=tenant_id)
    await role_catalog.create_role("kasir", "Kasir", tenant_id=other)
    await role_catalog.create_role("auditor", "Auditor", is_system_role=True)

    own = await role_catalog.list_roles_for_tenant(tenant_id)
    assert [r.code for r in own] == ["gudang"]
    with_system = await role_catalog.list_roles_for_tenant(tenant_id, include_system=True)
    assert [r.code for r in with_system] == ["auditor", "gudang"]
    assert [r.code for r in await role_catalog.list_system_roles()] == ["auditor"]
