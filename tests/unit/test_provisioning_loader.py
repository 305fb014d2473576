"""ProvisioningLoader: idempotent catalog materialization and tenant onboarding."""

import dataclasses
from unittest.mock import AsyncMock, patch

import pytest

from sppg_rbac.application.services import (
    ProvisioningLoader,
    RoleBindingService,
    RoleCatalogService,
    UserRoleAssignmentService,
)
from sppg_rbac.domain.catalog import CANONICAL_DEFINITION
from sppg_rbac.domain.exceptions import ResourceNotFoundException, UnknownPermissionError
from sppg_rbac.domain.provisioning import PermissionSpec, ProvisioningDefinition, RoleSpec
from sppg_rbac.domain.registry import PermissionName, RoleCode
from sppg_rbac.infrastructure.memory import InMemoryRbacStore, InMemoryUnitOfWork
from conftest import Seeded


def _catalog_state(store: InMemoryRbacStore) -> tuple:
    """Comparable snapshot of permissions, roles and bindings (ids included)."""
    state = store.state
    return (
        dict(state.permissions),
        dict(state.roles),
        {k: v for k, v in state.bindings.items() if v},
    )


async def test_first_run_creates_catalog(store: InMemoryRbacStore) -> None:
    tenant = store.add_tenant("sppg-a").id
    report = await ProvisioningLoader(store).provision([tenant])
    assert report.permissions_created == len(PermissionName)
    assert report.roles_created == len(RoleCode)
    assert report.bindings_replaced == len(RoleCode)
    assert report.tenants == [tenant]
    assert report.changed


async def test_second_run_changes_nothing(seeded: Seeded) -> None:
    """Same definition twice: identical catalog and untouched assignments."""
    before = _catalog_state(seeded.store)
    assignments_before = dict(seeded.store.state.user_roles)
    report = await ProvisioningLoader(seeded.store).provision(
        [seeded.tenant_a, seeded.tenant_b]
    )
    assert not report.changed
    assert _catalog_state(seeded.store) == before
    assert seeded.store.state.user_roles == assignments_before


async def test_drift_is_corrected(seeded: Seeded) -> None:
    catalog = RoleCatalogService(seeded.store)
    binding = RoleBindingService(seeded.store, catalog)
    role = await catalog.get_role_by_code("staff-dapur", seeded.tenant_a)
    assert role is not None
    await binding.set_role_permissions(role.id, ["menu.approve"])

    report = await ProvisioningLoader(seeded.store).provision([seeded.tenant_a])
    assert report.bindings_replaced == 1
    names = {p.name for p in await binding.list_permissions_for_role(role.id)}
    expected = next(r for r in CANONICAL_DEFINITION.roles if r.code == "staff-dapur")
    assert names == set(expected.permissions)


async def test_description_change_updates_metadata(seeded: Seeded) -> None:
    permissions = tuple(
        dataclasses.replace(p, description="Lihat menu (baru)")
        if p.name == "menu.read"
        else p
        for p in CANONICAL_DEFINITION.permissions
    )
    definition = dataclasses.replace(CANONICAL_DEFINITION, permissions=permissions)
    report = await ProvisioningLoader(seeded.store, definition).provision()
    assert report.permissions_updated == 1
    assert report.bindings_replaced == 0


async def test_retired_role_stays_retired(seeded: Seeded) -> None:
    catalog = RoleCatalogService(seeded.store)
    role = await catalog.get_role_by_code("staff-distribusi", seeded.tenant_a)
    assert role is not None
    await catalog.retire_role(role.id)
    await ProvisioningLoader(seeded.store).provision([seeded.tenant_a])
    refreshed = await catalog.get_role(role.id)
    assert refreshed is not None and refreshed.is_active is False


async def test_unknown_tenant_rolls_back_everything(store: InMemoryRbacStore) -> None:
    with pytest.raises(ResourceNotFoundException):
        await ProvisioningLoader(store).provision(["nope"])
    assert store.state.permissions == {}
    assert store.state.roles == {}


async def test_invalid_definition_is_rejected(store: InMemoryRbacStore) -> None:
    definition = ProvisioningDefinition(
        permissions=(PermissionSpec.from_name("menu.read"),),
        roles=(RoleSpec(code="chef", name="Chef", permissions=("menu.cook",)),),
    )
    with pytest.raises(UnknownPermissionError):
        await ProvisioningLoader(store, definition).provision()
    assert store.state.permissions == {}


async def test_provision_all_tenants(store: InMemoryRbacStore) -> None:
    from sppg_rbac.domain.enums import TenantStatus

    a = store.add_tenant("sppg-a").id
    store.add_tenant("sppg-x", status=TenantStatus.SUSPENDED)
    report = await ProvisioningLoader(store).provision_all_tenants()
    assert report.tenants == [a]


async def test_provision_tenant_onboarding(seeded: Seeded) -> None:
    """A new tenant gets the templates; its users can then be assigned."""
    store = seeded.store
    tenant_c = store.add_tenant("sppg-c").id
    user_c = store.add_identity("u-c", tenant_c).user_id

    report = await ProvisioningLoader(store).provision_tenant(tenant_c)
    assert report.roles_created == len(CANONICAL_DEFINITION.tenant_templates())
    await UserRoleAssignmentService(store).assign_role(
        user_c, RoleCode.KOORDINATOR_DAPUR, tenant_c
    )
    with pytest.raises(ResourceNotFoundException):
        await ProvisioningLoader(store).provision_tenant("nope")


async def test_runs_take_the_provisioning_lock(seeded: Seeded) -> None:
    loader = ProvisioningLoader(seeded.store)
    with patch.object(
        InMemoryUnitOfWork, "acquire_provisioning_lock", new_callable=AsyncMock
    ) as lock:
        await loader.provision([seeded.tenant_a])
        await loader.provision_tenant(seeded.tenant_b)
    assert lock.await_count == 2
