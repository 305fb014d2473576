"""SQLAlchemy repositories and unit of work against in-memory SQLite (aiosqlite)."""

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from sppg_rbac.application.services import (
    AuthorizationService,
    ProvisioningLoader,
    RoleBindingService,
    RoleCatalogService,
    UserRoleAssignmentService,
)
from sppg_rbac.domain.enums import UserType
from sppg_rbac.domain.exceptions import DuplicateRoleError, TenantMismatchError
from sppg_rbac.domain.registry import PermissionName, RoleCode
from sppg_rbac.infrastructure.persistence.database import build_session_factory, create_all
from sppg_rbac.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWorkFactory

pytestmark = pytest.mark.requires_db


@dataclass
class SqlSeed:
    factory: SqlAlchemyUnitOfWorkFactory
    tenant_a: str
    tenant_b: str
    staff_a: str
    admin_a: str


@pytest.fixture
async def uow_factory() -> AsyncIterator[SqlAlchemyUnitOfWorkFactory]:
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_all(bind=engine)
    yield SqlAlchemyUnitOfWorkFactory(build_session_factory(engine))
    await engine.dispose()


@pytest.fixture
async def sql_seed(uow_factory: SqlAlchemyUnitOfWorkFactory) -> SqlSeed:
    async with uow_factory() as uow:
        tenant_a = await uow.identities.add_tenant("sppg-a", "SPPG A")
        tenant_b = await uow.identities.add_tenant("sppg-b", "SPPG B")
        staff = await uow.identities.add_identity("staff@a.test", tenant_id=tenant_a)
        admin = await uow.identities.add_identity("admin@a.test", tenant_id=tenant_a)
    await ProvisioningLoader(uow_factory).provision([tenant_a, tenant_b])
    return SqlSeed(uow_factory, tenant_a, tenant_b, staff.user_id, admin.user_id)


async def test_provisioning_is_idempotent(sql_seed: SqlSeed) -> None:
    loader = ProvisioningLoader(sql_seed.factory)
    report = await loader.provision([sql_seed.tenant_a, sql_seed.tenant_b])
    assert not report.changed

    async with sql_seed.factory(read_only=True) as uow:
        permissions = await uow.permissions.list_permissions()
        tenant_roles = await uow.roles.list_by_tenant(sql_seed.tenant_a)
        system_roles = await uow.roles.list_system_roles()
    assert len(permissions) == len(PermissionName)
    assert {r.code for r in system_roles} == {RoleCode.SUPERADMIN.value}
    assert len(tenant_roles) == len(RoleCode) - 1


async def test_provision_all_tenants_orders_by_code(sql_seed: SqlSeed) -> None:
    report = await ProvisioningLoader(sql_seed.factory).provision_all_tenants()
    assert report.tenants == [sql_seed.tenant_a, sql_seed.tenant_b]


async def test_assign_resolve_and_revoke(sql_seed: SqlSeed) -> None:
    assignments = UserRoleAssignmentService(sql_seed.factory)
    evaluator = AuthorizationService(sql_seed.factory)

    assert not await evaluator.has_permission(sql_seed.staff_a, "menu.approve")
    await assignments.assign_role(
        sql_seed.staff_a, "manager-operasional", sql_seed.tenant_a, sql_seed.admin_a
    )
    assert await evaluator.has_permission(sql_seed.staff_a, "menu.approve")
    assert await evaluator.has_role(
        sql_seed.staff_a, "manager-operasional", sql_seed.tenant_a
    )

    assert await assignments.revoke_role(
        sql_seed.staff_a, "manager-operasional", sql_seed.tenant_a
    )
    assert not await evaluator.has_permission(sql_seed.staff_a, "menu.approve")

    again = await assignments.assign_role(
        sql_seed.staff_a, "manager-operasional", sql_seed.tenant_a
    )
    assert again.is_active
    assert len(await assignments.list_roles_for_user(sql_seed.staff_a)) == 1


async def test_cross_tenant_assignment_rejected(sql_seed: SqlSeed) -> None:
    with pytest.raises(TenantMismatchError):
        await UserRoleAssignmentService(sql_seed.factory).assign_role(
            sql_seed.staff_a, "staff-dapur", sql_seed.tenant_b
        )
    async with sql_seed.factory(read_only=True) as uow:
        assert await uow.user_roles.list_active_for_user(sql_seed.staff_a) == []


async def test_rebinding_changes_grants_without_touching_assignments(
    sql_seed: SqlSeed,
) -> None:
    catalog = RoleCatalogService(sql_seed.factory)
    binding = RoleBindingService(sql_seed.factory, catalog)
    evaluator = AuthorizationService(sql_seed.factory)
    await UserRoleAssignmentService(sql_seed.factory).assign_role(
        sql_seed.staff_a, "staff-admin", sql_seed.tenant_a
    )
    assert await evaluator.has_permission(sql_seed.staff_a, "report.daily")
    assert not await evaluator.has_permission(sql_seed.staff_a, "report.weekly")

    role = await catalog.get_role_by_code("staff-admin", sql_seed.tenant_a)
    assert role is not None
    current = [p.name for p in await binding.list_permissions_for_role(role.id)]
    changed = await binding.set_role_permissions(
        role.id, [*current, "report.weekly"]
    )
    assert changed
    assert await evaluator.has_permission(sql_seed.staff_a, "report.weekly")
    assert not await binding.set_role_permissions(role.id, [*current, "report.weekly"])


async def test_retired_role_grants_nothing(sql_seed: SqlSeed) -> None:
    catalog = RoleCatalogService(sql_seed.factory)
    binding = RoleBindingService(sql_seed.factory, catalog)
    role = await binding.create_role_with_permissions(
        "gudang",
        "Gudang",
        tenant_id=sql_seed.tenant_a,
        permission_names=["inventory.read"],
    )
    assignments = UserRoleAssignmentService(sql_seed.factory)
    await assignments.assign_role(sql_seed.staff_a, "gudang", sql_seed.tenant_a)
    await assignments.revoke_role(sql_seed.staff_a, "gudang", sql_seed.tenant_a)
    retired = await catalog.retire_role(role.id)
    assert not retired.is_active
    evaluator = AuthorizationService(sql_seed.factory)
    assert not await evaluator.has_permission(sql_seed.staff_a, "inventory.read")


async def test_duplicate_role_rejected(sql_seed: SqlSeed) -> None:
    with pytest.raises(DuplicateRoleError):
        await RoleCatalogService(sql_seed.factory).create_role(
            "staff-dapur", "Dup", tenant_id=sql_seed.tenant_a
        )


async def test_same_code_in_two_tenants(sql_seed: SqlSeed) -> None:
    async with sql_seed.factory(read_only=True) as uow:
        role_a = await uow.roles.get_by_code("staff-dapur", sql_seed.tenant_a)
        role_b = await uow.roles.get_by_code("staff-dapur", sql_seed.tenant_b)
        system = await uow.roles.get_by_code("staff-dapur", None)
    assert role_a is not None and role_b is not None
    assert role_a.id != role_b.id
    assert system is None


async def test_failed_transaction_rolls_back(sql_seed: SqlSeed) -> None:
    with pytest.raises(RuntimeError):
        async with sql_seed.factory() as uow:
            await uow.identities.add_tenant("sppg-c", "SPPG C")
            raise RuntimeError("boom")
    async with sql_seed.factory(read_only=True) as uow:
        tenants = await uow.identities.list_active_tenant_ids()
    assert tenants == [sql_seed.tenant_a, sql_seed.tenant_b]


async def test_inactive_identity_is_unknown(uow_factory: SqlAlchemyUnitOfWorkFactory) -> None:
    async with uow_factory() as uow:
        platform = await uow.identities.add_identity(
            "ops@platform.test", user_type=UserType.PLATFORM_ADMIN
        )
        tenant = await uow.identities.add_tenant("sppg-a", "SPPG A")
        gone = await uow.identities.add_identity(
            "gone@a.test", tenant_id=tenant, is_active=False
        )
    evaluator = AuthorizationService(uow_factory)
    assert await evaluator.is_platform_admin(platform.user_id)
    assert await evaluator.get_identity(gone.user_id) is None


async def test_concurrent_assign_of_same_pair_yields_one_row(sql_seed: SqlSeed) -> None:
    assignments = UserRoleAssignmentService(sql_seed.factory)
    first, second = await asyncio.gather(
        assignments.assign_role(sql_seed.staff_a, "staff-dapur", sql_seed.tenant_a),
        assignments.assign_role(sql_seed.staff_a, "staff-dapur", sql_seed.tenant_a),
    )
    assert first.id == second.id
    async with sql_seed.factory(read_only=True) as uow:
        active = await uow.user_roles.list_active_for_user(sql_seed.staff_a)
    assert [a.id for a in active] == [first.id]


async def test_duplicate_assignment_insert_returns_existing_row(sql_seed: SqlSeed) -> None:
    async with sql_seed.factory() as uow:
        role = await uow.roles.get_by_code("staff-dapur", sql_seed.tenant_a)
        assert role is not None
        created = await uow.user_roles.create_assignment(
            sql_seed.staff_a, role.id, sql_seed.admin_a
        )
        again = await uow.user_roles.create_assignment(sql_seed.staff_a, role.id, None)
    assert again.id == created.id
    assert again.assigned_by == sql_seed.admin_a


async def test_provisioning_lock_is_noop_on_sqlite(sql_seed: SqlSeed) -> None:
    async with sql_seed.factory() as uow:
        await uow.acquire_provisioning_lock()
        assert await uow.identities.tenant_exists(sql_seed.tenant_a)
