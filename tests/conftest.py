"""Pytest configuration and fixtures for sppg-rbac.

Service and API tests run against InMemoryRbacStore; repository tests
use an in-memory SQLite database (aiosqlite). No external services needed.
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from sppg_rbac.api.v1.dependencies import get_uow_factory
from sppg_rbac.application.services import (
    AuthorizationService,
    ProvisioningLoader,
    RoleBindingService,
    RoleCatalogService,
    TenantScopeGuard,
    UserRoleAssignmentService,
)
from sppg_rbac.core.limiter import limiter
from sppg_rbac.domain.enums import UserType
from sppg_rbac.domain.registry import RoleCode
from sppg_rbac.infrastructure.memory import InMemoryRbacStore
from sppg_rbac.main import create_app


@dataclass
class Seeded:
    """Directory ids of a provisioned store with two tenants."""

    store: InMemoryRbacStore
    tenant_a: str
    tenant_b: str
    platform_admin: str
    admin_a: str
    staff_a: str
    user_b: str


@pytest.fixture
def store() -> InMemoryRbacStore:
    """Empty in-memory RBAC store."""
    return InMemoryRbacStore()


@pytest.fixture
def role_catalog(store: InMemoryRbacStore) -> RoleCatalogService:
    return RoleCatalogService(store)


@pytest.fixture
def binding(store: InMemoryRbacStore) -> RoleBindingService:
    return RoleBindingService(store)


@pytest.fixture
def assignments(store: InMemoryRbacStore) -> UserRoleAssignmentService:
    return UserRoleAssignmentService(store)


@pytest.fixture
def evaluator(store: InMemoryRbacStore) -> AuthorizationService:
    return AuthorizationService(store)


@pytest.fixture
def guard(evaluator: AuthorizationService) -> TenantScopeGuard:
    return TenantScopeGuard(evaluator)


@pytest.fixture
async def seeded(
    store: InMemoryRbacStore, assignments: UserRoleAssignmentService
) -> Seeded:
    """Canonical catalog provisioned for tenants A and B.

    platform_admin holds superadmin; admin_a holds admin-sppg in A;
    staff_a (A) and user_b (B) hold no roles.
    """
    tenant_a = store.add_tenant("sppg-a", "SPPG A").id
    tenant_b = store.add_tenant("sppg-b", "SPPG B").id
    platform_admin = store.add_identity(
        "u-platform", None, UserType.PLATFORM_ADMIN, "root@sppg.test"
    ).user_id
    admin_a = store.add_identity("u-admin-a", tenant_a, email="admin@a.test").user_id
    staff_a = store.add_identity("u-staff-a", tenant_a, email="staff@a.test").user_id
    user_b = store.add_identity("u-user-b", tenant_b, email="user@b.test").user_id

    await ProvisioningLoader(store).provision([tenant_a, tenant_b])
    await assignments.assign_role(platform_admin, RoleCode.SUPERADMIN)
    await assignments.assign_role(admin_a, RoleCode.ADMIN_SPPG, tenant_a)
    return Seeded(
        store=store,
        tenant_a=tenant_a,
        tenant_b=tenant_b,
        platform_admin=platform_admin,
        admin_a=admin_a,
        staff_a=staff_a,
        user_b=user_b,
    )


@pytest.fixture
def app(store: InMemoryRbacStore) -> FastAPI:
    """App wired to the in-memory store (lifespan is not run by ASGITransport)."""
    application = create_app()
    application.dependency_overrides[get_uow_factory] = lambda: store
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI), rate limiting off."""
    limiter.enabled = False
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    limiter.enabled = True
