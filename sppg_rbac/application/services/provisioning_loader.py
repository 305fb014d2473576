"""Provisioning loader: idempotently materialize the canonical catalog.

Each run upserts every permission, upserts the system roles and forces
each role's grant set to match the definition, correcting drift on every
deploy. Tenant templates (non-system roles) are materialized per tenant.
UserRole rows are never touched, so existing assignments survive.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sppg_rbac.application.dtos.provisioning import ProvisioningReport
from sppg_rbac.application.interfaces.unit_of_work import (
    IRbacUnitOfWork,
    UnitOfWorkFactory,
)
from sppg_rbac.application.services.base import transaction
from sppg_rbac.application.services.permission_catalog import PermissionCatalogService
from sppg_rbac.application.services.role_binding import RoleBindingService
from sppg_rbac.application.services.role_catalog import RoleCatalogService
from sppg_rbac.domain.catalog import CANONICAL_DEFINITION
from sppg_rbac.domain.exceptions import ResourceNotFoundException
from sppg_rbac.domain.provisioning import ProvisioningDefinition, RoleSpec

logger = logging.getLogger(__name__)


class ProvisioningLoader:
    """Apply a ProvisioningDefinition to the store in one transaction."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        definition: ProvisioningDefinition = CANONICAL_DEFINITION,
    ) -> None:
        self._uow_factory = uow_factory
        self.definition = definition
        self._permissions = PermissionCatalogService(uow_factory)
        self._roles = RoleCatalogService(uow_factory)
        self._bindings = RoleBindingService(uow_factory, self._roles)

    async def provision(self, tenant_ids: Iterable[str] = ()) -> ProvisioningReport:
        """Provision permissions and system roles, then templates for tenant_ids.

        Everything runs in one transaction: a failure leaves the store as it
        was. Running twice with the same definition changes nothing.
        Concurrent runs (several replicas provisioning on startup) are
        serialized, so the later one finds the rows already in place.

        Raises:
            ValidationException, UnknownPermissionError: Invalid definition.
            ResourceNotFoundException: A tenant id is unknown or inactive.
        """
        self.definition.validate()
        report = ProvisioningReport()
        async with self._uow_factory() as uow:
            await uow.acquire_provisioning_lock()
            for spec in self.definition.permissions:
                _, outcome = await self._permissions.upsert_permission(
                    spec.name,
                    spec.module,
                    spec.action,
                    spec.description,
                    uow=uow,
                )
                report.count_permission(outcome)
            for role_spec in self.definition.system_roles():
                await self._apply_role(uow, role_spec, None, report)
            for tenant_id in dict.fromkeys(tenant_ids):
                await self._provision_tenant(uow, tenant_id, report)
            uow.invalidate_all()
        logger.info(
            "Provisioning complete: permissions +%d ~%d, roles +%d ~%d, "
            "bindings replaced %d, tenants %d",
            report.permissions_created,
            report.permissions_updated,
            report.roles_created,
            report.roles_updated,
            report.bindings_replaced,
            len(report.tenants),
        )
        return report

    async def provision_all_tenants(self) -> ProvisioningReport:
        """Provision the catalog plus templates for every active tenant."""
        async with self._uow_factory(read_only=True) as uow:
            tenant_ids = await uow.identities.list_active_tenant_ids()
        return await self.provision(tenant_ids)

    async def provision_tenant(
        self, tenant_id: str, *, uow: IRbacUnitOfWork | None = None
    ) -> ProvisioningReport:
        """Materialize the tenant role templates for one tenant (onboarding).

        Expects the permission catalog to be provisioned already.

        Raises:
            ResourceNotFoundException: Unknown or inactive tenant.
            UnknownPermissionError: Catalog is missing template permissions.
        """
        report = ProvisioningReport()
        async with transaction(self._uow_factory, uow) as tx:
            await tx.acquire_provisioning_lock()
            await self._provision_tenant(tx, tenant_id, report)
        logger.info(
            "Tenant roles provisioned: tenant_id=%s roles +%d ~%d, bindings replaced %d",
            tenant_id,
            report.roles_created,
            report.roles_updated,
            report.bindings_replaced,
        )
        return report

    async def _provision_tenant(
        self,
        uow: IRbacUnitOfWork,
        tenant_id: str,
        report: ProvisioningReport,
    ) -> None:
        if not await uow.identities.tenant_exists(tenant_id):
            raise ResourceNotFoundException("Tenant", tenant_id)
        for role_spec in self.definition.tenant_templates():
            await self._apply_role(uow, role_spec, tenant_id, report)
        report.tenants.append(tenant_id)

    async def _apply_role(
        self,
        uow: IRbacUnitOfWork,
        spec: RoleSpec,
        tenant_id: str | None,
        report: ProvisioningReport,
    ) -> None:
        role, outcome = await self._roles.upsert_role(
            spec.code,
            spec.name,
            spec.description,
            is_system_role=spec.is_system_role,
            tenant_id=tenant_id,
            uow=uow,
        )
        report.count_role(outcome)
        if await self._bindings.set_role_permissions(role.id, spec.permissions, uow=uow):
            report.bindings_replaced += 1
