"""Permission catalog service: idempotent upsert and listing. No delete."""

from __future__ import annotations

import logging

from sppg_rbac.application.dtos.permission import PermissionResult
from sppg_rbac.application.dtos.provisioning import UpsertOutcome
from sppg_rbac.application.interfaces.unit_of_work import (
    IRbacUnitOfWork,
    UnitOfWorkFactory,
)
from sppg_rbac.application.services.base import transaction
from sppg_rbac.domain.provisioning import PermissionSpec

logger = logging.getLogger(__name__)


class PermissionCatalogService:
    """Maintain the global permission catalog."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    async def upsert_permission(
        self,
        name: str,
        module: str | None = None,
        action: str | None = None,
        description: str | None = None,
        *,
        uow: IRbacUnitOfWork | None = None,
    ) -> tuple[PermissionResult, UpsertOutcome]:
        """Create the permission or update its metadata, keyed by name.

        module and action default to the two halves of the dotted name.
        Bindings reference the permission id, so metadata updates never
        change what any role grants.

        Raises:
            ValidationException: name is not '<module>.<action>'.
        """
        parsed = PermissionSpec.from_name(name)
        module = module or parsed.module
        action = action or parsed.action
        async with transaction(self._uow_factory, uow) as tx:
            existing = await tx.permissions.get_by_name(name)
            if existing is None:
                created = await tx.permissions.create_permission(
                    name=name,
                    module=module,
                    action=action,
                    description=description,
                )
                logger.debug("Permission created: %s", name)
                return created, UpsertOutcome.CREATED
            if (existing.module, existing.action, existing.description) == (
                module,
                action,
                description,
            ):
                return existing, UpsertOutcome.UNCHANGED
            updated = await tx.permissions.update_permission(
                existing.id, module=module, action=action, description=description
            )
            logger.debug("Permission metadata updated: %s", name)
            return updated, UpsertOutcome.UPDATED

    async def list_permissions(self, module: str | None = None) -> list[PermissionResult]:
        """Return the catalog (optionally one module), in no particular order."""
        async with self._uow_factory(read_only=True) as uow:
            return await uow.permissions.list_permissions(module)
