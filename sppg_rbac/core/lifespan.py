"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Only wiring of
infrastructure happens here: registry check, database, optional Redis
permission cache, evaluator and guard, optional provisioning.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from sppg_rbac.application.services import AuthorizationService, ProvisioningLoader
from sppg_rbac.core.config import Settings, get_settings
from sppg_rbac.domain.catalog import CANONICAL_DEFINITION
from sppg_rbac.domain.provisioning import ProvisioningDefinition
from sppg_rbac.domain.registry import validate_registry
from sppg_rbac.shared.logging import setup_logging

logger = logging.getLogger(__name__)


def load_configured_definition(settings: Settings) -> ProvisioningDefinition:
    """Definition file from settings, else the built-in catalog."""
    if not settings.provisioning_definition_path:
        return CANONICAL_DEFINITION
    from sppg_rbac.infrastructure.provisioning import load_definition

    return load_definition(settings.provisioning_definition_path)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, registry check, database, Redis cache (if
    enabled), unit of work factory, evaluator and guard, provisioning (if
    enabled). Shutdown order: cache disconnect, SQL engine dispose.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    definition = load_configured_definition(settings)
    validate_registry(definition)
    app.state.definition = definition

    from sppg_rbac.infrastructure.persistence import database
    from sppg_rbac.infrastructure.persistence.unit_of_work import (
        SqlAlchemyUnitOfWorkFactory,
    )

    if settings.database_create_all:
        await database.create_all()
        logger.info("Database tables created from ORM metadata")

    if settings.redis_enabled:
        from sppg_rbac.infrastructure.cache.redis_cache import CacheService

        cache = CacheService()
        await cache.connect()
        app.state.cache = cache
    else:
        app.state.cache = None

    invalidator = None
    if settings.permission_cache_enabled and app.state.cache is not None:
        from sppg_rbac.infrastructure.cache.permission_cache import (
            PermissionCacheInvalidator,
        )

        invalidator = PermissionCacheInvalidator(app.state.cache)

    uow_factory = SqlAlchemyUnitOfWorkFactory(database.get_session_factory(), invalidator)
    app.state.uow_factory = uow_factory

    evaluator = AuthorizationService(uow_factory)
    if invalidator is not None:
        from sppg_rbac.infrastructure.cache.permission_cache import (
            CachedPermissionEvaluator,
        )

        app.state.evaluator = CachedPermissionEvaluator(
            evaluator, app.state.cache, settings.cache_ttl_permissions
        )
        logger.info(
            "Permission cache enabled (ttl=%ss)", settings.cache_ttl_permissions
        )
    else:
        app.state.evaluator = evaluator

    if settings.provision_on_startup:
        await ProvisioningLoader(uow_factory, definition).provision_all_tenants()

    yield

    # ---- Shutdown ----
    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
        logger.info("Cache disconnected")

    await database.dispose_engine()
