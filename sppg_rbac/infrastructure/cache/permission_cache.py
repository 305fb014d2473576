"""Read-through permission cache around the authorization evaluator.

The evaluator itself never caches. When a deployment enables the cache,
the guard talks to CachedPermissionEvaluator instead; every unit of work
that touches bindings or assignments invalidates through
PermissionCacheInvalidator inside its transaction and again after commit.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum

from sppg_rbac.application.dtos.identity import IdentityResult
from sppg_rbac.application.services.authorization_service import (
    AuthorizationService,
    permission_value,
)
from sppg_rbac.infrastructure.cache.cache_protocol import CacheProtocol
from sppg_rbac.infrastructure.cache.keys import permission_key, permission_pattern

logger = logging.getLogger(__name__)


class PermissionCacheInvalidator:
    """Delete cached permission sets for users, or all of them."""

    def __init__(self, cache: CacheProtocol) -> None:
        self.cache = cache

    async def invalidate(self, user_ids: Iterable[str], everything: bool = False) -> None:
        if not self.cache.is_available():
            return
        if everything:
            await self.cache.delete_pattern(permission_pattern())
            return
        for user_id in user_ids:
            await self.cache.delete(permission_key(user_id))


class CachedPermissionEvaluator:
    """IAuthorizationEvaluator caching only the grant set.

    Identity is always resolved fresh, so a deactivated user is refused
    immediately even while a permission set is cached.
    """

    def __init__(
        self,
        evaluator: AuthorizationService,
        cache: CacheProtocol,
        cache_ttl: int = 300,
    ) -> None:
        self.evaluator = evaluator
        self.cache = cache
        self.cache_ttl = cache_ttl

    async def get_identity(self, user_id: str | None) -> IdentityResult | None:
        return await self.evaluator.get_identity(user_id)

    async def get_user_permissions(self, user_id: str | None) -> set[str]:
        if await self.get_identity(user_id) is None:
            return set()
        assert user_id is not None
        key = permission_key(user_id)
        if self.cache.is_available():
            cached = await self.cache.get(key)
            if cached is not None:
                return set(cached)
        permissions = await self.evaluator.get_user_permissions(user_id)
        if self.cache.is_available():
            await self.cache.set(key, sorted(permissions), ttl=self.cache_ttl)
        return permissions

    async def has_permission(
        self, user_id: str | None, permission_name: str | Enum
    ) -> bool:
        name = permission_value(permission_name)
        if not user_id or not name:
            return False
        return name in await self.get_user_permissions(user_id)

    async def is_platform_admin(self, user_id: str | None) -> bool:
        return await self.evaluator.is_platform_admin(user_id)
