"""Tenant scope guard: request-level decision combining identity, tenant and permission.

UNAUTHENTICATED -> IDENTIFIED -> AUTHORIZED | FORBIDDEN. The HTTP layer
maps UNAUTHENTICATED to 401 and FORBIDDEN to 403.
"""

from __future__ import annotations

import logging
from enum import Enum

from sppg_rbac.application.dtos.identity import IdentityResult
from sppg_rbac.application.interfaces.services import IAuthorizationEvaluator
from sppg_rbac.application.services.authorization_service import permission_value
from sppg_rbac.domain.enums import AccessDecision
from sppg_rbac.domain.exceptions import AuthenticationException, AuthorizationException

logger = logging.getLogger(__name__)


class TenantScopeGuard:
    """Gate an operation on caller identity, target tenant and a named permission."""

    def __init__(self, evaluator: IAuthorizationEvaluator) -> None:
        self._evaluator = evaluator

    async def _decide(
        self,
        user_id: str | None,
        permission_name: str | Enum,
        tenant_id: str | None,
    ) -> tuple[AccessDecision, IdentityResult | None]:
        if not user_id:
            return AccessDecision.UNAUTHENTICATED, None
        identity = await self._evaluator.get_identity(user_id)
        if identity is None:
            return AccessDecision.UNAUTHENTICATED, None
        name = permission_value(permission_name)
        if (
            tenant_id is not None
            and identity.tenant_id != tenant_id
            and not identity.is_platform_admin
        ):
            logger.info(
                "Cross-tenant access denied: user=%s tenant=%s target=%s permission=%s",
                user_id,
                identity.tenant_id,
                tenant_id,
                name,
            )
            return AccessDecision.FORBIDDEN, identity
        if await self._evaluator.has_permission(user_id, name):
            return AccessDecision.AUTHORIZED, identity
        logger.debug("Permission denied: user=%s permission=%s", user_id, name)
        return AccessDecision.FORBIDDEN, identity

    async def authorize(
        self,
        user_id: str | None,
        permission_name: str | Enum,
        tenant_id: str | None = None,
    ) -> AccessDecision:
        """Decide whether user may use permission_name, optionally inside tenant_id.

        A caller from another tenant is FORBIDDEN before any permission is
        looked at, unless it is a platform admin. Platform admins still need
        the permission through their roles.
        """
        decision, _ = await self._decide(user_id, permission_name, tenant_id)
        return decision

    async def _decide_platform_admin(
        self, user_id: str | None
    ) -> tuple[AccessDecision, IdentityResult | None]:
        identity = await self._evaluator.get_identity(user_id) if user_id else None
        if identity is None:
            return AccessDecision.UNAUTHENTICATED, None
        if identity.is_platform_admin:
            return AccessDecision.AUTHORIZED, identity
        return AccessDecision.FORBIDDEN, identity

    async def authorize_platform_admin(self, user_id: str | None) -> AccessDecision:
        """Decide on trust tier alone (no named permission involved)."""
        decision, _ = await self._decide_platform_admin(user_id)
        return decision

    async def enforce(
        self,
        user_id: str | None,
        permission_name: str | Enum,
        tenant_id: str | None = None,
    ) -> IdentityResult:
        """Like authorize(), but raise on anything other than AUTHORIZED.

        Returns:
            The caller's identity.

        Raises:
            AuthenticationException: UNAUTHENTICATED.
            AuthorizationException: FORBIDDEN.
        """
        decision, identity = await self._decide(user_id, permission_name, tenant_id)
        if decision is AccessDecision.UNAUTHENTICATED or identity is None:
            raise AuthenticationException()
        if decision is AccessDecision.FORBIDDEN:
            raise AuthorizationException(
                permission=permission_value(permission_name), tenant_id=tenant_id
            )
        return identity

    async def enforce_platform_admin(self, user_id: str | None) -> IdentityResult:
        """Raise unless the caller is a platform admin; return its identity."""
        decision, identity = await self._decide_platform_admin(user_id)
        if decision is AccessDecision.UNAUTHENTICATED or identity is None:
            raise AuthenticationException()
        if decision is AccessDecision.FORBIDDEN:
            raise AuthorizationException(message="Platform admin access required")
        return identity
