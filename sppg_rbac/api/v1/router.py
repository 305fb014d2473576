"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from sppg_rbac.api.v1.dependencies.
"""

from fastapi import APIRouter

from sppg_rbac.api.v1.endpoints import (
    authorize,
    health,
    permissions,
    provisioning,
    roles,
    user_roles,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["permissions"])
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
api_router.include_router(user_roles.router, prefix="/users", tags=["user-roles"])
api_router.include_router(authorize.router, prefix="/authorize", tags=["authorize"])
api_router.include_router(
    provisioning.router, prefix="/provisioning", tags=["provisioning"]
)
