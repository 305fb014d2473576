"""Permissions API: read-only catalog (permissions are provisioned, never created here)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from sppg_rbac.api.v1.dependencies import get_permission_catalog, require_permission
from sppg_rbac.application.services import PermissionCatalogService
from sppg_rbac.domain.registry import PermissionName
from sppg_rbac.schemas.permission import PermissionResponse

router = APIRouter()


@router.get("", response_model=list[PermissionResponse])
async def list_permissions(
    catalog: Annotated[PermissionCatalogService, Depends(get_permission_catalog)],
    _: Annotated[object, Depends(require_permission(PermissionName.PERMISSION_READ))],
    module: str | None = None,
):
    """List the permission catalog, optionally one module."""
    permissions = await catalog.list_permissions(module=module)
    return [PermissionResponse.model_validate(p) for p in permissions]
