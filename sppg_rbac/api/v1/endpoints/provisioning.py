"""Provisioning API: re-apply the catalog and onboard tenants (platform admins)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from sppg_rbac.api.v1.dependencies import get_provisioning_loader, require_platform_admin
from sppg_rbac.application.dtos.provisioning import ProvisioningReport
from sppg_rbac.application.services import ProvisioningLoader
from sppg_rbac.core.limiter import limit_provisioning
from sppg_rbac.schemas.provisioning import ProvisioningReportResponse, ProvisioningRequest

router = APIRouter()


def _to_response(report: ProvisioningReport) -> ProvisioningReportResponse:
    return ProvisioningReportResponse(
        permissions_created=report.permissions_created,
        permissions_updated=report.permissions_updated,
        roles_created=report.roles_created,
        roles_updated=report.roles_updated,
        bindings_replaced=report.bindings_replaced,
        tenants=report.tenants,
        changed=report.changed,
    )


@router.post("", response_model=ProvisioningReportResponse)
@limit_provisioning
async def provision(
    request: Request,
    body: ProvisioningRequest,
    loader: Annotated[ProvisioningLoader, Depends(get_provisioning_loader)],
    _: Annotated[object, Depends(require_platform_admin)],
):
    """Provision permissions and system roles, plus templates for tenants."""
    if body.all_tenants:
        report = await loader.provision_all_tenants()
    else:
        report = await loader.provision(body.tenant_ids)
    return _to_response(report)


@router.post("/tenants/{tenant_id}", response_model=ProvisioningReportResponse)
@limit_provisioning
async def provision_tenant(
    request: Request,
    tenant_id: str,
    loader: Annotated[ProvisioningLoader, Depends(get_provisioning_loader)],
    _: Annotated[object, Depends(require_platform_admin)],
):
    """Materialize tenant role templates for a newly onboarded tenant."""
    report = await loader.provision_tenant(tenant_id)
    return _to_response(report)
