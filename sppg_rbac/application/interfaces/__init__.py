"""Ports implemented by infrastructure (DIP)."""

from sppg_rbac.application.interfaces.repositories import (
    IIdentityDirectory,
    IPermissionRepository,
    IPermissionResolver,
    IRolePermissionRepository,
    IRoleRepository,
    IUserRoleRepository,
)
from sppg_rbac.application.interfaces.services import IAuthorizationEvaluator
from sppg_rbac.application.interfaces.unit_of_work import (
    IRbacUnitOfWork,
    UnitOfWorkFactory,
)

__all__ = [
    "IAuthorizationEvaluator",
    "IIdentityDirectory",
    "IPermissionRepository",
    "IPermissionResolver",
    "IRbacUnitOfWork",
    "IRolePermissionRepository",
    "IRoleRepository",
    "IUserRoleRepository",
    "UnitOfWorkFactory",
]
