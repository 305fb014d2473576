"""Typed permission and role registry.

Code references permissions and roles through these enums rather than
free-form strings. validate_registry() is run once at startup and fails
fast when the enums and the provisioning definition drift apart.
"""

from enum import Enum

from sppg_rbac.domain.exceptions import RegistryMismatchError
from sppg_rbac.domain.provisioning import ProvisioningDefinition
from sppg_rbac.shared.enums import _ValuesMixin


class PermissionName(_ValuesMixin, str, Enum):
    """Every permission the platform checks, as '<module>.<action>'."""

    # Platform (SuperAdmin)
    PLATFORM_MANAGE = "platform.manage"
    SPPG_CREATE = "sppg.create"
    SPPG_APPROVE = "sppg.approve"
    SPPG_SUSPEND = "sppg.suspend"
    SUBSCRIPTION_MANAGE = "subscription.manage"
    ANALYTICS_GLOBAL = "analytics.global"

    # Access control administration
    ROLE_READ = "role.read"
    ROLE_MANAGE = "role.manage"
    ROLE_ASSIGN = "role.assign"
    PERMISSION_READ = "permission.read"

    # Menu
    MENU_CREATE = "menu.create"
    MENU_READ = "menu.read"
    MENU_UPDATE = "menu.update"
    MENU_DELETE = "menu.delete"
    MENU_APPROVE = "menu.approve"

    # Menu planning
    MENU_PLANNING_CREATE = "menu_planning.create"
    MENU_PLANNING_READ = "menu_planning.read"
    MENU_PLANNING_UPDATE = "menu_planning.update"
    MENU_PLANNING_DELETE = "menu_planning.delete"
    MENU_PLANNING_APPROVE = "menu_planning.approve"

    # Procurement
    PROCUREMENT_CREATE = "procurement.create"
    PROCUREMENT_READ = "procurement.read"
    PROCUREMENT_UPDATE = "procurement.update"
    PROCUREMENT_DELETE = "procurement.delete"
    PROCUREMENT_APPROVE = "procurement.approve"

    # Production
    PRODUCTION_CREATE = "production.create"
    PRODUCTION_READ = "production.read"
    PRODUCTION_UPDATE = "production.update"
    PRODUCTION_APPROVE = "production.approve"

    # Distribution
    DISTRIBUTION_CREATE = "distribution.create"
    DISTRIBUTION_READ = "distribution.read"
    DISTRIBUTION_UPDATE = "distribution.update"
    DISTRIBUTION_APPROVE = "distribution.approve"

    # Inventory
    INVENTORY_READ = "inventory.read"
    INVENTORY_UPDATE = "inventory.update"
    INVENTORY_AUDIT = "inventory.audit"

    # Staff
    STAFF_CREATE = "staff.create"
    STAFF_READ = "staff.read"
    STAFF_UPDATE = "staff.update"
    STAFF_DELETE = "staff.delete"

    # Reports
    REPORT_DAILY = "report.daily"
    REPORT_WEEKLY = "report.weekly"
    REPORT_MONTHLY = "report.monthly"
    REPORT_EXPORT = "report.export"

    # Distribution points
    DISTRIBUTION_POINT_CREATE = "distribution_point.create"
    DISTRIBUTION_POINT_READ = "distribution_point.read"
    DISTRIBUTION_POINT_UPDATE = "distribution_point.update"
    DISTRIBUTION_POINT_DELETE = "distribution_point.delete"

    @property
    def module(self) -> str:
        return self.value.partition(".")[0]

    @property
    def action(self) -> str:
        return self.value.partition(".")[2]


class RoleCode(_ValuesMixin, str, Enum):
    """Immutable lookup keys of the canonical roles."""

    SUPERADMIN = "superadmin"
    ADMIN_SPPG = "admin-sppg"
    MANAGER_OPERASIONAL = "manager-operasional"
    KOORDINATOR_DAPUR = "koordinator-dapur"
    STAFF_DAPUR = "staff-dapur"
    KOORDINATOR_DISTRIBUSI = "koordinator-distribusi"
    STAFF_DISTRIBUSI = "staff-distribusi"
    ADMIN_KEUANGAN = "admin-keuangan"
    STAFF_ADMIN = "staff-admin"


def validate_registry(definition: ProvisioningDefinition) -> None:
    """Check the enums and the definition declare the same names.

    A permission or role declared on one side only means code could check
    something no role can ever grant, or a provisioned role has no typed
    handle. Either way startup must stop.

    Raises:
        RegistryMismatchError: Listing every name present on one side only.
    """
    registered_permissions = set(PermissionName.values())
    defined_permissions = definition.permission_names()
    registered_roles = set(RoleCode.values())
    defined_roles = definition.role_codes()
    if registered_permissions == defined_permissions and registered_roles == defined_roles:
        return
    raise RegistryMismatchError(
        missing_permissions=registered_permissions - defined_permissions,
        unregistered_permissions=defined_permissions - registered_permissions,
        missing_roles=registered_roles - defined_roles,
        unregistered_roles=defined_roles - registered_roles,
    )
