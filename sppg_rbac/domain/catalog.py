"""Canonical permission catalog and role definitions for the SPPG platform.

CANONICAL_DEFINITION is what the provisioning loader materializes on every
deploy and what the typed registry is validated against. SuperAdmin is the
only system role; the other roles are templates created inside each tenant
(SPPG) at onboarding.
"""

from sppg_rbac.domain.provisioning import (
    PermissionSpec,
    ProvisioningDefinition,
    RoleSpec,
)
from sppg_rbac.domain.registry import PermissionName as P
from sppg_rbac.domain.registry import RoleCode

PERMISSIONS: list[tuple[P, str]] = [
    (P.PLATFORM_MANAGE, "Kelola platform secara keseluruhan"),
    (P.SPPG_CREATE, "Membuat SPPG baru"),
    (P.SPPG_APPROVE, "Menyetujui pendaftaran SPPG"),
    (P.SPPG_SUSPEND, "Menangguhkan SPPG"),
    (P.SUBSCRIPTION_MANAGE, "Kelola semua langganan"),
    (P.ANALYTICS_GLOBAL, "Lihat analytics global"),
    (P.ROLE_READ, "Melihat role dan hak akses"),
    (P.ROLE_MANAGE, "Membuat, mengubah dan menonaktifkan role"),
    (P.ROLE_ASSIGN, "Memberikan dan mencabut role pengguna"),
    (P.PERMISSION_READ, "Melihat katalog hak akses"),
    (P.MENU_CREATE, "Membuat menu baru"),
    (P.MENU_READ, "Melihat menu"),
    (P.MENU_UPDATE, "Mengubah menu"),
    (P.MENU_DELETE, "Menghapus menu"),
    (P.MENU_APPROVE, "Menyetujui menu"),
    (P.MENU_PLANNING_CREATE, "Membuat perencanaan menu"),
    (P.MENU_PLANNING_READ, "Melihat perencanaan menu"),
    (P.MENU_PLANNING_UPDATE, "Mengubah perencanaan menu"),
    (P.MENU_PLANNING_DELETE, "Menghapus perencanaan menu"),
    (P.MENU_PLANNING_APPROVE, "Menyetujui perencanaan menu"),
    (P.PROCUREMENT_CREATE, "Membuat pengadaan"),
    (P.PROCUREMENT_READ, "Melihat pengadaan"),
    (P.PROCUREMENT_UPDATE, "Mengubah pengadaan"),
    (P.PROCUREMENT_DELETE, "Menghapus pengadaan"),
    (P.PROCUREMENT_APPROVE, "Menyetujui pengadaan"),
    (P.PRODUCTION_CREATE, "Input data produksi"),
    (P.PRODUCTION_READ, "Melihat data produksi"),
    (P.PRODUCTION_UPDATE, "Mengubah data produksi"),
    (P.PRODUCTION_APPROVE, "Menyetujui produksi"),
    (P.DISTRIBUTION_CREATE, "Input data distribusi"),
    (P.DISTRIBUTION_READ, "Melihat data distribusi"),
    (P.DISTRIBUTION_UPDATE, "Mengubah data distribusi"),
    (P.DISTRIBUTION_APPROVE, "Menyetujui distribusi"),
    (P.INVENTORY_READ, "Melihat stok"),
    (P.INVENTORY_UPDATE, "Update stok"),
    (P.INVENTORY_AUDIT, "Audit stok"),
    (P.STAFF_CREATE, "Menambah staf"),
    (P.STAFF_READ, "Melihat data staf"),
    (P.STAFF_UPDATE, "Mengubah data staf"),
    (P.STAFF_DELETE, "Menghapus staf"),
    (P.REPORT_DAILY, "Melihat laporan harian"),
    (P.REPORT_WEEKLY, "Melihat laporan mingguan"),
    (P.REPORT_MONTHLY, "Melihat laporan bulanan"),
    (P.REPORT_EXPORT, "Export laporan"),
    (P.DISTRIBUTION_POINT_CREATE, "Membuat titik distribusi"),
    (P.DISTRIBUTION_POINT_READ, "Melihat titik distribusi"),
    (P.DISTRIBUTION_POINT_UPDATE, "Mengubah titik distribusi"),
    (P.DISTRIBUTION_POINT_DELETE, "Menghapus titik distribusi"),
]

_ACCESS_ADMIN = [P.ROLE_READ, P.ROLE_MANAGE, P.ROLE_ASSIGN, P.PERMISSION_READ]

_SPPG_FULL_ACCESS = [
    P.MENU_CREATE, P.MENU_READ, P.MENU_UPDATE, P.MENU_DELETE, P.MENU_APPROVE,
    P.MENU_PLANNING_CREATE, P.MENU_PLANNING_READ, P.MENU_PLANNING_UPDATE,
    P.MENU_PLANNING_DELETE, P.MENU_PLANNING_APPROVE,
    P.PROCUREMENT_CREATE, P.PROCUREMENT_READ, P.PROCUREMENT_UPDATE,
    P.PROCUREMENT_DELETE, P.PROCUREMENT_APPROVE,
    P.PRODUCTION_CREATE, P.PRODUCTION_READ, P.PRODUCTION_UPDATE, P.PRODUCTION_APPROVE,
    P.DISTRIBUTION_CREATE, P.DISTRIBUTION_READ, P.DISTRIBUTION_UPDATE,
    P.DISTRIBUTION_APPROVE,
    P.INVENTORY_READ, P.INVENTORY_UPDATE, P.INVENTORY_AUDIT,
    P.STAFF_CREATE, P.STAFF_READ, P.STAFF_UPDATE, P.STAFF_DELETE,
    P.REPORT_DAILY, P.REPORT_WEEKLY, P.REPORT_MONTHLY, P.REPORT_EXPORT,
    P.DISTRIBUTION_POINT_CREATE, P.DISTRIBUTION_POINT_READ,
    P.DISTRIBUTION_POINT_UPDATE, P.DISTRIBUTION_POINT_DELETE,
]

# (code, display name, description, is_system_role, permissions)
ROLES: list[tuple[RoleCode, str, str, bool, list[P]]] = [
    (
        RoleCode.SUPERADMIN,
        "SuperAdmin Platform",
        "Administrator platform dengan akses penuh",
        True,
        [
            P.PLATFORM_MANAGE, P.SPPG_CREATE, P.SPPG_APPROVE, P.SPPG_SUSPEND,
            P.SUBSCRIPTION_MANAGE, P.ANALYTICS_GLOBAL,
            *_ACCESS_ADMIN,
        ],
    ),
    (
        RoleCode.ADMIN_SPPG,
        "Admin SPPG",
        "Administrator SPPG dengan akses penuh",
        False,
        [*_SPPG_FULL_ACCESS, *_ACCESS_ADMIN],
    ),
    (
        RoleCode.MANAGER_OPERASIONAL,
        "Manager Operasional",
        "Manager dengan akses approve",
        False,
        [
            P.MENU_READ, P.MENU_APPROVE,
            P.MENU_PLANNING_READ, P.MENU_PLANNING_APPROVE,
            P.PROCUREMENT_READ, P.PROCUREMENT_APPROVE,
            P.PRODUCTION_READ, P.PRODUCTION_APPROVE,
            P.DISTRIBUTION_READ, P.DISTRIBUTION_APPROVE,
            P.INVENTORY_READ, P.INVENTORY_AUDIT,
            P.STAFF_READ,
            P.REPORT_DAILY, P.REPORT_WEEKLY, P.REPORT_MONTHLY, P.REPORT_EXPORT,
            P.DISTRIBUTION_POINT_READ,
        ],
    ),
    (
        RoleCode.KOORDINATOR_DAPUR,
        "Koordinator Dapur",
        "Koordinator produksi makanan",
        False,
        [
            P.MENU_READ, P.MENU_CREATE, P.MENU_UPDATE,
            P.MENU_PLANNING_READ, P.MENU_PLANNING_CREATE, P.MENU_PLANNING_UPDATE,
            P.PROCUREMENT_READ,
            P.PRODUCTION_CREATE, P.PRODUCTION_READ, P.PRODUCTION_UPDATE,
            P.PRODUCTION_APPROVE,
            P.INVENTORY_READ, P.INVENTORY_UPDATE,
            P.STAFF_READ,
        ],
    ),
    (
        RoleCode.STAFF_DAPUR,
        "Staff Dapur",
        "Staff produksi makanan",
        False,
        [
            P.MENU_READ,
            P.MENU_PLANNING_READ,
            P.PRODUCTION_CREATE, P.PRODUCTION_READ,
            P.INVENTORY_READ,
        ],
    ),
    (
        RoleCode.KOORDINATOR_DISTRIBUSI,
        "Koordinator Distribusi",
        "Koordinator distribusi makanan",
        False,
        [
            P.PRODUCTION_READ,
            P.DISTRIBUTION_CREATE, P.DISTRIBUTION_READ, P.DISTRIBUTION_UPDATE,
            P.DISTRIBUTION_APPROVE,
            P.DISTRIBUTION_POINT_CREATE, P.DISTRIBUTION_POINT_READ,
            P.DISTRIBUTION_POINT_UPDATE, P.DISTRIBUTION_POINT_DELETE,
            P.STAFF_READ,
        ],
    ),
    (
        RoleCode.STAFF_DISTRIBUSI,
        "Staff Distribusi",
        "Staff distribusi makanan",
        False,
        [P.DISTRIBUTION_CREATE, P.DISTRIBUTION_READ, P.DISTRIBUTION_POINT_READ],
    ),
    (
        RoleCode.ADMIN_KEUANGAN,
        "Admin Keuangan",
        "Administrator keuangan",
        False,
        [
            P.PROCUREMENT_READ, P.PROCUREMENT_APPROVE,
            P.INVENTORY_READ, P.INVENTORY_AUDIT,
            P.REPORT_DAILY, P.REPORT_WEEKLY, P.REPORT_MONTHLY, P.REPORT_EXPORT,
        ],
    ),
    (
        RoleCode.STAFF_ADMIN,
        "Staff Admin",
        "Staff administrasi",
        False,
        [
            P.MENU_PLANNING_READ, P.MENU_PLANNING_CREATE, P.MENU_PLANNING_UPDATE,
            P.PROCUREMENT_READ, P.PROCUREMENT_CREATE, P.PROCUREMENT_UPDATE,
            P.REPORT_DAILY, P.REPORT_WEEKLY, P.REPORT_MONTHLY,
            P.DISTRIBUTION_POINT_READ, P.DISTRIBUTION_POINT_CREATE,
            P.DISTRIBUTION_POINT_UPDATE,
        ],
    ),
]


def build_canonical_definition() -> ProvisioningDefinition:
    """Build the definition from the PERMISSIONS and ROLES tables."""
    return ProvisioningDefinition(
        permissions=tuple(
            PermissionSpec(
                name=perm.value,
                module=perm.module,
                action=perm.action,
                description=description,
            )
            for perm, description in PERMISSIONS
        ),
        roles=tuple(
            RoleSpec(
                code=code.value,
                name=name,
                description=description,
                is_system_role=is_system,
                permissions=tuple(p.value for p in permissions),
            )
            for code, name, description, is_system, permissions in ROLES
        ),
    )


CANONICAL_DEFINITION = build_canonical_definition()
