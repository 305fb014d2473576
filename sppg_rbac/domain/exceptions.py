"""Domain exceptions for the RBAC subsystem.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. The HTTP
layer maps them to responses in sppg_rbac.core.exception_handlers by
error_code.

Mutations raise; queries (has_permission, is_platform_admin, authorize)
never raise for missing data and answer "no" instead.
"""

from collections.abc import Iterable
from typing import Any


class RbacException(Exception):
    """Base exception for all RBAC errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. role_code, tenant_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(RbacException):
    """Raised when input validation fails (e.g. malformed permission name)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(RbacException):
    """Raised when the caller identity is missing or cannot be resolved."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(RbacException):
    """Raised when the caller lacks the permission required for the operation."""

    def __init__(
        self,
        permission: str | None = None,
        tenant_id: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with the permission that was checked.

        Args:
            permission: Permission name that was required (e.g. 'menu.approve').
            tenant_id: Tenant the request targeted, when scoped.
            message: Human-readable message; default used when permission omitted.
        """
        if permission:
            message = f"Permission denied: {permission}"
        details: dict[str, Any] = {}
        if permission:
            details["permission"] = permission
        if tenant_id:
            details["tenant_id"] = tenant_id
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(RbacException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class RoleNotFoundError(ResourceNotFoundException):
    """Raised when a role is unknown, or retired where an active role is required."""

    def __init__(self, role_ref: str, tenant_id: str | None = None) -> None:
        """Initialize with the role id or code that did not resolve.

        Args:
            role_ref: Role id or role code.
            tenant_id: Tenant scope used for the lookup (None = system roles).
        """
        super().__init__("Role", role_ref)
        self.error_code = "ROLE_NOT_FOUND"
        self.details["tenant_id"] = tenant_id


class IdentityNotFoundError(ResourceNotFoundException):
    """Raised when the identity directory has no such user."""

    def __init__(self, user_id: str) -> None:
        super().__init__("User", user_id)
        self.error_code = "IDENTITY_NOT_FOUND"


class DuplicateRoleError(RbacException):
    """Raised when creating a role whose (code, tenant_id) already exists."""

    def __init__(self, code: str, tenant_id: str | None) -> None:
        scope = tenant_id or "platform"
        super().__init__(
            f"Role '{code}' already exists in scope {scope}",
            "DUPLICATE_ROLE",
            {"role_code": code, "tenant_id": tenant_id},
        )


class InvalidScopeError(RbacException):
    """Raised when system/tenant scope rules are broken.

    A system role must have no tenant; a tenant role must have one. A system
    role may only be assigned to a platform admin.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "INVALID_SCOPE", details)


class UnknownPermissionError(RbacException):
    """Raised when a binding names permissions missing from the catalog.

    Carries every unknown name, not only the first one found.
    """

    def __init__(self, names: Iterable[str]) -> None:
        self.names = sorted(set(names))
        super().__init__(
            f"Unknown permission(s): {', '.join(self.names)}",
            "UNKNOWN_PERMISSION",
            {"names": self.names},
        )


class TenantMismatchError(RbacException):
    """Raised when a tenant role is assigned to a user of another tenant."""

    def __init__(
        self,
        user_id: str,
        user_tenant_id: str | None,
        role_tenant_id: str | None,
    ) -> None:
        super().__init__(
            f"User {user_id} does not belong to tenant {role_tenant_id}",
            "TENANT_MISMATCH",
            {
                "user_id": user_id,
                "user_tenant_id": user_tenant_id,
                "role_tenant_id": role_tenant_id,
            },
        )


class RoleInUseError(RbacException):
    """Raised when retiring a role that still has active assignments."""

    def __init__(self, role_id: str, active_assignments: int) -> None:
        super().__init__(
            f"Role {role_id} has {active_assignments} active assignment(s)",
            "ROLE_IN_USE",
            {"role_id": role_id, "active_assignments": active_assignments},
        )


class RegistryMismatchError(RbacException):
    """Raised at startup when the typed registry and the provisioning definition disagree."""

    def __init__(
        self,
        missing_permissions: Iterable[str] = (),
        unregistered_permissions: Iterable[str] = (),
        missing_roles: Iterable[str] = (),
        unregistered_roles: Iterable[str] = (),
    ) -> None:
        details = {
            "missing_permissions": sorted(missing_permissions),
            "unregistered_permissions": sorted(unregistered_permissions),
            "missing_roles": sorted(missing_roles),
            "unregistered_roles": sorted(unregistered_roles),
        }
        problems = [f"{key}={value}" for key, value in details.items() if value]
        super().__init__(
            "Permission registry does not match provisioning definition: "
            + "; ".join(problems),
            "REGISTRY_MISMATCH",
            details,
        )
