"""Tests for domain exceptions (error_code, message, details)."""

from sppg_rbac.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DuplicateRoleError,
    IdentityNotFoundError,
    InvalidScopeError,
    RbacException,
    RegistryMismatchError,
    ResourceNotFoundException,
    RoleInUseError,
    RoleNotFoundError,
    TenantMismatchError,
    UnknownPermissionError,
    ValidationException,
)


def test_rbac_exception_default_error_code() -> None:
    """Base RbacException uses class name as error_code when not provided."""
    exc = RbacException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "RbacException"
    assert exc.details == {}


def test_rbac_exception_to_dict() -> None:
    exc = RbacException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {
        "error": "CUSTOM",
        "message": "Oops",
        "details": {"key": "value"},
    }


def test_validation_exception_with_field() -> None:
    exc = ValidationException("Invalid format", field="code")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "code"}


def test_authentication_and_authorization_codes() -> None:
    assert AuthenticationException().error_code == "AUTHENTICATION_ERROR"
    exc = AuthorizationException(permission="menu.approve", tenant_id="t1")
    assert exc.error_code == "PERMISSION_DENIED"
    assert "menu.approve" in exc.message


def test_not_found_family_shares_base() -> None:
    """Role and identity lookups are ResourceNotFoundException subclasses."""
    role_exc = RoleNotFoundError("manager-operasional", "t1")
    identity_exc = IdentityNotFoundError("u1")
    assert isinstance(role_exc, ResourceNotFoundException)
    assert isinstance(identity_exc, ResourceNotFoundException)
    assert role_exc.error_code == "ROLE_NOT_FOUND"
    assert identity_exc.error_code == "IDENTITY_NOT_FOUND"


def test_duplicate_role_error() -> None:
    exc = DuplicateRoleError("staff-admin", "t1")
    assert exc.error_code == "DUPLICATE_ROLE"
    assert "staff-admin" in exc.message


def test_unknown_permission_error_sorts_names() -> None:
    """All unknown names are reported, sorted, in one error."""
    exc = UnknownPermissionError({"zeta.read", "alpha.read"})
    assert exc.error_code == "UNKNOWN_PERMISSION"
    assert exc.names == ["alpha.read", "zeta.read"]


def test_tenant_mismatch_and_scope_errors() -> None:
    assert TenantMismatchError("u1", "t1", "t2").error_code == "TENANT_MISMATCH"
    assert InvalidScopeError("bad scope").error_code == "INVALID_SCOPE"


def test_role_in_use_error() -> None:
    exc = RoleInUseError("r1", 3)
    assert exc.error_code == "ROLE_IN_USE"


def test_registry_mismatch_error() -> None:
    exc = RegistryMismatchError(
        missing_permissions={"menu.cook"},
        unregistered_permissions=set(),
        missing_roles=set(),
        unregistered_roles={"chef"},
    )
    assert exc.error_code == "REGISTRY_MISMATCH"
    assert "menu.cook" in exc.message
