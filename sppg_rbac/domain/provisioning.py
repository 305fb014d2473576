"""Provisioning definition: the declarative catalog of permissions and roles.

A definition is plain data. ProvisioningLoader turns it into catalog rows;
the typed registry is checked against it once at startup.
"""

from dataclasses import dataclass, field

from sppg_rbac.core.constants import PERMISSION_NAME_SEP
from sppg_rbac.domain.exceptions import UnknownPermissionError, ValidationException


@dataclass(frozen=True)
class PermissionSpec:
    """One permission: name is '<module>.<action>'."""

    name: str
    module: str
    action: str
    description: str = ""

    @classmethod
    def from_name(cls, name: str, description: str = "") -> "PermissionSpec":
        """Build a PermissionSpec, splitting module and action from the dotted name."""
        module, sep, action = name.partition(PERMISSION_NAME_SEP)
        if not sep or not module or not action:
            raise ValidationException(
                f"Permission name must be '<module>.<action>': {name!r}", "name"
            )
        return cls(name=name, module=module, action=action, description=description)


@dataclass(frozen=True)
class RoleSpec:
    """One role. System roles are platform-wide; the rest are tenant templates."""

    code: str
    name: str
    description: str = ""
    is_system_role: bool = False
    permissions: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProvisioningDefinition:
    """Permissions plus roles, with each role naming the permissions it grants."""

    permissions: tuple[PermissionSpec, ...] = ()
    roles: tuple[RoleSpec, ...] = field(default_factory=tuple)

    def permission_names(self) -> set[str]:
        return {p.name for p in self.permissions}

    def role_codes(self) -> set[str]:
        return {r.code for r in self.roles}

    def system_roles(self) -> tuple[RoleSpec, ...]:
        """Roles provisioned once, platform-wide (tenant_id = None)."""
        return tuple(r for r in self.roles if r.is_system_role)

    def tenant_templates(self) -> tuple[RoleSpec, ...]:
        """Roles materialized per tenant on onboarding."""
        return tuple(r for r in self.roles if not r.is_system_role)

    def validate(self) -> None:
        """Check the definition is self-consistent.

        Raises:
            ValidationException: Duplicate permission names or role codes,
                or a permission whose module/action disagree with its name.
            UnknownPermissionError: A role references permissions that the
                definition does not declare.
        """
        names = [p.name for p in self.permissions]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValidationException(
                f"Duplicate permission names: {', '.join(duplicates)}", "permissions"
            )
        for p in self.permissions:
            if p.name != f"{p.module}{PERMISSION_NAME_SEP}{p.action}":
                raise ValidationException(
                    f"Permission {p.name!r} does not match module/action "
                    f"{p.module!r}/{p.action!r}",
                    "permissions",
                )
        codes = [r.code for r in self.roles]
        duplicate_codes = sorted({c for c in codes if codes.count(c) > 1})
        if duplicate_codes:
            raise ValidationException(
                f"Duplicate role codes: {', '.join(duplicate_codes)}", "roles"
            )
        declared = set(names)
        unknown = {n for r in self.roles for n in r.permissions if n not in declared}
        if unknown:
            raise UnknownPermissionError(unknown)
