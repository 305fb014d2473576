"""Shared enumerations.

Cross-cutting enums used by application and infrastructure (e.g. actor
type). Authorization enums (UserType, AccessDecision) live in
sppg_rbac.domain.enums.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class ActorType(_ValuesMixin, str, Enum):
    """Who performed a mutation (recorded as UserRole.assigned_by context)."""

    USER = "user"
    SYSTEM = "system"
