"""DTOs for provisioning runs."""

from dataclasses import dataclass, field
from enum import Enum

from sppg_rbac.shared.enums import _ValuesMixin


class UpsertOutcome(_ValuesMixin, str, Enum):
    """What an upsert did to the catalog row."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


@dataclass
class ProvisioningReport:
    """Counts of what a provisioning run created or changed.

    A second run over an unchanged definition reports no changes.
    """

    permissions_created: int = 0
    permissions_updated: int = 0
    roles_created: int = 0
    roles_updated: int = 0
    bindings_replaced: int = 0
    tenants: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return any(
            (
                self.permissions_created,
                self.permissions_updated,
                self.roles_created,
                self.roles_updated,
                self.bindings_replaced,
            )
        )

    def count_permission(self, outcome: UpsertOutcome) -> None:
        if outcome is UpsertOutcome.CREATED:
            self.permissions_created += 1
        elif outcome is UpsertOutcome.UPDATED:
            self.permissions_updated += 1

    def count_role(self, outcome: UpsertOutcome) -> None:
        if outcome is UpsertOutcome.CREATED:
            self.roles_created += 1
        elif outcome is UpsertOutcome.UPDATED:
            self.roles_updated += 1
