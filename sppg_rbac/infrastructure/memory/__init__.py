"""In-memory implementation of the RBAC unit of work."""

from sppg_rbac.infrastructure.memory.store import (
    InMemoryRbacStore,
    InMemoryUnitOfWork,
    TenantRecord,
)

__all__ = ["InMemoryRbacStore", "InMemoryUnitOfWork", "TenantRecord"]
