"""Shared helpers for RBAC services."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sppg_rbac.application.interfaces.unit_of_work import (
    IRbacUnitOfWork,
    UnitOfWorkFactory,
)


@asynccontextmanager
async def transaction(
    factory: UnitOfWorkFactory,
    uow: IRbacUnitOfWork | None = None,
    *,
    read_only: bool = False,
) -> AsyncIterator[IRbacUnitOfWork]:
    """Yield uow when the caller already holds one, else open a new one.

    Lets a service method run on its own or as one step of a larger
    transaction (provisioning, create-role-with-permissions) without
    committing halfway.
    """
    if uow is not None:
        yield uow
        return
    async with factory(read_only=read_only) as new_uow:
        yield new_uow
