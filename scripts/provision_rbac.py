"""Provision the RBAC catalog (permissions, system roles, tenant role templates).

Usage:
    python -m scripts.provision_rbac
    python -m scripts.provision_rbac --tenant <tenant_id> [--tenant <tenant_id> ...]
    python -m scripts.provision_rbac --all-tenants [--definition rbac.json]

Idempotent: re-running with the same definition changes nothing and never
touches existing user-role assignments.
"""

import argparse
import asyncio
import sys

from sppg_rbac.application.services import ProvisioningLoader
from sppg_rbac.core.config import get_settings
from sppg_rbac.core.lifespan import load_configured_definition
from sppg_rbac.domain.exceptions import RbacException
from sppg_rbac.domain.registry import validate_registry
from sppg_rbac.infrastructure.persistence import database
from sppg_rbac.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWorkFactory
from sppg_rbac.infrastructure.provisioning import load_definition
from sppg_rbac.shared.logging import setup_logging


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="provision_rbac", description=__doc__.splitlines()[0])
    parser.add_argument(
        "--tenant",
        action="append",
        default=[],
        metavar="TENANT_ID",
        help="Materialize tenant role templates for this tenant (repeatable)",
    )
    parser.add_argument(
        "--all-tenants",
        action="store_true",
        help="Materialize tenant role templates for every active tenant",
    )
    parser.add_argument(
        "--definition",
        metavar="FILE",
        help="JSON provisioning definition (default: built-in catalog)",
    )
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    """Provision and print a summary. Returns the process exit code."""
    args = _parse_args(argv)
    settings = get_settings()
    setup_logging()

    try:
        if args.definition:
            definition = load_definition(args.definition)
        else:
            definition = load_configured_definition(settings)
        validate_registry(definition)
    except RbacException as e:
        print(f"Invalid definition: {e.error_code}: {e.message}", file=sys.stderr)
        return 2

    if settings.database_create_all:
        await database.create_all()

    # Cached permission sets are not invalidated here; they expire after
    # cache_ttl_permissions.
    loader = ProvisioningLoader(
        SqlAlchemyUnitOfWorkFactory(database.get_session_factory()), definition
    )
    try:
        if args.all_tenants:
            report = await loader.provision_all_tenants()
        else:
            report = await loader.provision(args.tenant)
    except RbacException as e:
        print(f"Provisioning failed: {e.error_code}: {e.message}", file=sys.stderr)
        return 1
    finally:
        await database.dispose_engine()

    print(
        f"Permissions: +{report.permissions_created} ~{report.permissions_updated}; "
        f"roles: +{report.roles_created} ~{report.roles_updated}; "
        f"bindings replaced: {report.bindings_replaced}; "
        f"tenants: {len(report.tenants)}"
    )
    if not report.changed:
        print("Already up to date")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
