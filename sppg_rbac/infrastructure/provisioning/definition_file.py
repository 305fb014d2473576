"""Load a provisioning definition from a JSON file."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from sppg_rbac.domain.exceptions import ValidationException
from sppg_rbac.domain.provisioning import ProvisioningDefinition
from sppg_rbac.schemas.provisioning import ProvisioningDefinitionFile

logger = logging.getLogger(__name__)


def load_definition(path: str | Path) -> ProvisioningDefinition:
    """Parse and validate a definition file.

    Raises:
        ValidationException: File unreadable, malformed, or inconsistent.
        UnknownPermissionError: A role names an undeclared permission.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ValidationException(
            f"Cannot read provisioning definition {path}: {e}", "definition"
        ) from e
    try:
        document = ProvisioningDefinitionFile.model_validate_json(raw)
    except ValidationError as e:
        raise ValidationException(
            f"Invalid provisioning definition {path}: {e.error_count()} error(s)",
            "definition",
        ) from e
    definition = document.to_domain()
    definition.validate()
    logger.info(
        "Loaded provisioning definition %s: %d permissions, %d roles",
        path,
        len(definition.permissions),
        len(definition.roles),
    )
    return definition
