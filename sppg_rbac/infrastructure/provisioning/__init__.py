"""Provisioning definition sources other than the built-in catalog."""

from sppg_rbac.infrastructure.provisioning.definition_file import load_definition

__all__ = ["load_definition"]
