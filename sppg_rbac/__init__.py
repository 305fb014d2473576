"""SPPG RBAC: authorization subsystem for the SPPG nutrition platform."""

__version__ = "1.0.0"
