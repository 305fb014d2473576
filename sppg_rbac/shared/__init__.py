"""Shared cross-cutting helpers: actor context, enums, logging, utils."""
