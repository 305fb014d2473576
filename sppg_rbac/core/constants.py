"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure. Used by the permission
cache and the unit of work that invalidates it.
"""

# Cache key prefixes (used with :user_id)
CACHE_PREFIX_PERMISSION = "rbac:permission"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Permission names are "<module>.<action>"
PERMISSION_NAME_SEP = "."

# Transaction-scoped advisory lock taken by provisioning runs (Postgres)
PROVISIONING_LOCK_KEY = 0x5B9C_2B8A
