"""Optional Redis permission cache and its invalidation."""
