"""Infrastructure: SQL and in-memory stores, cache, definition file loading."""
