"""Application layer: interfaces, DTOs and RBAC services.

Depends only on domain and protocol definitions (DIP). Infrastructure
implements the interfaces (SQL and in-memory unit of work, cache).
"""
