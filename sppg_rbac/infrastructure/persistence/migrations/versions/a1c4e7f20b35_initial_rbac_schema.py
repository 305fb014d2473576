"""initial rbac schema: tenant, app_user, permission, role, role_permission, user_role

Revision ID: a1c4e7f20b35
Revises:
Create Date: 2026-10-19

tenant and app_user mirror the external directory. System roles have
tenant_id NULL; a partial unique index keeps their codes unique.
"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

revision: str = "a1c4e7f20b35"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "tenant",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("code", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('active', 'suspended')", name="tenant_status_check"
        ),
    )
    op.create_index("ix_tenant_code", "tenant", ["code"], unique=True)
    op.create_index("ix_tenant_status", "tenant", ["status"], unique=False)

    op.create_table(
        "app_user",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("user_type", sa.String(), nullable=False),
        sa.Column(
            "is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("email"),
        sa.CheckConstraint(
            "user_type IN ('PLATFORM_ADMIN', 'TENANT_USER')",
            name="app_user_type_check",
        ),
        sa.CheckConstraint(
            "user_type = 'PLATFORM_ADMIN' OR tenant_id IS NOT NULL",
            name="app_user_tenant_required_check",
        ),
    )
    op.create_index("ix_app_user_tenant_id", "app_user", ["tenant_id"], unique=False)

    op.create_table(
        "permission",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("module", sa.String(), nullable=False),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index(
        "ix_permission_module_action", "permission", ["module", "action"], unique=False
    )

    op.create_table(
        "role",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=True),
        sa.Column("code", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_system_role", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("tenant_id", "code", name="uq_role_tenant_code"),
        sa.CheckConstraint(
            "(is_system_role AND tenant_id IS NULL) "
            "OR (NOT is_system_role AND tenant_id IS NOT NULL)",
            name="role_scope_check",
        ),
    )
    op.create_index("ix_role_tenant_id", "role", ["tenant_id"], unique=False)
    op.create_index(
        "uq_role_system_code",
        "role",
        ["code"],
        unique=True,
        postgresql_where=sa.text("tenant_id IS NULL"),
        sqlite_where=sa.text("tenant_id IS NULL"),
    )

    op.create_table(
        "role_permission",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("role_id", sa.String(), nullable=False),
        sa.Column("permission_id", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["role_id"], ["role.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["permission_id"], ["permission.id"], ondelete="CASCADE"
        ),
        sa.UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
    )
    op.create_index(
        "ix_role_permission_role", "role_permission", ["role_id"], unique=False
    )

    op.create_table(
        "user_role",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("role_id", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("assigned_by", sa.String(), nullable=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deactivated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["role_id"], ["role.id"], ondelete="RESTRICT"),
        sa.UniqueConstraint("user_id", "role_id", name="uq_user_role"),
    )
    op.create_index(
        "ix_user_role_active", "user_role", ["user_id", "is_active"], unique=False
    )
    op.create_index(
        "ix_user_role_role_active", "user_role", ["role_id", "is_active"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_user_role_role_active", table_name="user_role")
    op.drop_index("ix_user_role_active", table_name="user_role")
    op.drop_table("user_role")
    op.drop_index("ix_role_permission_role", table_name="role_permission")
    op.drop_table("role_permission")
    op.drop_index("uq_role_system_code", table_name="role")
    op.drop_index("ix_role_tenant_id", table_name="role")
    op.drop_table("role")
    op.drop_index("ix_permission_module_action", table_name="permission")
    op.drop_table("permission")
    op.drop_index("ix_app_user_tenant_id", table_name="app_user")
    op.drop_table("app_user")
    op.drop_index("ix_tenant_status", table_name="tenant")
    op.drop_index("ix_tenant_code", table_name="tenant")
    op.drop_table("tenant")
