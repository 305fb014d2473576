"""User ORM model: directory mirror read by the authorization subsystem.

Platform admins have no tenant; tenant users belong to exactly one.
"""

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, String, text
from sqlalchemy.orm import Mapped, mapped_column

from sppg_rbac.domain.enums import UserType
from sppg_rbac.infrastructure.persistence.database import Base
from sppg_rbac.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class User(CuidMixin, TimestampMixin, Base):
    """User. Table: app_user."""

    __tablename__ = "app_user"

    tenant_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=True, index=True
    )
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    user_type: Mapped[str] = mapped_column(
        String, nullable=False, default=UserType.TENANT_USER.value
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )

    __table_args__ = (
        CheckConstraint(
            "user_type IN ({})".format(", ".join(f"'{v}'" for v in UserType.values())),
            name="app_user_type_check",
        ),
        CheckConstraint(
            "user_type = 'PLATFORM_ADMIN' OR tenant_id IS NOT NULL",
            name="app_user_tenant_required_check",
        ),
    )
