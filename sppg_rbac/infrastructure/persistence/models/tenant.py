"""Tenant ORM model: mirror of the SPPG directory entry (no tenant_id)."""

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from sppg_rbac.domain.enums import TenantStatus
from sppg_rbac.infrastructure.persistence.database import Base
from sppg_rbac.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Tenant(CuidMixin, TimestampMixin, Base):
    """Tenant (SPPG). Table: tenant. Status: active, suspended."""

    __tablename__ = "tenant"

    code: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=TenantStatus.ACTIVE.value, index=True
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ({})".format(
                ", ".join(f"'{v}'" for v in TenantStatus.values())
            ),
            name="tenant_status_check",
        ),
    )
