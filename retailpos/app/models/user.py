from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from retailpos.app.core.database import Base


class RoleEnum(str, enum.Enum):
    ADMIN = "admin"
    STAFF = "staff"


class User(Base):
    """A login account. Role is fixed at creation."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(String(150), unique=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[RoleEnum] = mapped_column(
        Enum(RoleEnum, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=RoleEnum.STAFF,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    sales: Mapped[list["Sale"]] = relationship(back_populates="user")  # noqa: F821
