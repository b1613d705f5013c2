"""
db/models/user.py

Registered account able to submit larger batches and view history.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Index, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.batch import Batch


class UserPlan:
    FREE = "free"
    PREMIUM = "premium"


class UserRole:
    USER = "user"
    ADMIN = "admin"


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    plan: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=UserPlan.FREE,
        server_default=UserPlan.FREE,
        comment="free, premium",
    )
    role: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=UserRole.USER,
        server_default=UserRole.USER,
        comment="user, admin",
    )

    batches: Mapped[list["Batch"]] = relationship(
        "Batch",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (Index("ix_users_role", "role"),)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} plan={self.plan!r}>"
