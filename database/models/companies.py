"""
Companies Module

Organizations taking part in the fair, each interviewing in one room.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    Boolean,
    DateTime,
    Integer,
    func,
    Index,
)
from database.engine import Base
from database.models.types import IdType
from datetime import datetime, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.rooms import Room


class Company(Base):
    """Participating company. Inactive companies accept no new queue joins."""

    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(
        IdType, primary_key=True, nullable=False, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    sector: Mapped[str | None] = mapped_column(String(255))
    website: Mapped[str | None] = mapped_column(String(500))

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Only used for wait estimates, never for ordering
    estimated_interview_duration: Mapped[int | None] = mapped_column(Integer)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    room: Mapped["Room | None"] = relationship(
        "Room", back_populates="company", uselist=False
    )

    __table_args__ = (Index("idx_company_active", "is_active"),)

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name='{self.name}', active={self.is_active})>"
