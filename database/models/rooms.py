"""
Rooms Module

Interview rooms, the committee members staffing them and the interview
currently running inside.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    Column,
    String,
    ForeignKey,
    DateTime,
    Table,
    func,
)
from database.engine import Base
from database.models.types import IdType
from datetime import datetime, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.companies import Company
    from database.models.users import User


room_committee_members = Table(
    "room_committee_members",
    Base.metadata,
    Column(
        "room_id",
        IdType,
        ForeignKey("rooms.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        IdType,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)


class Room(Base):
    """
    A room hosts at most one company and at most one running interview.

    ``current_interview_id`` is written only through the room occupancy
    coordinator.
    """

    __tablename__ = "rooms"

    id: Mapped[int] = mapped_column(
        IdType, primary_key=True, nullable=False, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255))

    company_id: Mapped[int | None] = mapped_column(
        IdType, ForeignKey("companies.id"), unique=True, nullable=True
    )
    current_interview_id: Mapped[int | None] = mapped_column(
        IdType, ForeignKey("interviews.id"), nullable=True
    )

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
    company: Mapped["Company | None"] = relationship("Company", back_populates="room")
    committee_members: Mapped[list["User"]] = relationship(
        "User", secondary=room_committee_members, lazy="selectin"
    )

    @property
    def committee_member_ids(self) -> set[int]:
        return {member.id for member in self.committee_members}

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, name='{self.name}', company_id={self.company_id})>"
