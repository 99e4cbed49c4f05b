from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    DateTime,
    func,
    ForeignKey,
    Integer,
    Index,
    text,
    Enum as SQLEnum,
)
from database.engine import Base
from database.models.types import IdType
from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.companies import Company
    from database.models.users import User


class InterviewStatus(str, PyEnum):
    """Interview status."""

    WAITING = "WAITING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (InterviewStatus.COMPLETED, InterviewStatus.CANCELLED)


ACTIVE_STATUSES = (InterviewStatus.WAITING, InterviewStatus.IN_PROGRESS)


class ClosedReason(str, PyEnum):
    """Why an interview left the queue."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"  # withdrawn by the candidate
    ABSENT = "absent"  # marked absent by the committee
    ADMIN = "admin"  # administrative correction


_ACTIVE_WHERE = text("status IN ('WAITING', 'IN_PROGRESS')")
_IN_PROGRESS_WHERE = text("status = 'IN_PROGRESS'")


class Interview(Base):
    """One candidate's place in one company's queue."""

    __tablename__ = "interviews"

    id: Mapped[int] = mapped_column(
        IdType, primary_key=True, nullable=False, autoincrement=True
    )

    # Relationships
    candidate_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("users.id"), nullable=False, index=True
    )
    company_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("companies.id"), nullable=False, index=True
    )

    status: Mapped[InterviewStatus] = mapped_column(
        SQLEnum(InterviewStatus, name="interview_status"),
        default=InterviewStatus.WAITING,
        nullable=False,
        index=True,
    )
    queue_position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Snapshot taken at join time
    priority: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    closed_reason: Mapped[ClosedReason | None] = mapped_column(
        SQLEnum(ClosedReason, name="interview_closed_reason"), nullable=True
    )

    # Scheduling
    scheduled_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    notes: Mapped[str | None] = mapped_column(String(500))

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

    candidate: Mapped["User"] = relationship("User")
    company: Mapped["Company"] = relationship("Company")

    __table_args__ = (
        Index("idx_interview_company_status", "company_id", "status"),
        Index("idx_interview_company_position", "company_id", "queue_position"),
        # One open selection per candidate and company
        Index(
            "uq_interview_active_selection",
            "candidate_id",
            "company_id",
            unique=True,
            postgresql_where=_ACTIVE_WHERE,
            sqlite_where=_ACTIVE_WHERE,
        ),
        # One running interview per company
        Index(
            "uq_interview_company_in_progress",
            "company_id",
            unique=True,
            postgresql_where=_IN_PROGRESS_WHERE,
            sqlite_where=_IN_PROGRESS_WHERE,
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Interview(id={self.id}, company_id={self.company_id}, "
            f"status='{self.status}', position={self.queue_position})>"
        )
