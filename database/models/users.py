from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import (
    String,
    Boolean,
    DateTime,
    func,
    Enum as SQLEnum,
    Index,
)
from database.engine import Base
from database.models.types import IdType
from core.queueing.priority import Affiliation, OpportunityType
from datetime import datetime, timezone
from enum import Enum as PyEnum


# ==================== User Role ===================== #
class UserRole(str, PyEnum):
    STUDENT = "student"  # queues for company interviews
    COMMITTEE = "committee"  # runs interviews in assigned rooms, may also queue
    ADMIN = "admin"  # configures companies, rooms and staffing


class User(Base):
    """
    Fair participant as seen by the queue engine.

    Students and committee members are both candidates; the classification
    attributes are read when an interview is created and never afterwards.
    """

    __tablename__: str = "users"
    id: Mapped[int] = mapped_column(
        IdType, primary_key=True, nullable=False, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, name="user_role"),
        default=UserRole.STUDENT,
        nullable=False,
    )

    # Queue classification
    is_committee: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    affiliation: Mapped[Affiliation | None] = mapped_column(
        SQLEnum(Affiliation, name="affiliation"), nullable=True
    )
    opportunity_type: Mapped[OpportunityType | None] = mapped_column(
        SQLEnum(OpportunityType, name="opportunity_type"), nullable=True
    )

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

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

    __table_args__ = (Index("idx_user_role", "role"),)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
