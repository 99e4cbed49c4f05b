"""ORM models of the career-fair queue."""

from database.models.users import User, UserRole
from database.models.companies import Company
from database.models.rooms import Room, room_committee_members
from database.models.interviews import Interview, InterviewStatus, ClosedReason

__all__ = [
    "User",
    "UserRole",
    "Company",
    "Room",
    "room_committee_members",
    "Interview",
    "InterviewStatus",
    "ClosedReason",
]
