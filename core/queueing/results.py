"""Value objects returned by the lifecycle controller."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Optional

from core.utils.datetime import to_iso
from database.models.interviews import InterviewStatus
from database.store import QueueRow, RoomSummary


@dataclass(frozen=True)
class JoinResult:
    company_id: int
    interview_id: int
    position: int
    estimated_wait_minutes: int


@dataclass(frozen=True)
class TransitionResult:
    interview_id: int
    company_id: int
    status: InterviewStatus
    queue_position: int
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


@dataclass(frozen=True)
class RoomView:
    """What a committee member sees for the room they staff."""

    room: RoomSummary
    company_id: Optional[int]
    company_name: Optional[str]
    current_interview: Optional[QueueRow]
    upcoming: list[QueueRow] = field(default_factory=list)


@dataclass(frozen=True)
class CandidateInterview:
    """One of a candidate's interviews, with company and room resolved."""

    interview_id: int
    company_id: int
    company_name: str
    status: InterviewStatus
    queue_position: int
    priority: int
    estimated_wait_minutes: Optional[int]
    room_name: Optional[str]
    room_location: Optional[str]
    scheduled_time: Optional[datetime]
    started_at: Optional[datetime]
    completed_at: Optional[datetime]
    created_at: datetime


@dataclass(frozen=True)
class CompanyChoice:
    """An active company as offered to a candidate choosing queues."""

    company_id: int
    name: str
    sector: Optional[str]
    website: Optional[str]
    estimated_interview_duration: int
    room_name: Optional[str]
    room_location: Optional[str]
    queue_length: int
    is_selected: bool


def to_payload(value: Any) -> Any:
    """Dataclass (or list of them) to plain JSON-ready dicts."""
    if isinstance(value, list):
        return [to_payload(item) for item in value]
    if value is None:
        return None
    payload = asdict(value)
    return _jsonable(payload)


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [_jsonable(item) for item in value]
        return sorted(items) if isinstance(value, (set, frozenset)) else items
    if isinstance(value, InterviewStatus):
        return value.value
    if isinstance(value, datetime):
        return to_iso(value)
    return value
