"""
Interview record store.

Explicit repository over the queue tables. Every method runs on the session
it was built with, so callers decide the transaction boundaries. Reads that
cross tables return fully resolved value objects instead of lazily loaded
ORM graphs.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Sequence

from sqlalchemy import and_, bindparam, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.attributes import set_committed_value

from database.models.companies import Company
from database.models.interviews import (
    ACTIVE_STATUSES,
    Interview,
    InterviewStatus,
)
from database.models.rooms import Room, room_committee_members
from database.models.users import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateSummary:
    id: int
    name: str
    email: str
    is_committee: bool
    affiliation: Optional[str]
    opportunity_type: Optional[str]

    @classmethod
    def from_user(cls, user: User) -> "CandidateSummary":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            is_committee=bool(user.is_committee),
            affiliation=user.affiliation.value if user.affiliation else None,
            opportunity_type=user.opportunity_type.value if user.opportunity_type else None,
        )


@dataclass(frozen=True)
class RoomSummary:
    id: int
    name: str
    location: Optional[str]
    company_id: Optional[int]
    current_interview_id: Optional[int]
    committee_member_ids: frozenset[int]

    @classmethod
    def from_room(cls, room: Room) -> "RoomSummary":
        return cls(
            id=room.id,
            name=room.name,
            location=room.location,
            company_id=room.company_id,
            current_interview_id=room.current_interview_id,
            committee_member_ids=frozenset(room.committee_member_ids),
        )


@dataclass(frozen=True)
class QueueRow:
    """Read model of one queued interview."""

    interview_id: int
    company_id: int
    status: InterviewStatus
    position: int
    priority: int
    created_at: datetime
    started_at: Optional[datetime]
    candidate: CandidateSummary


class InterviewStore:
    """Reads and writes interview, room, company and candidate records."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ---------------------------------------------------------------- users

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.session.get(User, user_id)

    # ------------------------------------------------------------ companies

    async def get_company(self, company_id: int) -> Optional[Company]:
        return await self.session.get(Company, company_id)

    async def lock_companies(self, company_ids: Iterable[int]) -> dict[int, Company]:
        """
        Load companies with a row lock.

        ``FOR UPDATE`` serializes queue writers across processes on
        PostgreSQL; SQLite ignores it and relies on its database-wide lock.
        """
        ids = sorted(set(company_ids))
        if not ids:
            return {}
        result = await self.session.execute(
            select(Company)
            .where(Company.id.in_(ids))
            .order_by(Company.id)
            .with_for_update()
        )
        return {company.id: company for company in result.scalars().all()}

    async def list_active_companies_with_queue_length(
        self, candidate_id: int
    ) -> list[tuple[Company, Optional[Room], int, bool]]:
        """
        Active companies with their room, open queue length and whether the
        candidate already holds an open interview there.
        """
        queue_lengths = (
            select(
                Interview.company_id,
                func.count(Interview.id).label("queue_length"),
            )
            .where(Interview.status.in_(ACTIVE_STATUSES))
            .group_by(Interview.company_id)
            .subquery()
        )
        selected = (
            select(Interview.id)
            .where(
                Interview.company_id == Company.id,
                Interview.candidate_id == candidate_id,
                Interview.status.in_(ACTIVE_STATUSES),
            )
            .exists()
        )
        result = await self.session.execute(
            select(
                Company,
                Room,
                func.coalesce(queue_lengths.c.queue_length, 0),
                selected,
            )
            .outerjoin(Room, Room.company_id == Company.id)
            .outerjoin(queue_lengths, queue_lengths.c.company_id == Company.id)
            .where(Company.is_active.is_(True))
            .order_by(Company.name, Company.id)
        )
        return [
            (company, room, int(queue_length), bool(is_selected))
            for company, room, queue_length, is_selected in result.all()
        ]

    # ---------------------------------------------------------------- rooms

    async def get_room(self, room_id: int) -> Optional[Room]:
        return await self.session.get(Room, room_id)

    async def get_room_for_company(self, company_id: int) -> Optional[Room]:
        result = await self.session.execute(
            select(Room).where(Room.company_id == company_id)
        )
        return result.scalar_one_or_none()

    async def get_room_for_member(self, member_id: int) -> Optional[Room]:
        result = await self.session.execute(
            select(Room)
            .join(room_committee_members, room_committee_members.c.room_id == Room.id)
            .where(room_committee_members.c.user_id == member_id)
            .order_by(Room.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def set_room_interview_if_free(self, room_id: int, interview_id: int) -> bool:
        """Occupy a free room in one conditional UPDATE. Returns False if it was taken."""
        await self.session.flush()
        rooms = Room.__table__
        result = await self.session.execute(
            update(rooms)
            .where(and_(rooms.c.id == room_id, rooms.c.current_interview_id.is_(None)))
            .values(current_interview_id=interview_id)
        )
        claimed = result.rowcount == 1
        if claimed:
            self._sync_loaded(Room, {room_id: interview_id}, "current_interview_id")
        return claimed

    async def clear_room_interview(self, room_id: int) -> None:
        await self.session.flush()
        rooms = Room.__table__
        await self.session.execute(
            update(rooms).where(rooms.c.id == room_id).values(current_interview_id=None)
        )
        self._sync_loaded(Room, {room_id: None}, "current_interview_id")

    def _sync_loaded(self, model, values_by_id: dict, attribute: str) -> None:
        """Mirror a Core UPDATE onto instances already loaded in the session."""
        for obj in list(self.session.identity_map.values()):
            if isinstance(obj, model) and obj.id in values_by_id:
                set_committed_value(obj, attribute, values_by_id[obj.id])

    # ----------------------------------------------------------- interviews

    async def get_interview(self, interview_id: int) -> Optional[Interview]:
        """Interview with its company and candidate loaded."""
        result = await self.session.execute(
            select(Interview)
            .options(
                selectinload(Interview.company),
                selectinload(Interview.candidate),
            )
            .where(Interview.id == interview_id)
        )
        return result.scalar_one_or_none()

    async def get_interview_company_id(self, interview_id: int) -> Optional[int]:
        result = await self.session.execute(
            select(Interview.company_id).where(Interview.id == interview_id)
        )
        return result.scalar_one_or_none()

    async def find_active_interviews(
        self, candidate_id: int, company_ids: Sequence[int]
    ) -> list[Interview]:
        result = await self.session.execute(
            select(Interview).where(
                Interview.candidate_id == candidate_id,
                Interview.company_id.in_(list(company_ids)),
                Interview.status.in_(ACTIVE_STATUSES),
            )
        )
        return list(result.scalars().all())

    async def add_interview(
        self,
        candidate_id: int,
        company_id: int,
        priority: int,
        scheduled_time: Optional[datetime] = None,
    ) -> Interview:
        interview = Interview(
            candidate_id=candidate_id,
            company_id=company_id,
            status=InterviewStatus.WAITING,
            queue_position=0,
            priority=priority,
            scheduled_time=scheduled_time,
        )
        self.session.add(interview)
        await self.session.flush()
        return interview

    async def list_waiting_with_candidates(
        self, company_id: int
    ) -> list[tuple[Interview, User]]:
        result = await self.session.execute(
            select(Interview, User)
            .join(User, User.id == Interview.candidate_id)
            .where(
                Interview.company_id == company_id,
                Interview.status == InterviewStatus.WAITING,
            )
        )
        return [(interview, user) for interview, user in result.all()]

    async def update_positions(self, positions: dict[int, int]) -> None:
        """Write many queue positions as one executemany UPDATE keyed by id."""
        if not positions:
            return
        await self.session.flush()
        interviews = Interview.__table__
        await self.session.execute(
            update(interviews)
            .where(interviews.c.id == bindparam("interview_id"))
            .values(queue_position=bindparam("position")),
            [
                {"interview_id": interview_id, "position": position}
                for interview_id, position in positions.items()
            ],
        )
        self._sync_loaded(Interview, positions, "queue_position")

    async def list_company_queue(self, company_id: int) -> list[QueueRow]:
        """Active interviews of a company, running first, then by position."""
        result = await self.session.execute(
            select(Interview, User)
            .join(User, User.id == Interview.candidate_id)
            .where(
                Interview.company_id == company_id,
                Interview.status.in_(ACTIVE_STATUSES),
            )
        )
        rows = [self._queue_row(interview, user) for interview, user in result.all()]
        rows.sort(
            key=lambda row: (
                row.status != InterviewStatus.IN_PROGRESS,
                row.position,
                row.interview_id,
            )
        )
        return rows

    async def get_next_waiting(self, company_id: int) -> Optional[QueueRow]:
        result = await self.session.execute(
            select(Interview, User)
            .join(User, User.id == Interview.candidate_id)
            .where(
                Interview.company_id == company_id,
                Interview.status == InterviewStatus.WAITING,
                Interview.queue_position > 0,
            )
            .order_by(Interview.queue_position.asc(), Interview.id.asc())
            .limit(1)
        )
        row = result.first()
        if row is None:
            return None
        return self._queue_row(row[0], row[1])

    async def list_candidate_interviews(
        self, candidate_id: int, active_only: bool = False
    ) -> list[Interview]:
        query = (
            select(Interview)
            .options(selectinload(Interview.company).selectinload(Company.room))
            .where(Interview.candidate_id == candidate_id)
        )
        if active_only:
            query = query.where(Interview.status.in_(ACTIVE_STATUSES))
        query = query.order_by(Interview.created_at.desc(), Interview.id.desc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    @staticmethod
    def _queue_row(interview: Interview, user: User) -> QueueRow:
        return QueueRow(
            interview_id=interview.id,
            company_id=interview.company_id,
            status=interview.status,
            position=interview.queue_position,
            priority=interview.priority,
            created_at=interview.created_at,
            started_at=interview.started_at,
            candidate=CandidateSummary.from_user(user),
        )
