"""
Interview lifecycle controller.

The only writer of ``Interview.status`` and ``Room.current_interview_id``.
Every mutating operation follows the same shape:

1. resolve the company the operation touches,
2. take that company's queue lock,
3. open one transaction and row-lock the company,
4. validate every precondition,
5. write, recompute positions where the waiting set changed, commit.

A failed precondition raises before anything is written, and any error
rolls the whole transaction back.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Optional, Sequence, Type

from sqlalchemy.exc import DBAPIError, IntegrityError

from core.queueing.errors import (
    AccessDenied,
    AlreadySelected,
    CompanyUnavailable,
    InvalidState,
    NoRoomAssigned,
    NotFound,
    NotOwner,
    QueueError,
    RoomBusy,
    StoreUnavailable,
)
from core.queueing.locks import LockManager, company_lock_key
from core.queueing.positions import DEFAULT_QUOTA, InterleaveQuota, PositionAssigner
from core.queueing.priority import classify
from core.queueing.results import (
    CandidateInterview,
    CompanyChoice,
    JoinResult,
    RoomView,
    TransitionResult,
)
from core.queueing.rooms import RoomCoordinator
from core.utils.datetime import now
from database.engine import Database
from database.models.companies import Company
from database.models.interviews import ClosedReason, Interview, InterviewStatus
from database.models.rooms import Room
from database.store import InterviewStore, QueueRow, RoomSummary

logger = logging.getLogger(__name__)


def estimate_wait_minutes(position: int, duration_minutes: int) -> int:
    """Display-only estimate: everyone ahead takes one full slot."""
    return max(position - 1, 0) * duration_minutes


class InterviewLifecycleController:
    """Sequences queue, room and interview state for every transition."""

    def __init__(
        self,
        database: Database,
        locks: LockManager,
        quota: InterleaveQuota = DEFAULT_QUOTA,
        default_duration_minutes: int = 30,
        notification_threshold: int = 4,
        renumber_on_start: bool = False,
    ):
        self.database = database
        self.locks = locks
        self.quota = quota
        self.default_duration_minutes = default_duration_minutes
        self.notification_threshold = notification_threshold
        self.renumber_on_start = renumber_on_start

    # ------------------------------------------------------------ plumbing

    @asynccontextmanager
    async def _company_transaction(
        self,
        company_ids: Iterable[int],
        conflict: Type[QueueError] = RoomBusy,
    ) -> AsyncIterator[tuple[InterviewStore, dict[int, Company]]]:
        """
        Hold the queue locks of ``company_ids`` around one transaction.

        A unique-index violation surfaces as ``conflict``; any other driver
        error as ``StoreUnavailable``.
        """
        ids = sorted(set(company_ids))
        async with self.locks.hold(company_lock_key(company_id) for company_id in ids):
            try:
                async with self.database.transaction() as session:
                    store = InterviewStore(session)
                    companies = await store.lock_companies(ids)
                    yield store, companies
            except IntegrityError as exc:
                logger.warning(f"Constraint violation on companies {ids}: {exc.orig}")
                raise conflict(company_ids=ids) from exc
            except DBAPIError as exc:
                logger.error(f"Store error on companies {ids}: {exc}")
                raise StoreUnavailable() from exc

    @asynccontextmanager
    async def _read(self) -> AsyncIterator[InterviewStore]:
        try:
            async with self.database.session() as session:
                yield InterviewStore(session)
        except DBAPIError as exc:
            logger.error(f"Store error during read: {exc}")
            raise StoreUnavailable() from exc

    async def _company_of(self, interview_id: int) -> int:
        async with self._read() as store:
            company_id = await store.get_interview_company_id(interview_id)
        if company_id is None:
            raise NotFound("Interview not found", interview_id=interview_id)
        return company_id

    @staticmethod
    async def _load_interview(store: InterviewStore, interview_id: int) -> Interview:
        interview = await store.get_interview(interview_id)
        if interview is None:
            raise NotFound("Interview not found", interview_id=interview_id)
        return interview

    @staticmethod
    def _require_status(
        interview: Interview, expected: InterviewStatus, operation: str
    ) -> None:
        if interview.status == expected:
            return
        logger.warning(
            f"Rejected {operation} on interview {interview.id}: "
            f"status is {interview.status.value}"
        )
        if interview.status.is_terminal:
            message = f"Interview is already {interview.status.value} and cannot change"
        else:
            message = f"Cannot {operation} an interview that is {interview.status.value}"
        raise InvalidState(message, interview_id=interview.id, status=interview.status.value)

    @staticmethod
    async def _require_room(rooms: RoomCoordinator, company_id: int) -> Room:
        room = await rooms.room_for_company(company_id)
        if room is None:
            raise NoRoomAssigned(company_id=company_id)
        return room

    @staticmethod
    def _require_authorized(room, committee_member_id: int) -> None:
        if not RoomCoordinator.is_authorized(room, committee_member_id):
            logger.warning(
                f"Committee member {committee_member_id} denied access to room {room.id}"
            )
            raise AccessDenied(room_id=room.id, committee_member_id=committee_member_id)

    async def _recompute(self, store: InterviewStore, company_id: int) -> None:
        await PositionAssigner(store, self.quota).assign_positions(company_id)

    @staticmethod
    async def _release_if_held(
        rooms: RoomCoordinator, room, interview: Interview
    ) -> None:
        if room is None:
            return
        if room.current_interview_id == interview.id:
            await rooms.release(room.id)
        else:
            logger.warning(
                f"Room {room.id} is not held by interview {interview.id} "
                f"(holds {room.current_interview_id}); leaving it untouched"
            )

    @staticmethod
    def _close(interview: Interview, reason: ClosedReason, status: InterviewStatus) -> None:
        interview.status = status
        interview.closed_reason = reason
        interview.queue_position = 0

    @staticmethod
    def _result(interview: Interview) -> TransitionResult:
        return TransitionResult(
            interview_id=interview.id,
            company_id=interview.company_id,
            status=interview.status,
            queue_position=interview.queue_position,
            started_at=interview.started_at,
            completed_at=interview.completed_at,
        )

    def _duration_of(self, company: Optional[Company]) -> int:
        if company is not None and company.estimated_interview_duration:
            return company.estimated_interview_duration
        return self.default_duration_minutes

    # ----------------------------------------------------------- mutations

    async def join_queue(
        self, candidate_id: int, company_ids: Sequence[int]
    ) -> list[JoinResult]:
        """
        Queue a candidate for one or more companies.

        All-or-nothing: every company is validated before the first interview
        is created, and all of them are written in one transaction.
        """
        ids = list(company_ids)
        if not ids:
            return []
        if len(set(ids)) != len(ids):
            raise AlreadySelected(
                "The same company was selected more than once",
                candidate_id=candidate_id,
            )

        async with self._company_transaction(ids, conflict=AlreadySelected) as (
            store,
            companies,
        ):
            candidate = await store.get_user(candidate_id)
            if candidate is None:
                raise NotFound("Candidate not found", candidate_id=candidate_id)

            missing = [company_id for company_id in ids if company_id not in companies]
            if missing:
                raise NotFound("Company not found", company_ids=missing)

            inactive = [company_id for company_id in ids if not companies[company_id].is_active]
            if inactive:
                raise CompanyUnavailable(company_ids=inactive)

            existing = await store.find_active_interviews(candidate_id, ids)
            if existing:
                taken = sorted(interview.company_id for interview in existing)
                logger.warning(
                    f"Candidate {candidate_id} already queued for companies {taken}"
                )
                raise AlreadySelected(candidate_id=candidate_id, company_ids=taken)

            priority = classify(candidate)
            created = [
                await store.add_interview(candidate_id, company_id, priority)
                for company_id in ids
            ]

            results = []
            for interview in created:
                positions = await PositionAssigner(store, self.quota).assign_positions(
                    interview.company_id
                )
                position = positions[interview.id]
                results.append(
                    JoinResult(
                        company_id=interview.company_id,
                        interview_id=interview.id,
                        position=position,
                        estimated_wait_minutes=estimate_wait_minutes(
                            position, self._duration_of(companies[interview.company_id])
                        ),
                    )
                )

        logger.info(
            f"Candidate {candidate_id} joined {len(results)} queue(s) "
            f"with priority {priority}"
        )
        return results

    async def start(self, interview_id: int, committee_member_id: int) -> TransitionResult:
        company_id = await self._company_of(interview_id)
        async with self._company_transaction([company_id]) as (store, _):
            interview = await self._load_interview(store, interview_id)
            self._require_status(interview, InterviewStatus.WAITING, "start")
            rooms = RoomCoordinator(store)
            room = await self._require_room(rooms, company_id)

            await rooms.claim(room.id, interview.id, committee_member_id)
            interview.status = InterviewStatus.IN_PROGRESS
            interview.started_at = now()
            interview.completed_at = None

            if self.renumber_on_start:
                await self._recompute(store, company_id)
            await store.session.flush()
            result = self._result(interview)

        logger.info(
            f"Interview {interview_id} started in room {room.id} "
            f"by committee member {committee_member_id}"
        )
        return result

    async def complete(self, interview_id: int, committee_member_id: int) -> TransitionResult:
        company_id = await self._company_of(interview_id)
        async with self._company_transaction([company_id]) as (store, _):
            interview = await self._load_interview(store, interview_id)
            self._require_status(interview, InterviewStatus.IN_PROGRESS, "complete")
            rooms = RoomCoordinator(store)
            room = await self._require_room(rooms, company_id)
            self._require_authorized(room, committee_member_id)

            self._close(interview, ClosedReason.COMPLETED, InterviewStatus.COMPLETED)
            interview.completed_at = now()
            await self._release_if_held(rooms, room, interview)
            await self._recompute(store, company_id)
            await store.session.flush()
            result = self._result(interview)

        logger.info(f"Interview {interview_id} completed in room {room.id}")
        return result

    async def cancel(self, interview_id: int, candidate_id: int) -> TransitionResult:
        company_id = await self._company_of(interview_id)
        async with self._company_transaction([company_id]) as (store, _):
            interview = await self._load_interview(store, interview_id)
            self._require_status(interview, InterviewStatus.WAITING, "cancel")
            if interview.candidate_id != candidate_id:
                logger.warning(
                    f"Candidate {candidate_id} tried to cancel interview {interview_id} "
                    f"owned by {interview.candidate_id}"
                )
                raise NotOwner(interview_id=interview_id, candidate_id=candidate_id)

            self._close(interview, ClosedReason.CANCELLED, InterviewStatus.CANCELLED)
            await self._recompute(store, company_id)
            await store.session.flush()
            result = self._result(interview)

        logger.info(f"Interview {interview_id} cancelled by candidate {candidate_id}")
        return result

    async def mark_absent(
        self, interview_id: int, committee_member_id: Optional[int] = None
    ) -> TransitionResult:
        """
        Cancel a waiting interview because the candidate did not show up.

        Same downstream effect as ``cancel``; the closed reason keeps the two
        apart for reporting. When ``committee_member_id`` is given, the member
        must staff the company's room.
        """
        company_id = await self._company_of(interview_id)
        async with self._company_transaction([company_id]) as (store, _):
            interview = await self._load_interview(store, interview_id)
            self._require_status(interview, InterviewStatus.WAITING, "mark absent")
            if committee_member_id is not None:
                room = await self._require_room(RoomCoordinator(store), company_id)
                self._require_authorized(room, committee_member_id)

            self._close(interview, ClosedReason.ABSENT, InterviewStatus.CANCELLED)
            await self._recompute(store, company_id)
            await store.session.flush()
            result = self._result(interview)

        logger.info(f"Interview {interview_id} marked absent")
        return result

    async def admin_override_status(
        self, interview_id: int, new_status: InterviewStatus | str
    ) -> TransitionResult:
        """
        Administrative correction of an interview's status.

        Allowed moves:
            WAITING -> IN_PROGRESS   claims the room without a staffing check
            IN_PROGRESS -> COMPLETED releases the room
            WAITING -> CANCELLED
            IN_PROGRESS -> WAITING   clears timestamps and releases the room

        Positions are recomputed afterwards.
        """
        try:
            target = InterviewStatus(new_status)
        except ValueError as exc:
            raise InvalidState(f"Unknown status {new_status!r}") from exc

        company_id = await self._company_of(interview_id)
        async with self._company_transaction([company_id]) as (store, _):
            interview = await self._load_interview(store, interview_id)
            current = interview.status
            if current.is_terminal:
                logger.warning(
                    f"Rejected admin override of closed interview {interview_id}: "
                    f"{current.value} -> {target.value}"
                )
                raise InvalidState(
                    f"Interview is already {current.value} and cannot change",
                    interview_id=interview_id,
                    status=current.value,
                )
            rooms = RoomCoordinator(store)

            if (current, target) == (InterviewStatus.WAITING, InterviewStatus.IN_PROGRESS):
                room = await self._require_room(rooms, company_id)
                await rooms.claim(room.id, interview.id, None)
                interview.status = InterviewStatus.IN_PROGRESS
                interview.started_at = now()
                interview.completed_at = None
            elif (current, target) == (InterviewStatus.IN_PROGRESS, InterviewStatus.COMPLETED):
                self._close(interview, ClosedReason.ADMIN, InterviewStatus.COMPLETED)
                interview.completed_at = now()
                await self._release_if_held(
                    rooms, await rooms.room_for_company(company_id), interview
                )
            elif (current, target) == (InterviewStatus.WAITING, InterviewStatus.CANCELLED):
                self._close(interview, ClosedReason.ADMIN, InterviewStatus.CANCELLED)
            elif (current, target) == (InterviewStatus.IN_PROGRESS, InterviewStatus.WAITING):
                await self._release_if_held(
                    rooms, await rooms.room_for_company(company_id), interview
                )
                interview.status = InterviewStatus.WAITING
                interview.started_at = None
                interview.completed_at = None
                interview.closed_reason = None
            else:
                logger.warning(
                    f"Rejected admin override of interview {interview_id}: "
                    f"{current.value} -> {target.value}"
                )
                raise InvalidState(
                    f"Cannot move an interview from {current.value} to {target.value}",
                    interview_id=interview_id,
                )

            await self._recompute(store, company_id)
            await store.session.flush()
            result = self._result(interview)

        logger.info(
            f"Admin moved interview {interview_id} from {current.value} to {target.value}"
        )
        return result

    # --------------------------------------------------------------- reads

    async def get_queue_for_company(self, company_id: int) -> list[QueueRow]:
        async with self._read() as store:
            if await store.get_company(company_id) is None:
                raise NotFound("Company not found", company_id=company_id)
            return await store.list_company_queue(company_id)

    async def get_next_candidate(self, company_id: int) -> Optional[QueueRow]:
        """Lowest-position waiting interview of the company, if any."""
        async with self._read() as store:
            if await store.get_company(company_id) is None:
                raise NotFound("Company not found", company_id=company_id)
            return await store.get_next_waiting(company_id)

    async def get_room_view(self, committee_member_id: int) -> RoomView:
        async with self._read() as store:
            room = await RoomCoordinator(store).room_for_member(committee_member_id)
            if room is None:
                raise NotFound(
                    "No room assigned to this committee member",
                    committee_member_id=committee_member_id,
                )
            summary = RoomSummary.from_room(room)
            if room.company_id is None:
                return RoomView(
                    room=summary, company_id=None, company_name=None, current_interview=None
                )

            company = await store.get_company(room.company_id)
            rows = await store.list_company_queue(room.company_id)

        current = next(
            (row for row in rows if row.interview_id == summary.current_interview_id), None
        )
        upcoming = [row for row in rows if row.status == InterviewStatus.WAITING]
        return RoomView(
            room=summary,
            company_id=company.id,
            company_name=company.name,
            current_interview=current,
            upcoming=upcoming,
        )

    def _candidate_interview(self, interview: Interview) -> CandidateInterview:
        company = interview.company
        room = company.room
        if interview.status == InterviewStatus.WAITING:
            wait = estimate_wait_minutes(interview.queue_position, self._duration_of(company))
        elif interview.status == InterviewStatus.IN_PROGRESS:
            wait = 0
        else:
            wait = None
        return CandidateInterview(
            interview_id=interview.id,
            company_id=company.id,
            company_name=company.name,
            status=interview.status,
            queue_position=interview.queue_position,
            priority=interview.priority,
            estimated_wait_minutes=wait,
            room_name=room.name if room else None,
            room_location=room.location if room else None,
            scheduled_time=interview.scheduled_time,
            started_at=interview.started_at,
            completed_at=interview.completed_at,
            created_at=interview.created_at,
        )

    async def _candidate_interviews(
        self, candidate_id: int, active_only: bool
    ) -> list[CandidateInterview]:
        async with self._read() as store:
            if await store.get_user(candidate_id) is None:
                raise NotFound("Candidate not found", candidate_id=candidate_id)
            interviews = await store.list_candidate_interviews(candidate_id, active_only)
            return [self._candidate_interview(interview) for interview in interviews]

    async def get_candidate_queue_status(self, candidate_id: int) -> list[CandidateInterview]:
        """The candidate's open interviews, in-progress first, then by position."""
        interviews = await self._candidate_interviews(candidate_id, active_only=True)
        interviews.sort(
            key=lambda item: (
                item.status != InterviewStatus.IN_PROGRESS,
                item.queue_position,
                item.interview_id,
            )
        )
        return interviews

    async def get_candidate_history(self, candidate_id: int) -> list[CandidateInterview]:
        return await self._candidate_interviews(candidate_id, active_only=False)

    async def get_candidate_notifications(
        self, candidate_id: int, threshold: Optional[int] = None
    ) -> list[CandidateInterview]:
        """Open interviews whose turn is close (position 1..threshold)."""
        limit = threshold if threshold is not None else self.notification_threshold
        interviews = await self.get_candidate_queue_status(candidate_id)
        return [item for item in interviews if 0 < item.queue_position <= limit]

    async def get_companies_for_candidate(self, candidate_id: int) -> list[CompanyChoice]:
        """
        Active companies a candidate can choose from, with their room, the
        number of open interviews and whether the candidate is already queued.
        """
        async with self._read() as store:
            if await store.get_user(candidate_id) is None:
                raise NotFound("Candidate not found", candidate_id=candidate_id)
            listings = await store.list_active_companies_with_queue_length(candidate_id)

        return [
            CompanyChoice(
                company_id=company.id,
                name=company.name,
                sector=company.sector,
                website=company.website,
                estimated_interview_duration=self._duration_of(company),
                room_name=room.name if room else None,
                room_location=room.location if room else None,
                queue_length=queue_length,
                is_selected=is_selected,
            )
            for company, room, queue_length, is_selected in listings
        ]
