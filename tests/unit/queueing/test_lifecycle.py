"""
Tests for the interview lifecycle controller.

Tests:
- Joining queues (positions, wait estimates, all-or-nothing)
- Start / complete / cancel / absent transitions and their errors
- Terminal immutability
- Administrative overrides
- Read views (company queue, next candidate, room view, candidate views, company browse)
"""

import pytest
import pytest_asyncio

from core.queueing.errors import (
    AccessDenied,
    AlreadySelected,
    CompanyUnavailable,
    InvalidState,
    NoRoomAssigned,
    NotFound,
    NotOwner,
    RoomBusy,
)
from core.queueing.lifecycle import InterviewLifecycleController, estimate_wait_minutes
from core.queueing.locks import LocalLockManager
from core.queueing.priority import Affiliation, OpportunityType
from database.models.interviews import ClosedReason, InterviewStatus


async def positions_of(controller, company_id):
    rows = await controller.get_queue_for_company(company_id)
    return {
        row.interview_id: row.position
        for row in rows
        if row.status == InterviewStatus.WAITING
    }


async def join_one(controller, candidate_id, company_id):
    [result] = await controller.join_queue(candidate_id, [company_id])
    return result.interview_id


@pytest_asyncio.fixture
async def staffed_company(seed):
    """A company with a room staffed by one committee member."""
    member_id = await seed.committee_member("Room Chair")
    company_id = await seed.company("Acme")
    room_id = await seed.room(company_id, [member_id], name="B12", location="Block B")
    return company_id, room_id, member_id


def test_estimate_wait_minutes():
    assert estimate_wait_minutes(1, 30) == 0
    assert estimate_wait_minutes(3, 20) == 40
    assert estimate_wait_minutes(0, 30) == 0


class TestJoinQueue:
    """Test joining company queues."""

    @pytest.mark.asyncio
    async def test_join_assigns_position_and_wait(self, controller, seed):
        company_id = await seed.company(duration=20)
        first = await seed.candidate()
        second = await seed.candidate()

        [a] = await controller.join_queue(first, [company_id])
        [b] = await controller.join_queue(second, [company_id])

        assert (a.position, a.estimated_wait_minutes) == (1, 0)
        assert (b.position, b.estimated_wait_minutes) == (2, 20)
        assert b.company_id == company_id

    @pytest.mark.asyncio
    async def test_default_duration_when_missing(self, controller, seed):
        company_id = await seed.company(duration=None)
        await controller.join_queue(await seed.candidate(), [company_id])

        [result] = await controller.join_queue(await seed.candidate(), [company_id])

        assert result.estimated_wait_minutes == 30

    @pytest.mark.asyncio
    async def test_join_several_companies(self, controller, seed):
        x = await seed.company()
        y = await seed.company()
        candidate_id = await seed.candidate()

        results = await controller.join_queue(candidate_id, [y, x])

        assert [r.company_id for r in results] == [y, x]
        assert all(r.position == 1 for r in results)

    @pytest.mark.asyncio
    async def test_priority_is_snapshotted(self, controller, seed):
        company_id = await seed.company()
        candidate_id = await seed.candidate(
            affiliation=Affiliation.EXTERNAL, opportunity=OpportunityType.EMPLOYMENT
        )

        interview_id = await join_one(controller, candidate_id, company_id)

        assert (await seed.interview(interview_id)).priority == 5

    @pytest.mark.asyncio
    async def test_higher_priority_overtakes(self, controller, seed):
        company_id = await seed.company()
        observer = await join_one(
            controller,
            await seed.candidate(opportunity=OpportunityType.OBSERVATION),
            company_id,
        )
        project = await join_one(controller, await seed.candidate(), company_id)

        assert await positions_of(controller, company_id) == {project: 1, observer: 2}

    @pytest.mark.asyncio
    async def test_duplicate_join_rejected(self, controller, seed):
        company_id = await seed.company()
        candidate_id = await seed.candidate()
        await controller.join_queue(candidate_id, [company_id])

        with pytest.raises(AlreadySelected):
            await controller.join_queue(candidate_id, [company_id])

        assert await seed.count_interviews() == 1

    @pytest.mark.asyncio
    async def test_duplicate_in_same_request(self, controller, seed):
        company_id = await seed.company()

        with pytest.raises(AlreadySelected):
            await controller.join_queue(await seed.candidate(), [company_id, company_id])

        assert await seed.count_interviews() == 0

    @pytest.mark.asyncio
    async def test_rejoin_after_terminal_state(self, controller, seed):
        company_id = await seed.company()
        candidate_id = await seed.candidate()
        interview_id = await join_one(controller, candidate_id, company_id)
        await controller.cancel(interview_id, candidate_id)

        [result] = await controller.join_queue(candidate_id, [company_id])

        assert result.interview_id != interview_id
        assert result.position == 1

    @pytest.mark.asyncio
    async def test_inactive_company_writes_nothing(self, controller, seed):
        active = await seed.company()
        inactive = await seed.company(active=False)

        with pytest.raises(CompanyUnavailable):
            await controller.join_queue(await seed.candidate(), [active, inactive])

        assert await seed.count_interviews() == 0

    @pytest.mark.asyncio
    async def test_already_selected_one_of_many_writes_nothing(self, controller, seed):
        x = await seed.company()
        y = await seed.company()
        candidate_id = await seed.candidate()
        await controller.join_queue(candidate_id, [x])

        with pytest.raises(AlreadySelected):
            await controller.join_queue(candidate_id, [y, x])

        assert await seed.count_interviews() == 1

    @pytest.mark.asyncio
    async def test_unknown_candidate(self, controller, seed):
        company_id = await seed.company()
        with pytest.raises(NotFound):
            await controller.join_queue(9999, [company_id])

    @pytest.mark.asyncio
    async def test_unknown_company(self, controller, seed):
        with pytest.raises(NotFound):
            await controller.join_queue(await seed.candidate(), [9999])

    @pytest.mark.asyncio
    async def test_empty_selection(self, controller, seed):
        assert await controller.join_queue(await seed.candidate(), []) == []


class TestStart:
    """Test starting interviews."""

    @pytest.mark.asyncio
    async def test_start_claims_room(self, controller, seed, staffed_company):
        company_id, room_id, member_id = staffed_company
        interview_id = await join_one(controller, await seed.candidate(), company_id)

        result = await controller.start(interview_id, member_id)

        assert result.status == InterviewStatus.IN_PROGRESS
        assert result.started_at is not None
        interview = await seed.interview(interview_id)
        assert interview.status == InterviewStatus.IN_PROGRESS
        assert (await seed.room_state(room_id)).current_interview_id == interview_id

    @pytest.mark.asyncio
    async def test_start_keeps_positions(self, controller, seed, staffed_company):
        """Starting an interview does not renumber the waiting set."""
        company_id, _, member_id = staffed_company
        a = await join_one(controller, await seed.candidate(), company_id)
        b = await join_one(controller, await seed.candidate(), company_id)
        c = await join_one(controller, await seed.candidate(), company_id)

        await controller.start(a, member_id)

        assert await positions_of(controller, company_id) == {b: 2, c: 3}
        assert (await seed.interview(a)).queue_position == 1

    @pytest.mark.asyncio
    async def test_start_renumbers_when_enabled(self, database, seed, staffed_company):
        controller = InterviewLifecycleController(
            database, LocalLockManager(timeout=5), renumber_on_start=True
        )
        company_id, _, member_id = staffed_company
        a = await join_one(controller, await seed.candidate(), company_id)
        b = await join_one(controller, await seed.candidate(), company_id)
        c = await join_one(controller, await seed.candidate(), company_id)

        await controller.start(a, member_id)

        assert await positions_of(controller, company_id) == {b: 1, c: 2}

    @pytest.mark.asyncio
    async def test_start_without_room(self, controller, seed):
        company_id = await seed.company()
        interview_id = await join_one(controller, await seed.candidate(), company_id)

        with pytest.raises(NoRoomAssigned):
            await controller.start(interview_id, await seed.committee_member())

        assert (await seed.interview(interview_id)).status == InterviewStatus.WAITING

    @pytest.mark.asyncio
    async def test_start_by_unassigned_member(self, controller, seed, staffed_company):
        company_id, room_id, _ = staffed_company
        interview_id = await join_one(controller, await seed.candidate(), company_id)

        with pytest.raises(AccessDenied):
            await controller.start(interview_id, await seed.committee_member())

        assert (await seed.interview(interview_id)).status == InterviewStatus.WAITING
        assert (await seed.room_state(room_id)).current_interview_id is None

    @pytest.mark.asyncio
    async def test_start_when_room_busy(self, controller, seed, staffed_company):
        company_id, room_id, member_id = staffed_company
        a = await join_one(controller, await seed.candidate(), company_id)
        b = await join_one(controller, await seed.candidate(), company_id)
        await controller.start(a, member_id)

        with pytest.raises(RoomBusy):
            await controller.start(b, member_id)

        assert (await seed.interview(b)).status == InterviewStatus.WAITING
        assert (await seed.room_state(room_id)).current_interview_id == a

    @pytest.mark.asyncio
    async def test_start_twice(self, controller, seed, staffed_company):
        company_id, _, member_id = staffed_company
        interview_id = await join_one(controller, await seed.candidate(), company_id)
        await controller.start(interview_id, member_id)

        with pytest.raises(InvalidState):
            await controller.start(interview_id, member_id)

    @pytest.mark.asyncio
    async def test_start_unknown_interview(self, controller):
        with pytest.raises(NotFound):
            await controller.start(9999, 1)


class TestComplete:
    """Test completing interviews."""

    @pytest.mark.asyncio
    async def test_completion_frees_room_and_renumbers(self, controller, seed, staffed_company):
        company_id, room_id, member_id = staffed_company
        a = await join_one(controller, await seed.candidate("A"), company_id)
        b = await join_one(controller, await seed.candidate("B"), company_id)
        c = await join_one(
            controller,
            await seed.candidate("C", opportunity=OpportunityType.OBSERVATION),
            company_id,
        )
        assert await positions_of(controller, company_id) == {a: 1, b: 2, c: 3}

        await controller.start(a, member_id)
        result = await controller.complete(a, member_id)

        assert result.status == InterviewStatus.COMPLETED
        assert result.completed_at is not None
        assert (await seed.room_state(room_id)).current_interview_id is None
        assert await positions_of(controller, company_id) == {b: 1, c: 2}

        completed = await seed.interview(a)
        assert completed.queue_position == 0
        assert completed.closed_reason == ClosedReason.COMPLETED

    @pytest.mark.asyncio
    async def test_complete_waiting_interview(self, controller, seed, staffed_company):
        company_id, _, member_id = staffed_company
        interview_id = await join_one(controller, await seed.candidate(), company_id)

        with pytest.raises(InvalidState):
            await controller.complete(interview_id, member_id)

    @pytest.mark.asyncio
    async def test_complete_by_unassigned_member(self, controller, seed, staffed_company):
        company_id, room_id, member_id = staffed_company
        interview_id = await join_one(controller, await seed.candidate(), company_id)
        await controller.start(interview_id, member_id)

        with pytest.raises(AccessDenied):
            await controller.complete(interview_id, await seed.committee_member())

        assert (await seed.interview(interview_id)).status == InterviewStatus.IN_PROGRESS
        assert (await seed.room_state(room_id)).current_interview_id == interview_id

    @pytest.mark.asyncio
    async def test_room_free_for_next_candidate(self, controller, seed, staffed_company):
        company_id, room_id, member_id = staffed_company
        a = await join_one(controller, await seed.candidate(), company_id)
        b = await join_one(controller, await seed.candidate(), company_id)

        await controller.start(a, member_id)
        await controller.complete(a, member_id)
        await controller.start(b, member_id)

        assert (await seed.room_state(room_id)).current_interview_id == b


class TestCancelAndAbsent:
    """Test candidate cancellation and committee absence marking."""

    @pytest.mark.asyncio
    async def test_cancel_renumbers(self, controller, seed):
        company_id = await seed.company()
        a_candidate = await seed.candidate()
        a = await join_one(controller, a_candidate, company_id)
        b = await join_one(controller, await seed.candidate(), company_id)

        result = await controller.cancel(a, a_candidate)

        assert result.status == InterviewStatus.CANCELLED
        assert result.queue_position == 0
        assert await positions_of(controller, company_id) == {b: 1}
        assert (await seed.interview(a)).closed_reason == ClosedReason.CANCELLED

    @pytest.mark.asyncio
    async def test_cancel_by_other_candidate(self, controller, seed):
        company_id = await seed.company()
        interview_id = await join_one(controller, await seed.candidate(), company_id)

        with pytest.raises(NotOwner):
            await controller.cancel(interview_id, await seed.candidate())

        assert (await seed.interview(interview_id)).status == InterviewStatus.WAITING

    @pytest.mark.asyncio
    async def test_cancel_in_progress(self, controller, seed, staffed_company):
        company_id, _, member_id = staffed_company
        candidate_id = await seed.candidate()
        interview_id = await join_one(controller, candidate_id, company_id)
        await controller.start(interview_id, member_id)

        with pytest.raises(InvalidState):
            await controller.cancel(interview_id, candidate_id)

    @pytest.mark.asyncio
    async def test_absence_matches_cancel_downstream(self, controller, seed):
        x = await seed.company()
        y = await seed.company()
        a = await seed.candidate("A")
        others = [await seed.candidate(), await seed.candidate()]

        x_ids = [await join_one(controller, a, x)]
        y_ids = [await join_one(controller, a, y)]
        for candidate_id in others:
            x_ids.append(await join_one(controller, candidate_id, x))
            y_ids.append(await join_one(controller, candidate_id, y))

        await controller.cancel(x_ids[0], a)
        await controller.mark_absent(y_ids[0])

        x_positions = await positions_of(controller, x)
        y_positions = await positions_of(controller, y)
        assert [x_positions[i] for i in x_ids[1:]] == [y_positions[i] for i in y_ids[1:]] == [1, 2]

        cancelled, absent = await seed.interview(x_ids[0]), await seed.interview(y_ids[0])
        assert cancelled.status == absent.status == InterviewStatus.CANCELLED
        assert cancelled.closed_reason == ClosedReason.CANCELLED
        assert absent.closed_reason == ClosedReason.ABSENT

    @pytest.mark.asyncio
    async def test_absent_checks_member_when_given(self, controller, seed, staffed_company):
        company_id, _, member_id = staffed_company
        interview_id = await join_one(controller, await seed.candidate(), company_id)

        with pytest.raises(AccessDenied):
            await controller.mark_absent(interview_id, await seed.committee_member())

        result = await controller.mark_absent(interview_id, member_id)
        assert result.status == InterviewStatus.CANCELLED


class TestTerminalImmutability:
    """Terminal interviews refuse every regular transition."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["start", "complete", "cancel", "mark_absent"])
    async def test_completed_is_final(self, controller, seed, staffed_company, operation):
        company_id, room_id, member_id = staffed_company
        candidate_id = await seed.candidate()
        interview_id = await join_one(controller, candidate_id, company_id)
        await controller.start(interview_id, member_id)
        await controller.complete(interview_id, member_id)
        before = await seed.interview(interview_id)

        calls = {
            "start": lambda: controller.start(interview_id, member_id),
            "complete": lambda: controller.complete(interview_id, member_id),
            "cancel": lambda: controller.cancel(interview_id, candidate_id),
            "mark_absent": lambda: controller.mark_absent(interview_id),
        }
        with pytest.raises(InvalidState, match="already COMPLETED"):
            await calls[operation]()

        after = await seed.interview(interview_id)
        assert after.status == before.status == InterviewStatus.COMPLETED
        assert after.completed_at == before.completed_at
        assert (await seed.room_state(room_id)).current_interview_id is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["start", "complete", "cancel", "mark_absent"])
    async def test_cancelled_is_final(self, controller, seed, staffed_company, operation):
        company_id, _, member_id = staffed_company
        candidate_id = await seed.candidate()
        interview_id = await join_one(controller, candidate_id, company_id)
        await controller.cancel(interview_id, candidate_id)

        calls = {
            "start": lambda: controller.start(interview_id, member_id),
            "complete": lambda: controller.complete(interview_id, member_id),
            "cancel": lambda: controller.cancel(interview_id, candidate_id),
            "mark_absent": lambda: controller.mark_absent(interview_id),
        }
        with pytest.raises(InvalidState, match="already CANCELLED"):
            await calls[operation]()

        assert (await seed.interview(interview_id)).status == InterviewStatus.CANCELLED


class TestAdminOverride:
    """Test administrative status corrections."""

    @pytest.mark.asyncio
    async def test_waiting_to_in_progress_bypasses_staffing(self, controller, seed):
        company_id = await seed.company()
        room_id = await seed.room(company_id, [])
        interview_id = await join_one(controller, await seed.candidate(), company_id)

        result = await controller.admin_override_status(interview_id, InterviewStatus.IN_PROGRESS)

        assert result.status == InterviewStatus.IN_PROGRESS
        assert (await seed.room_state(room_id)).current_interview_id == interview_id

    @pytest.mark.asyncio
    async def test_waiting_to_in_progress_needs_free_room(self, controller, seed, staffed_company):
        company_id, _, member_id = staffed_company
        a = await join_one(controller, await seed.candidate(), company_id)
        b = await join_one(controller, await seed.candidate(), company_id)
        await controller.start(a, member_id)

        with pytest.raises(RoomBusy):
            await controller.admin_override_status(b, "IN_PROGRESS")

    @pytest.mark.asyncio
    async def test_waiting_to_in_progress_needs_room(self, controller, seed):
        company_id = await seed.company()
        interview_id = await join_one(controller, await seed.candidate(), company_id)

        with pytest.raises(NoRoomAssigned):
            await controller.admin_override_status(interview_id, InterviewStatus.IN_PROGRESS)

    @pytest.mark.asyncio
    async def test_back_to_waiting_clears_and_frees(self, controller, seed, staffed_company):
        company_id, room_id, member_id = staffed_company
        a = await join_one(controller, await seed.candidate(), company_id)
        b = await join_one(controller, await seed.candidate(), company_id)
        await controller.start(a, member_id)
        await controller.cancel(b, (await seed.interview(b)).candidate_id)

        result = await controller.admin_override_status(a, InterviewStatus.WAITING)

        assert result.status == InterviewStatus.WAITING
        assert result.started_at is None
        assert result.completed_at is None
        assert result.queue_position == 1
        assert (await seed.room_state(room_id)).current_interview_id is None

    @pytest.mark.asyncio
    async def test_in_progress_to_completed(self, controller, seed, staffed_company):
        company_id, room_id, member_id = staffed_company
        interview_id = await join_one(controller, await seed.candidate(), company_id)
        await controller.start(interview_id, member_id)

        result = await controller.admin_override_status(interview_id, InterviewStatus.COMPLETED)

        assert result.status == InterviewStatus.COMPLETED
        assert (await seed.room_state(room_id)).current_interview_id is None
        assert (await seed.interview(interview_id)).closed_reason == ClosedReason.ADMIN

    @pytest.mark.asyncio
    async def test_waiting_to_cancelled_renumbers(self, controller, seed):
        company_id = await seed.company()
        a = await join_one(controller, await seed.candidate(), company_id)
        b = await join_one(controller, await seed.candidate(), company_id)

        await controller.admin_override_status(a, InterviewStatus.CANCELLED)

        assert await positions_of(controller, company_id) == {b: 1}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("target", [
        InterviewStatus.WAITING,
        InterviewStatus.IN_PROGRESS,
        InterviewStatus.CANCELLED,
    ])
    async def test_completed_cannot_be_reopened(self, controller, seed, staffed_company, target):
        company_id, _, member_id = staffed_company
        interview_id = await join_one(controller, await seed.candidate(), company_id)
        await controller.start(interview_id, member_id)
        await controller.complete(interview_id, member_id)

        with pytest.raises(InvalidState, match="already COMPLETED"):
            await controller.admin_override_status(interview_id, target)

    @pytest.mark.asyncio
    async def test_same_status_rejected(self, controller, seed):
        company_id = await seed.company()
        interview_id = await join_one(controller, await seed.candidate(), company_id)

        with pytest.raises(InvalidState):
            await controller.admin_override_status(interview_id, InterviewStatus.WAITING)

    @pytest.mark.asyncio
    async def test_unknown_status(self, controller, seed):
        company_id = await seed.company()
        interview_id = await join_one(controller, await seed.candidate(), company_id)

        with pytest.raises(InvalidState):
            await controller.admin_override_status(interview_id, "PAUSED")


class TestReads:
    """Test queue and candidate read views."""

    @pytest.mark.asyncio
    async def test_company_queue_running_first(self, controller, seed, staffed_company):
        company_id, _, member_id = staffed_company
        a = await join_one(controller, await seed.candidate(), company_id)
        b = await join_one(controller, await seed.candidate(), company_id)
        c = await join_one(controller, await seed.candidate(), company_id)
        await controller.start(b, member_id)

        rows = await controller.get_queue_for_company(company_id)

        assert [row.interview_id for row in rows] == [b, a, c]
        assert rows[0].status == InterviewStatus.IN_PROGRESS
        assert rows[1].candidate.email.endswith("@forum.test")

    @pytest.mark.asyncio
    async def test_company_queue_unknown_company(self, controller):
        with pytest.raises(NotFound):
            await controller.get_queue_for_company(9999)

    @pytest.mark.asyncio
    async def test_next_candidate(self, controller, seed):
        company_id = await seed.company()
        assert await controller.get_next_candidate(company_id) is None

        await join_one(controller, await seed.candidate(opportunity=OpportunityType.OBSERVATION), company_id)
        first = await join_one(controller, await seed.candidate(), company_id)

        assert (await controller.get_next_candidate(company_id)).interview_id == first

    @pytest.mark.asyncio
    async def test_room_view(self, controller, seed, staffed_company):
        company_id, room_id, member_id = staffed_company
        a = await join_one(controller, await seed.candidate(), company_id)
        b = await join_one(controller, await seed.candidate(), company_id)
        await controller.start(a, member_id)

        view = await controller.get_room_view(member_id)

        assert view.room.id == room_id
        assert view.company_name == "Acme"
        assert view.current_interview.interview_id == a
        assert [row.interview_id for row in view.upcoming] == [b]

    @pytest.mark.asyncio
    async def test_room_view_for_unstaffed_member(self, controller, seed):
        with pytest.raises(NotFound):
            await controller.get_room_view(await seed.committee_member())

    @pytest.mark.asyncio
    async def test_candidate_status_and_history(self, controller, seed, staffed_company):
        company_id, _, member_id = staffed_company
        other_company = await seed.company("Globex", duration=15)
        candidate_id = await seed.candidate()
        ahead = await join_one(controller, await seed.candidate(), other_company)
        first = await join_one(controller, candidate_id, company_id)
        await controller.start(first, member_id)
        await controller.complete(first, member_id)
        second = await join_one(controller, candidate_id, other_company)

        status = await controller.get_candidate_queue_status(candidate_id)
        history = await controller.get_candidate_history(candidate_id)

        assert [item.interview_id for item in status] == [second]
        assert status[0].company_name == "Globex"
        assert status[0].queue_position == 2
        assert status[0].estimated_wait_minutes == 15
        assert [item.interview_id for item in history] == [second, first]
        assert history[1].room_name == "B12"
        assert history[1].estimated_wait_minutes is None
        assert ahead not in {item.interview_id for item in history}

    @pytest.mark.asyncio
    async def test_notifications_within_threshold(self, controller, seed, staffed_company):
        company_id, _, _ = staffed_company
        for _ in range(4):
            await join_one(controller, await seed.candidate(), company_id)
        near = await seed.candidate()
        far = await seed.candidate()
        near_id = await join_one(controller, near, company_id)
        await join_one(controller, far, company_id)

        assert [n.interview_id for n in await controller.get_candidate_notifications(near, 5)] == [near_id]
        assert await controller.get_candidate_notifications(far) == []

        [notice] = await controller.get_candidate_notifications(near, 5)
        assert notice.room_name == "B12"
        assert notice.room_location == "Block B"

    @pytest.mark.asyncio
    async def test_companies_for_candidate(self, controller, seed, staffed_company):
        company_id, _, member_id = staffed_company
        quiet_id = await seed.company("Globex", duration=None)
        closed_id = await seed.company("Initech", active=False)
        candidate_id = await seed.candidate()

        running = await join_one(controller, await seed.candidate(), company_id)
        await join_one(controller, await seed.candidate(), company_id)
        await join_one(controller, candidate_id, company_id)
        await controller.start(running, member_id)
        withdrawn = await join_one(controller, candidate_id, quiet_id)
        await controller.cancel(withdrawn, candidate_id)

        acme, globex = await controller.get_companies_for_candidate(candidate_id)

        assert acme.company_id == company_id
        assert acme.queue_length == 3
        assert acme.is_selected is True
        assert acme.room_name == "B12"
        assert acme.room_location == "Block B"
        assert acme.estimated_interview_duration == 30

        assert globex.company_id == quiet_id
        assert globex.queue_length == 0
        assert globex.is_selected is False
        assert globex.room_name is None
        assert globex.estimated_interview_duration == 30
        assert closed_id not in {acme.company_id, globex.company_id}

    @pytest.mark.asyncio
    async def test_companies_for_unknown_candidate(self, controller):
        with pytest.raises(NotFound):
            await controller.get_companies_for_candidate(9999)

    @pytest.mark.asyncio
    async def test_candidate_views_unknown_candidate(self, controller):
        with pytest.raises(NotFound):
            await controller.get_candidate_queue_status(9999)
        with pytest.raises(NotFound):
            await controller.get_candidate_history(9999)
