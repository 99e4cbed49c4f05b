"""
Committee endpoints.

Room staff start and complete interviews, mark no-shows and look at their
room's queue.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path

from api.dependencies import get_controller
from api.schemas.common import QUEUE_ERROR_RESPONSES
from api.schemas.queue import CommitteeActionRequest, MarkAbsentRequest
from api.services import queue as queue_service
from core.queueing.lifecycle import InterviewLifecycleController

router = APIRouter(prefix="/committee", tags=["committee"], responses=QUEUE_ERROR_RESPONSES)


@router.post(
    "/interviews/{interview_id}/start",
    summary="Start Interview",
    description="Claim the company's room and move a waiting interview in progress.",
)
async def start_interview(
    request: CommitteeActionRequest,
    interview_id: int = Path(..., ge=1),
    controller: InterviewLifecycleController = Depends(get_controller),
):
    result = await queue_service.start_interview(
        controller, interview_id, request.committee_member_id
    )
    return queue_service.ensure_success(result)


@router.post(
    "/interviews/{interview_id}/complete",
    summary="Complete Interview",
    description="Finish a running interview, free the room and renumber the queue.",
)
async def complete_interview(
    request: CommitteeActionRequest,
    interview_id: int = Path(..., ge=1),
    controller: InterviewLifecycleController = Depends(get_controller),
):
    result = await queue_service.complete_interview(
        controller, interview_id, request.committee_member_id
    )
    return queue_service.ensure_success(result)


@router.post(
    "/interviews/{interview_id}/absent",
    summary="Mark Candidate Absent",
)
async def mark_absent(
    interview_id: int = Path(..., ge=1),
    request: Optional[MarkAbsentRequest] = None,
    controller: InterviewLifecycleController = Depends(get_controller),
):
    """Close a waiting interview whose candidate did not show up."""
    committee_member_id = request.committee_member_id if request else None
    result = await queue_service.mark_absent(controller, interview_id, committee_member_id)
    return queue_service.ensure_success(result)


@router.get(
    "/members/{member_id}/room",
    summary="Room View",
    description="The member's room, its current interview and the waiting candidates.",
)
async def get_room_view(
    member_id: int = Path(..., ge=1),
    controller: InterviewLifecycleController = Depends(get_controller),
):
    result = await queue_service.get_room_view(controller, member_id)
    return queue_service.ensure_success(result)
