"""
Candidate-facing queue endpoints.

Browsing open companies, joining and leaving company queues, and the
candidate's own queue status, history and "your turn is close"
notifications. Authentication happens upstream; identities arrive as
request fields.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from api.dependencies import get_controller
from api.schemas.common import QUEUE_ERROR_RESPONSES
from api.schemas.queue import CancelInterviewRequest, JoinQueueRequest
from api.services import queue as queue_service
from core.queueing.lifecycle import InterviewLifecycleController

router = APIRouter(prefix="/queue", tags=["queue"], responses=QUEUE_ERROR_RESPONSES)


@router.post(
    "/join",
    status_code=201,
    summary="Join Company Queues",
    description="Queue a candidate for one or more companies. All selections succeed or none do.",
)
async def join_queue(
    request: JoinQueueRequest,
    controller: InterviewLifecycleController = Depends(get_controller),
):
    result = await queue_service.join_queue(
        controller,
        candidate_id=request.candidate_id,
        company_ids=request.company_ids,
    )
    return queue_service.ensure_success(result)


@router.post(
    "/interviews/{interview_id}/cancel",
    summary="Cancel Interview",
    description="Withdraw a waiting interview. Only its candidate may cancel it.",
)
async def cancel_interview(
    request: CancelInterviewRequest,
    interview_id: int = Path(..., ge=1),
    controller: InterviewLifecycleController = Depends(get_controller),
):
    result = await queue_service.cancel_interview(
        controller, interview_id=interview_id, candidate_id=request.candidate_id
    )
    return queue_service.ensure_success(result)


@router.get(
    "/companies/{company_id}",
    summary="Company Queue",
    description="Running interview first, then waiting candidates by position.",
)
async def get_company_queue(
    company_id: int = Path(..., ge=1),
    controller: InterviewLifecycleController = Depends(get_controller),
):
    result = await queue_service.get_company_queue(controller, company_id)
    return queue_service.ensure_success(result)


@router.get(
    "/companies/{company_id}/next",
    summary="Next Candidate",
    description="Lowest-position waiting interview of the company, or null.",
)
async def get_next_candidate(
    company_id: int = Path(..., ge=1),
    controller: InterviewLifecycleController = Depends(get_controller),
):
    result = await queue_service.get_next_candidate(controller, company_id)
    return queue_service.ensure_success(result)


@router.get(
    "/candidates/{candidate_id}/status",
    summary="Candidate Queue Status",
)
async def get_candidate_status(
    candidate_id: int = Path(..., ge=1),
    controller: InterviewLifecycleController = Depends(get_controller),
):
    """Open interviews of a candidate with positions and estimated waits."""
    result = await queue_service.get_candidate_queue_status(controller, candidate_id)
    return queue_service.ensure_success(result)


@router.get(
    "/candidates/{candidate_id}/companies",
    summary="Companies Open To Candidate",
    description=(
        "Active companies with room, interview duration and open queue length. "
        "Companies the candidate is already queued for are flagged as selected."
    ),
)
async def get_candidate_companies(
    candidate_id: int = Path(..., ge=1),
    controller: InterviewLifecycleController = Depends(get_controller),
):
    result = await queue_service.get_companies_for_candidate(controller, candidate_id)
    return queue_service.ensure_success(result)


@router.get(
    "/candidates/{candidate_id}/history",
    summary="Candidate Interview History",
)
async def get_candidate_history(
    candidate_id: int = Path(..., ge=1),
    controller: InterviewLifecycleController = Depends(get_controller),
):
    """Every interview of a candidate, newest first."""
    result = await queue_service.get_candidate_history(controller, candidate_id)
    return queue_service.ensure_success(result)


@router.get(
    "/candidates/{candidate_id}/notifications",
    summary="Candidate Notifications",
)
async def get_candidate_notifications(
    candidate_id: int = Path(..., ge=1),
    threshold: Optional[int] = Query(None, ge=1, le=50, description="Notify at or above this position"),
    controller: InterviewLifecycleController = Depends(get_controller),
):
    """Open interviews whose queue position is within the notification threshold."""
    result = await queue_service.get_candidate_notifications(
        controller, candidate_id, threshold
    )
    return queue_service.ensure_success(result)
