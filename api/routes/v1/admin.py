"""Administrative corrections of interview state."""

from fastapi import APIRouter, Depends, Path

from api.dependencies import get_controller
from api.schemas.common import QUEUE_ERROR_RESPONSES
from api.schemas.queue import StatusOverrideRequest
from api.services import queue as queue_service
from core.queueing.lifecycle import InterviewLifecycleController

router = APIRouter(prefix="/admin", tags=["admin"], responses=QUEUE_ERROR_RESPONSES)


@router.put(
    "/interviews/{interview_id}/status",
    summary="Override Interview Status",
    description=(
        "Move an interview between statuses outside the normal flow, "
        "including back to WAITING from IN_PROGRESS."
    ),
)
async def override_status(
    request: StatusOverrideRequest,
    interview_id: int = Path(..., ge=1),
    controller: InterviewLifecycleController = Depends(get_controller),
):
    result = await queue_service.override_status(controller, interview_id, request.status)
    return queue_service.ensure_success(result)
