"""
Queue service functions.

Thin facade over the lifecycle controller for API handlers. Every function
returns a result dict: ``{"success": True, ...}`` on success, or
``{"success": False, "error": {"code", "message"}, "status_code"}`` when the
engine rejects the operation.
"""

from typing import Any, Dict, List, Optional
import logging

from core.middleware.error_handling import QueueHTTPException
from core.queueing.errors import QueueError
from core.queueing.lifecycle import InterviewLifecycleController
from core.queueing.results import to_payload
from database.models.interviews import InterviewStatus

logger = logging.getLogger(__name__)


def _failure(exc: QueueError) -> Dict[str, Any]:
    return {
        "success": False,
        "error": exc.to_dict(),
        "status_code": exc.status_code,
    }


def ensure_success(result: Dict[str, Any]) -> Dict[str, Any]:
    """Raise the HTTP form of a failed result, pass a successful one through."""
    if not result.get("success"):
        error = result.get("error") or {}
        raise QueueHTTPException(
            status_code=result.get("status_code", 400),
            code=error.get("code", "QUEUE_ERROR"),
            message=error.get("message", "Queue operation failed"),
        )
    return result


# ==================== Candidate operations ==================== #

async def join_queue(
    controller: InterviewLifecycleController,
    candidate_id: int,
    company_ids: List[int],
) -> Dict[str, Any]:
    """Queue a candidate for the selected companies."""
    try:
        results = await controller.join_queue(candidate_id, company_ids)
    except QueueError as exc:
        return _failure(exc)

    return {
        "success": True,
        "candidate_id": candidate_id,
        "interviews": to_payload(results),
    }


async def cancel_interview(
    controller: InterviewLifecycleController,
    interview_id: int,
    candidate_id: int,
) -> Dict[str, Any]:
    try:
        result = await controller.cancel(interview_id, candidate_id)
    except QueueError as exc:
        return _failure(exc)
    return {"success": True, "interview": to_payload(result)}


async def get_candidate_queue_status(
    controller: InterviewLifecycleController,
    candidate_id: int,
) -> Dict[str, Any]:
    try:
        interviews = await controller.get_candidate_queue_status(candidate_id)
    except QueueError as exc:
        return _failure(exc)
    return {
        "success": True,
        "candidate_id": candidate_id,
        "interviews": to_payload(interviews),
    }


async def get_candidate_history(
    controller: InterviewLifecycleController,
    candidate_id: int,
) -> Dict[str, Any]:
    try:
        interviews = await controller.get_candidate_history(candidate_id)
    except QueueError as exc:
        return _failure(exc)
    return {
        "success": True,
        "candidate_id": candidate_id,
        "interviews": to_payload(interviews),
        "total": len(interviews),
    }


async def get_candidate_notifications(
    controller: InterviewLifecycleController,
    candidate_id: int,
    threshold: Optional[int] = None,
) -> Dict[str, Any]:
    """Interviews whose turn is close."""
    try:
        upcoming = await controller.get_candidate_notifications(candidate_id, threshold)
    except QueueError as exc:
        return _failure(exc)
    return {
        "success": True,
        "candidate_id": candidate_id,
        "upcoming": to_payload(upcoming),
    }


async def get_companies_for_candidate(
    controller: InterviewLifecycleController,
    candidate_id: int,
) -> Dict[str, Any]:
    """Active companies with queue lengths, flagged where the candidate is queued."""
    try:
        companies = await controller.get_companies_for_candidate(candidate_id)
    except QueueError as exc:
        return _failure(exc)
    return {
        "success": True,
        "candidate_id": candidate_id,
        "companies": to_payload(companies),
    }


# ==================== Company queue reads ==================== #

async def get_company_queue(
    controller: InterviewLifecycleController,
    company_id: int,
) -> Dict[str, Any]:
    try:
        rows = await controller.get_queue_for_company(company_id)
    except QueueError as exc:
        return _failure(exc)
    return {
        "success": True,
        "company_id": company_id,
        "queue": to_payload(rows),
        "waiting": sum(1 for row in rows if row.status == InterviewStatus.WAITING),
    }


async def get_next_candidate(
    controller: InterviewLifecycleController,
    company_id: int,
) -> Dict[str, Any]:
    try:
        row = await controller.get_next_candidate(company_id)
    except QueueError as exc:
        return _failure(exc)
    return {"success": True, "company_id": company_id, "next": to_payload(row)}


# ==================== Committee operations ==================== #

async def start_interview(
    controller: InterviewLifecycleController,
    interview_id: int,
    committee_member_id: int,
) -> Dict[str, Any]:
    try:
        result = await controller.start(interview_id, committee_member_id)
    except QueueError as exc:
        return _failure(exc)
    return {"success": True, "interview": to_payload(result)}


async def complete_interview(
    controller: InterviewLifecycleController,
    interview_id: int,
    committee_member_id: int,
) -> Dict[str, Any]:
    try:
        result = await controller.complete(interview_id, committee_member_id)
    except QueueError as exc:
        return _failure(exc)
    return {"success": True, "interview": to_payload(result)}


async def mark_absent(
    controller: InterviewLifecycleController,
    interview_id: int,
    committee_member_id: Optional[int] = None,
) -> Dict[str, Any]:
    try:
        result = await controller.mark_absent(interview_id, committee_member_id)
    except QueueError as exc:
        return _failure(exc)
    return {"success": True, "interview": to_payload(result)}


async def get_room_view(
    controller: InterviewLifecycleController,
    committee_member_id: int,
) -> Dict[str, Any]:
    try:
        view = await controller.get_room_view(committee_member_id)
    except QueueError as exc:
        return _failure(exc)
    return {"success": True, **to_payload(view)}


# ==================== Admin operations ==================== #

async def override_status(
    controller: InterviewLifecycleController,
    interview_id: int,
    new_status: InterviewStatus,
) -> Dict[str, Any]:
    try:
        result = await controller.admin_override_status(interview_id, new_status)
    except QueueError as exc:
        return _failure(exc)

    logger.info(f"Status override applied to interview {interview_id}: {result.status.value}")
    return {"success": True, "interview": to_payload(result)}
