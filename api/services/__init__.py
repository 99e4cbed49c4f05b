"""
API Services Layer.

Result-dict facade between the HTTP routes and the queue engine.
"""

from api.services.queue import (
    ensure_success,
    join_queue,
    cancel_interview,
    get_candidate_queue_status,
    get_candidate_history,
    get_candidate_notifications,
    get_company_queue,
    get_next_candidate,
    start_interview,
    complete_interview,
    mark_absent,
    get_room_view,
    override_status,
)

__all__ = [
    "ensure_success",
    # Candidates
    "join_queue",
    "cancel_interview",
    "get_candidate_queue_status",
    "get_candidate_history",
    "get_candidate_notifications",
    # Company queues
    "get_company_queue",
    "get_next_candidate",
    # Committee
    "start_interview",
    "complete_interview",
    "mark_absent",
    "get_room_view",
    # Admin
    "override_status",
]
