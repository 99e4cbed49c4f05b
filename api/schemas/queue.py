"""Request schemas for the queue, committee and admin endpoints."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from database.models.interviews import InterviewStatus


class JoinQueueRequest(BaseModel):
    """A candidate selecting one or more companies."""

    candidate_id: int = Field(..., ge=1, description="Candidate joining the queues")
    company_ids: list[int] = Field(
        ..., min_length=1, description="Companies to queue for, all or nothing"
    )

    @field_validator("company_ids")
    @classmethod
    def validate_company_ids(cls, v: list[int]) -> list[int]:
        if any(company_id < 1 for company_id in v):
            raise ValueError("Company ids must be positive")
        return v


class CancelInterviewRequest(BaseModel):
    """Candidate withdrawing a waiting interview."""

    candidate_id: int = Field(..., ge=1, description="Candidate requesting the cancellation")


class CommitteeActionRequest(BaseModel):
    """Committee member starting or completing an interview."""

    committee_member_id: int = Field(..., ge=1, description="Committee member staffing the room")


class MarkAbsentRequest(BaseModel):
    """Committee member marking a candidate absent."""

    committee_member_id: Optional[int] = Field(
        None, ge=1, description="When given, must staff the company's room"
    )


class StatusOverrideRequest(BaseModel):
    """Administrative status correction."""

    status: InterviewStatus = Field(..., description="Target status")
