"""Common Pydantic schemas shared across the API."""

from typing import Any, Optional
from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Body of an error response."""

    code: str = Field(description="Error code for programmatic handling")
    message: str = Field(description="Human readable error message")
    path: str = Field(description="Request path")
    method: str = Field(description="Request method")
    details: Optional[Any] = Field(None, description="Field-level details, if any")


class ErrorResponse(BaseModel):
    """Error response model."""

    error: ErrorDetail


# Declared on routes so the OpenAPI document lists the queue error shapes
QUEUE_ERROR_RESPONSES = {
    403: {"model": ErrorResponse, "description": "Not authorized or not the owner"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
    409: {"model": ErrorResponse, "description": "Conflicting queue state"},
    503: {"model": ErrorResponse, "description": "Interview store unavailable"},
}
