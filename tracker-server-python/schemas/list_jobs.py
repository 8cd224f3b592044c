"""Pydantic schemas for list_jobs tool."""

from __future__ import annotations

from typing import Optional

from pydantic import field_validator

from schemas.common import JobItem, StrictIgnoreRequest, StrictResponse, validate_status_label


class ListJobsRequest(StrictIgnoreRequest):
    """Request schema for list_jobs."""

    query: str = ""
    status: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: Optional[str]) -> Optional[str]:
        return validate_status_label(value)


class ListJobsResponse(StrictResponse):
    """Success response schema for list_jobs."""

    jobs: list[JobItem]
    count: int
