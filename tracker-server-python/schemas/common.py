"""Shared schema primitives for tracker tool request/response models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from models.job import Job
from models.status import display_name, match_job_status


def validate_optional_non_empty_str(value: Optional[str], field_name: str) -> Optional[str]:
    """Validate optional string fields that cannot be empty/whitespace."""
    if value is None:
        return None
    if not value.strip():
        raise ValueError(f"Invalid {field_name}: cannot be empty")
    return value


def validate_status_label(value: Optional[str]) -> Optional[str]:
    """Normalize a user-supplied status label, rejecting unknown labels."""
    if value is None:
        return None
    matched = match_job_status(value)
    if matched is None:
        raise ValueError(f"Invalid status: '{value}' is not a known job status")
    return matched.value


class StrictIgnoreRequest(BaseModel):
    """Request base with strict typing and ignored unknown fields."""

    model_config = ConfigDict(extra="ignore", strict=True)


class StrictResponse(BaseModel):
    """Response/result base with strict typing and forbidden unknown fields."""

    model_config = ConfigDict(extra="forbid")


class JobIdMixin(BaseModel):
    """Reusable job id field validation."""

    id: int

    @field_validator("id")
    @classmethod
    def validate_id(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"Invalid id: {value} must be a positive integer")
        return value


class JobItem(StrictResponse):
    """Job as returned by the tracker tools."""

    id: int
    company_name: str
    job_url: str
    job_title: str
    job_description: str
    status: str
    status_display: str
    timestamp: int
    last_modified: int

    @classmethod
    def from_job(cls, job: Job) -> "JobItem":
        return cls(
            id=job.id,
            company_name=job.company_name,
            job_url=job.job_url,
            job_title=job.job_title,
            job_description=job.job_description,
            status=job.status.value,
            status_display=display_name(job.status),
            timestamp=job.timestamp,
            last_modified=job.last_modified,
        )
