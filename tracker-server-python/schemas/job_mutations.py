"""Pydantic schemas for the single-job tools (save, restore, update, delete)."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import field_validator

from schemas.common import (
    JobIdMixin,
    JobItem,
    StrictIgnoreRequest,
    StrictResponse,
    validate_optional_non_empty_str,
    validate_status_label,
)


class SaveJobRequest(StrictIgnoreRequest):
    """Request schema for save_job (scrape a posting URL and save it)."""

    url: str

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Invalid url: cannot be empty")
        return value


class RestoreJobRequest(StrictIgnoreRequest):
    """Request schema for restore_job (undo a delete)."""

    job: dict[str, Any]


class UpdateJobStatusRequest(JobIdMixin, StrictIgnoreRequest):
    """Request schema for update_job_status."""

    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: str) -> str:
        return validate_status_label(value)


class UpdateJobDetailsRequest(JobIdMixin, StrictIgnoreRequest):
    """Request schema for update_job_details; omitted fields keep their value."""

    company_name: Optional[str] = None
    job_url: Optional[str] = None
    job_title: Optional[str] = None
    job_description: Optional[str] = None

    @field_validator("company_name")
    @classmethod
    def validate_company_name(cls, value: Optional[str]) -> Optional[str]:
        return validate_optional_non_empty_str(value, "company_name")

    @field_validator("job_url")
    @classmethod
    def validate_job_url(cls, value: Optional[str]) -> Optional[str]:
        return validate_optional_non_empty_str(value, "job_url")


class DeleteJobRequest(JobIdMixin, StrictIgnoreRequest):
    """Request schema for delete_job."""


class JobMutationResponse(StrictResponse):
    """Response schema shared by the single-job tools."""

    success: bool
    message: str
    synced: bool = False
    duplicate: bool = False
    job: Optional[JobItem] = None
