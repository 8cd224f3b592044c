"""Pydantic schemas for sync_jobs tool."""

from __future__ import annotations

from schemas.common import StrictResponse


class SyncJobsResponse(StrictResponse):
    """Success response schema for sync_jobs."""

    uploaded: int
    downloaded: int
    updated: int
    conflicts: int
    last_sync_at: str
    message: str
