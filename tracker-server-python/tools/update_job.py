"""
MCP tool handlers for editing a tracked job: update_job_status and
update_job_details.

Every edit bumps ``last_modified`` so the next sync treats the local copy as
the newer one, then overwrites the remote row.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from models.errors import (
    ToolError,
    create_internal_error,
    create_not_found_error,
    create_validation_error,
)
from models.job import Job
from models.status import JobStatus, display_name
from schemas.common import JobItem
from schemas.job_mutations import (
    JobMutationResponse,
    UpdateJobDetailsRequest,
    UpdateJobStatusRequest,
)
from tools.save_job import save_and_sync
from tools.tracker_context import TrackerContext
from utils.pydantic_error_mapper import map_pydantic_validation_error

logger = logging.getLogger(__name__)

DETAIL_FIELDS = ("company_name", "job_url", "job_title", "job_description")


def _require_job(ctx: TrackerContext, job_id: int) -> Job:
    job = ctx.store.get_by_id(job_id)
    if job is None:
        raise create_not_found_error(f"Job not found: id={job_id}")
    return job


def update_job_status(args: Dict[str, Any], ctx: TrackerContext) -> Dict[str, Any]:
    """
    Change the application status of one job.

    Args:
        args: Dictionary containing:
            - id (int): Job id
            - status (str): Target status; display labels such as
              "RESUME-REJECTED" or "interviewing" are accepted
        ctx: Tracker context

    Returns:
        Dictionary with structure:
        {
            "success": true,
            "message": str,
            "synced": bool,
            "duplicate": false,
            "job": {...}               # Job after the change
        }

        On error, returns:
        {
            "error": {
                "code": str,           # VALIDATION_ERROR, NOT_FOUND, DB_ERROR, INTERNAL_ERROR
                "message": str,
                "retryable": bool
            }
        }
    """
    try:
        try:
            request = UpdateJobStatusRequest.model_validate(args)
        except ValidationError as e:
            raise map_pydantic_validation_error(e) from e

        job = _require_job(ctx, request.id)
        updated = job.touched(status=JobStatus(request.status))

        synced, message = save_and_sync(ctx, updated, existed=True)
        return JobMutationResponse(
            success=True,
            message=f"Status updated to {display_name(updated.status)}. {message}",
            synced=synced,
            job=JobItem.from_job(updated),
        ).model_dump(exclude_none=True)

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        logger.exception("Unexpected error in update_job_status")
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()


def update_job_details(args: Dict[str, Any], ctx: TrackerContext) -> Dict[str, Any]:
    """
    Edit company name, URL, title and/or description of one job.

    Fields left out of the request keep their current value. Moving a job to
    a URL that another job already uses is rejected, since the URL is the
    sync join key.

    Args:
        args: Dictionary containing:
            - id (int): Job id
            - company_name (str, optional)
            - job_url (str, optional)
            - job_title (str, optional)
            - job_description (str, optional)
        ctx: Tracker context

    Returns:
        Same structure as update_job_status.
    """
    try:
        try:
            request = UpdateJobDetailsRequest.model_validate(args)
        except ValidationError as e:
            raise map_pydantic_validation_error(e) from e

        job = _require_job(ctx, request.id)

        changes = {
            name: getattr(request, name)
            for name in DETAIL_FIELDS
            if getattr(request, name) is not None
        }
        if "job_url" in changes:
            changes["job_url"] = changes["job_url"].strip()
            owner = ctx.store.get_by_url(changes["job_url"])
            if owner is not None and owner.id != job.id:
                raise create_validation_error(
                    f"Invalid job_url: already used by job id={owner.id}"
                )

        if not changes:
            return JobMutationResponse(
                success=True,
                message="No changes to apply",
                job=JobItem.from_job(job),
            ).model_dump(exclude_none=True)

        try:
            updated = job.touched(**changes)
        except ValidationError as e:
            raise map_pydantic_validation_error(e) from e

        synced, message = save_and_sync(ctx, updated, existed=True)
        return JobMutationResponse(
            success=True,
            message=f"Job details updated. {message}",
            synced=synced,
            job=JobItem.from_job(updated),
        ).model_dump(exclude_none=True)

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        logger.exception("Unexpected error in update_job_details")
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
