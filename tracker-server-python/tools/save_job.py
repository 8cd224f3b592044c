"""
MCP tool handlers for creating jobs: save_job (scrape a posting URL and save
it) and restore_job (undo a delete).

Both go through ``save_and_sync``: the job is committed to the local store
first and then pushed to the remote sheet. A remote failure never undoes the
local commit; it only changes the reported message.
"""

import logging
from typing import Any, Dict, Tuple

from pydantic import ValidationError

from models.errors import ToolError, create_internal_error, create_validation_error
from models.job import Job
from models.status import JobStatus, display_name
from schemas.common import JobItem
from schemas.job_mutations import JobMutationResponse, RestoreJobRequest, SaveJobRequest
from tools.tracker_context import TrackerContext
from utils.page_scraper import extract_url
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.sheet_client import SheetClientError

logger = logging.getLogger(__name__)

SYNC_SUCCESS_MESSAGE = "Job synced successfully"
SYNC_FAILURE_PREFIX = "Job saved locally, but sync failed: "


def save_and_sync(ctx: TrackerContext, job: Job, existed: bool) -> Tuple[bool, str]:
    """
    Commit a job locally, then push it to the remote sheet.

    Args:
        ctx: Tracker context
        job: Job to persist
        existed: True when the job's URL was already stored locally; the
            remote row is then overwritten instead of appended

    Returns:
        Tuple of (synced, message)

    Raises:
        ToolError: If the local store write fails
    """
    ctx.store.upsert(job)

    try:
        if existed:
            response = ctx.client.update_job(job)
        else:
            response = ctx.client.upload_job(job)
    except SheetClientError as e:
        logger.warning(f"Sync of job {job.id} failed: {e}")
        return False, SYNC_FAILURE_PREFIX + str(e)

    if not response.is_successful:
        logger.warning(f"Sync of job {job.id} rejected: {response.describe()}")
        return False, SYNC_FAILURE_PREFIX + response.describe()

    logger.info(f"Synced job {job.id} ({job.company_name}) to remote sheet")
    return True, SYNC_SUCCESS_MESSAGE


def save_job(args: Dict[str, Any], ctx: TrackerContext) -> Dict[str, Any]:
    """
    Scrape a job posting and save it as a new SAVED job.

    The ``url`` argument may be shared text containing a link; the first
    http(s) URL in it is used. A URL that is already tracked is reported as a
    duplicate instead of being saved again.

    Args:
        args: Dictionary containing:
            - url (str): Posting URL or text containing one
        ctx: Tracker context

    Returns:
        Dictionary with structure:
        {
            "success": bool,
            "message": str,
            "synced": bool,
            "duplicate": bool,
            "job": {...}               # Saved (or already tracked) job
        }

        On error, returns:
        {
            "error": {
                "code": str,           # VALIDATION_ERROR, DB_ERROR, INTERNAL_ERROR
                "message": str,
                "retryable": bool
            }
        }
    """
    try:
        try:
            request = SaveJobRequest.model_validate(args)
        except ValidationError as e:
            raise map_pydantic_validation_error(e) from e

        url = extract_url(request.url)
        if url is None:
            raise create_validation_error("Invalid url: no http(s) link found in input")

        # Step 1: Duplicate check by join key
        existing = ctx.store.get_by_url(url)
        if existing is not None:
            return JobMutationResponse(
                success=True,
                duplicate=True,
                message=f"Job already saved! Current status: {display_name(existing.status)}",
                job=JobItem.from_job(existing),
            ).model_dump(exclude_none=True)

        # Step 2: Scrape (never raises) and build the new record
        scraped = ctx.scraper(url)
        job = Job(
            id=ctx.allocator.next_id(),
            company_name=scraped.company_name,
            job_url=url,
            job_title=scraped.job_title,
            job_description=scraped.description,
            status=JobStatus.SAVED,
        )

        # Step 3: Persist and push
        synced, message = save_and_sync(ctx, job, existed=False)
        return JobMutationResponse(
            success=True,
            message=message,
            synced=synced,
            job=JobItem.from_job(job),
        ).model_dump(exclude_none=True)

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        logger.exception("Unexpected error in save_job")
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()


def restore_job(args: Dict[str, Any], ctx: TrackerContext) -> Dict[str, Any]:
    """
    Re-insert a previously deleted job (undo).

    Args:
        args: Dictionary containing:
            - job (dict): The job exactly as returned by delete_job

    Returns:
        Same structure as save_job.
    """
    try:
        try:
            request = RestoreJobRequest.model_validate(args)
            job = Job.model_validate(request.job)
        except ValidationError as e:
            raise map_pydantic_validation_error(e) from e

        synced, message = save_and_sync(ctx, job, existed=False)
        return JobMutationResponse(
            success=True,
            message=f"Job restored. {message}",
            synced=synced,
            job=JobItem.from_job(job),
        ).model_dump(exclude_none=True)

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        logger.exception("Unexpected error in restore_job")
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
