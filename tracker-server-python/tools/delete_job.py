"""
MCP tool handler for delete_job.

The job is removed locally first; the remote delete is only reported as
confirmed when the script answers ``result == "success"``. The deleted job is
returned so the caller can offer an undo through restore_job.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from models.errors import ToolError, create_internal_error
from schemas.common import JobItem
from schemas.job_mutations import DeleteJobRequest, JobMutationResponse
from tools.tracker_context import TrackerContext
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.sheet_client import SheetClientError

logger = logging.getLogger(__name__)


def delete_job(args: Dict[str, Any], ctx: TrackerContext) -> Dict[str, Any]:
    """
    Delete one job locally and from the remote sheet.

    Args:
        args: Dictionary containing:
            - id (int): Job id
        ctx: Tracker context

    Returns:
        Dictionary with structure:
        {
            "success": bool,           # False only when the id is unknown
            "message": str,
            "synced": bool,            # True when the remote delete was confirmed
            "duplicate": false,
            "job": {...}               # The deleted job, for undo
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
            request = DeleteJobRequest.model_validate(args)
        except ValidationError as e:
            raise map_pydantic_validation_error(e) from e

        job = ctx.store.get_by_id(request.id)
        if job is None:
            return JobMutationResponse(success=False, message="Job not found").model_dump(
                exclude_none=True
            )

        ctx.store.delete_by_id(job.id)
        logger.info(f"Deleted job {job.id} ({job.company_name}) locally")

        synced = False
        try:
            response = ctx.client.delete_job(job)
            if response.is_confirmed:
                synced = True
                message = "Job deleted successfully"
            elif response.is_successful:
                message = (
                    "Job deleted locally but remote returned: "
                    f"{response.message or response.error or 'Unknown error'}"
                )
            else:
                message = f"Job deleted locally but sync returned: {response.describe()}"
        except SheetClientError as e:
            logger.warning(f"Remote delete of job {job.id} failed: {e}")
            message = f"Job deleted locally but sync failed: {e}"

        if not synced:
            logger.warning(message)

        return JobMutationResponse(
            success=True,
            message=message,
            synced=synced,
            job=JobItem.from_job(job),
        ).model_dump(exclude_none=True)

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        logger.exception("Unexpected error in delete_job")
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
