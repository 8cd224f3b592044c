"""MCP tool handler for list_jobs: search and filter the local job list."""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from models.errors import ToolError, create_internal_error
from models.status import JobStatus
from schemas.common import JobItem
from schemas.list_jobs import ListJobsRequest, ListJobsResponse
from tools.tracker_context import TrackerContext
from utils.job_filter import filter_jobs
from utils.pydantic_error_mapper import map_pydantic_validation_error

logger = logging.getLogger(__name__)


def list_jobs(args: Dict[str, Any], ctx: TrackerContext) -> Dict[str, Any]:
    """
    List tracked jobs, newest first.

    Args:
        args: Dictionary containing:
            - query (str, optional): Case-insensitive company name substring
            - status (str, optional): Only jobs with this status
        ctx: Tracker context

    Returns:
        Dictionary with structure:
        {
            "jobs": [{...}],
            "count": int
        }
    """
    try:
        try:
            request = ListJobsRequest.model_validate(args)
        except ValidationError as e:
            raise map_pydantic_validation_error(e) from e

        status = JobStatus(request.status) if request.status else None
        jobs = filter_jobs(ctx.store.get_all_once(), query=request.query, status=status)

        return ListJobsResponse(
            jobs=[JobItem.from_job(job) for job in jobs],
            count=len(jobs),
        ).model_dump(exclude_none=True)

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        logger.exception("Unexpected error in list_jobs")
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
