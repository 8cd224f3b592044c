"""MCP tool handler for sync_jobs: one full reconciliation pass."""

import logging
from typing import Any, Dict

from models.errors import ToolError, create_internal_error
from schemas.sync_jobs import SyncJobsResponse
from tools.tracker_context import TrackerContext
from utils.sync_engine import SyncResult

logger = logging.getLogger(__name__)


def build_sync_message(result: SyncResult) -> str:
    """
    Render the pass summary: a headline plus one line per non-zero counter.

    Examples:
        >>> build_sync_message(SyncResult(uploaded=2, downloaded=0, updated=1, conflicts=0))
        'Sync completed\\n2 uploaded\\n1 updated'
    """
    lines = ["Sync completed"]
    if result.uploaded > 0:
        lines.append(f"{result.uploaded} uploaded")
    if result.downloaded > 0:
        lines.append(f"{result.downloaded} downloaded")
    if result.updated > 0:
        lines.append(f"{result.updated} updated")
    if result.conflicts > 0:
        lines.append(f"{result.conflicts} conflicts resolved (local copy took precedence)")
    return "\n".join(lines)


def sync_jobs(args: Dict[str, Any], ctx: TrackerContext) -> Dict[str, Any]:
    """
    Reconcile the local store with the remote sheet.

    Only one sync, import or export runs at a time; a second call waits for
    the running one to finish.

    Args:
        args: Unused; accepted for a uniform handler signature
        ctx: Tracker context

    Returns:
        Dictionary with structure:
        {
            "uploaded": int,
            "downloaded": int,
            "updated": int,
            "conflicts": int,
            "last_sync_at": str,       # ISO 8601 UTC timestamp
            "message": str
        }

        On error, returns:
        {
            "error": {
                "code": str,           # REMOTE_ERROR, DB_ERROR, INTERNAL_ERROR
                "message": str,
                "retryable": bool
            }
        }
    """
    try:
        with ctx.operation_lock:
            result = ctx.sync_engine.perform_sync()
            last_sync_at = ctx.mark_synced()

        return SyncJobsResponse(
            **result.to_dict(),
            last_sync_at=last_sync_at,
            message=build_sync_message(result),
        ).model_dump(exclude_none=True)

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        logger.exception("Unexpected error in sync_jobs")
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
