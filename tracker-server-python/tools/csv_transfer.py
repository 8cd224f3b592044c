"""
MCP tool handlers for CSV transfer: export_jobs_csv and import_jobs_csv.

Export writes every local job, newest first. Import reads a previously
exported file (current or legacy column layout); each row goes through the
same save-and-sync path as a manually saved job, so imported jobs reach the
remote sheet too. Rows whose URL is already tracked keep their existing id.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import ValidationError

from models.errors import (
    ToolError,
    create_file_not_found_error,
    create_internal_error,
    create_validation_error,
)
from schemas.csv_transfer import (
    ExportJobsCsvRequest,
    ExportJobsCsvResponse,
    ImportJobsCsvRequest,
    ImportJobsCsvResponse,
)
from tools.save_job import save_and_sync
from tools.tracker_context import TrackerContext
from utils.csv_codec import export_jobs_csv as render_jobs_csv
from utils.csv_codec import parse_jobs_csv
from utils.file_ops import atomic_write
from utils.pydantic_error_mapper import map_pydantic_validation_error

logger = logging.getLogger(__name__)


def default_export_filename(now: Optional[datetime] = None) -> str:
    """
    Export file name stamped with the current UTC time.

    Examples:
        >>> default_export_filename(datetime(2026, 10, 17, 9, 30, tzinfo=timezone.utc))
        'jobs_20261017_093000.csv'
    """
    now = now or datetime.now(timezone.utc)
    return f"jobs_{now.strftime('%Y%m%d_%H%M%S')}.csv"


def export_jobs_csv(args: Dict[str, Any], ctx: TrackerContext) -> Dict[str, Any]:
    """
    Export all local jobs to a CSV file.

    Args:
        args: Dictionary containing:
            - output_path (str, optional): Target file; defaults to a
              timestamped file in the configured export directory
        ctx: Tracker context

    Returns:
        Dictionary with structure:
        {
            "exported_count": int,
            "output_path": str,
            "message": str
        }
    """
    try:
        try:
            request = ExportJobsCsvRequest.model_validate(args)
        except ValidationError as e:
            raise map_pydantic_validation_error(e) from e

        if request.output_path is not None:
            output_path = ctx.resolve_path(request.output_path)
        else:
            output_path = ctx.resolve_path(str(ctx.export_dir)) / default_export_filename()

        with ctx.operation_lock:
            jobs = ctx.store.get_all_once()
            atomic_write(output_path, render_jobs_csv(jobs))

        logger.info(f"Exported {len(jobs)} job(s) to {output_path}")
        return ExportJobsCsvResponse(
            exported_count=len(jobs),
            output_path=str(output_path),
            message=f"Exported {len(jobs)} job(s) to CSV",
        ).model_dump(exclude_none=True)

    except ToolError as e:
        return e.to_dict()

    except OSError as e:
        logger.error(f"Export failed: {e}")
        return create_validation_error(f"Cannot write export file: {e.strerror or e}").to_dict()

    except Exception as e:
        logger.exception("Unexpected error in export_jobs_csv")
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()


def import_jobs_csv(args: Dict[str, Any], ctx: TrackerContext) -> Dict[str, Any]:
    """
    Import jobs from a CSV file.

    Args:
        args: Dictionary containing:
            - input_path (str): CSV file to read (UTF-8, BOM tolerated)
        ctx: Tracker context

    Returns:
        Dictionary with structure:
        {
            "imported_count": int,
            "skipped_count": int,      # Short rows and rows without company/URL
            "synced_count": int,       # Imported rows the remote sheet accepted
            "message": str
        }

        On error, returns:
        {
            "error": {
                "code": str,           # VALIDATION_ERROR, FILE_NOT_FOUND, DB_ERROR, INTERNAL_ERROR
                "message": str,
                "retryable": bool
            }
        }
    """
    try:
        try:
            request = ImportJobsCsvRequest.model_validate(args)
        except ValidationError as e:
            raise map_pydantic_validation_error(e) from e

        input_path = ctx.resolve_path(request.input_path)
        if not input_path.is_file():
            raise create_file_not_found_error(str(input_path), "CSV file")

        try:
            # newline="" keeps line breaks inside quoted fields as written
            with open(input_path, encoding="utf-8-sig", newline="") as f:
                text = f.read()
        except UnicodeDecodeError as e:
            raise create_validation_error(
                f"Invalid input_path: file is not UTF-8 text ({e.reason})"
            ) from e

        parsed = parse_jobs_csv(text)

        imported = 0
        synced_count = 0
        with ctx.operation_lock:
            # One remote download per import instead of one per new row
            remote_max_id = ctx.allocator.fetch_remote_max_id() if parsed.rows else 0

            for row in parsed.rows:
                existing = ctx.store.get_by_url(row.job_url)
                if existing is not None:
                    job_id = existing.id
                else:
                    job_id = ctx.allocator.next_id(remote_max_id)

                synced, _ = save_and_sync(ctx, row.to_job(job_id), existed=existing is not None)
                imported += 1
                if synced:
                    synced_count += 1

        if parsed.skipped > 0:
            message = f"Imported {imported} job(s), skipped {parsed.skipped}"
        else:
            message = f"Imported {imported} job(s) from CSV"
        if synced_count < imported:
            message += f" ({imported - synced_count} not synced to remote)"

        logger.info(message)
        return ImportJobsCsvResponse(
            imported_count=imported,
            skipped_count=parsed.skipped,
            synced_count=synced_count,
            message=message,
        ).model_dump(exclude_none=True)

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        logger.exception("Unexpected error in import_jobs_csv")
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
