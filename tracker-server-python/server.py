#!/usr/bin/env python3
"""
MCP Server entry point for the job tracker.

This server exposes the job tracker (a local SQLite job list kept in sync
with a spreadsheet-backed remote collection) to LLM agents via the Model
Context Protocol.

Usage:
    python server.py

The server runs in stdio mode by default, which is the standard transport
for MCP servers that are invoked by LLM agents.
"""

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from config import get_config
from tools.csv_transfer import export_jobs_csv, import_jobs_csv
from tools.delete_job import delete_job
from tools.list_jobs import list_jobs
from tools.save_job import restore_job, save_job
from tools.sync_jobs import sync_jobs
from tools.tracker_context import TrackerContext, build_context
from tools.update_job import update_job_details, update_job_status

# Create FastMCP server instance
config = get_config()
mcp = FastMCP(
    name=config.server_name,
    instructions=(
        "This server tracks job applications in a local database that is kept in sync "
        "with a remote Google Sheet, using the job URL as the join key."
        "\n\n"
        "Use save_job to scrape a posting URL and start tracking it (status SAVED). "
        "Use list_jobs to search tracked jobs by company name and status. "
        "Use update_job_status and update_job_details to edit a job; every edit is pushed to the sheet. "
        "Use delete_job to remove a job; the response carries the deleted job, which restore_job accepts to undo. "
        "Use sync_jobs to reconcile the local database with the sheet (newest edit wins, ties favor local). "
        "Use export_jobs_csv and import_jobs_csv to move jobs through CSV files."
    ),
)

_context: Optional[TrackerContext] = None


def get_context() -> TrackerContext:
    """Build the shared tracker context on first use."""
    global _context
    if _context is None:
        _context = build_context(config)
    return _context


@mcp.tool(
    name="save_job",
    description=(
        "Scrape a job posting URL (or shared text containing one) and save it as a SAVED job. "
        "Already tracked URLs are reported as duplicates with their current status."
    ),
)
def save_job_tool(url: str) -> dict:
    """
    Scrape a job posting and start tracking it.

    Args:
        url: Posting URL, or shared text containing an http(s) link

    Returns:
        Dictionary with success, message, synced, duplicate and the job.
    """
    return save_job({"url": url}, get_context())


@mcp.tool(
    name="restore_job",
    description="Re-insert a job previously returned by delete_job (undo a delete).",
)
def restore_job_tool(job: dict) -> dict:
    """
    Undo a delete.

    Args:
        job: The job object from a delete_job response

    Returns:
        Dictionary with success, message, synced and the restored job.
    """
    return restore_job({"job": job}, get_context())


@mcp.tool(
    name="update_job_status",
    description=(
        "Change the status of a job: SAVED, APPLIED, INTERVIEWING, OFFER, "
        "RESUME-REJECTED or INTERVIEW-REJECTED."
    ),
)
def update_job_status_tool(id: int, status: str) -> dict:
    """
    Change the status of one job.

    Args:
        id: Job id
        status: Target status label

    Returns:
        Dictionary with success, message, synced and the updated job.
    """
    return update_job_status({"id": id, "status": status}, get_context())


@mcp.tool(
    name="update_job_details",
    description="Edit company name, URL, title and/or description of a job. Omitted fields are unchanged.",
)
def update_job_details_tool(
    id: int,
    company_name: str | None = None,
    job_url: str | None = None,
    job_title: str | None = None,
    job_description: str | None = None,
) -> dict:
    """
    Edit the details of one job.

    Args:
        id: Job id
        company_name: New company name
        job_url: New posting URL (must not belong to another job)
        job_title: New title
        job_description: New description

    Returns:
        Dictionary with success, message, synced and the updated job.
    """
    args = {"id": id}

    # Only include fields that were explicitly provided
    if company_name is not None:
        args["company_name"] = company_name
    if job_url is not None:
        args["job_url"] = job_url
    if job_title is not None:
        args["job_title"] = job_title
    if job_description is not None:
        args["job_description"] = job_description

    return update_job_details(args, get_context())


@mcp.tool(
    name="delete_job",
    description="Delete a job locally and from the sheet. Returns the deleted job for undo.",
)
def delete_job_tool(id: int) -> dict:
    """
    Delete one job.

    Args:
        id: Job id

    Returns:
        Dictionary with success, message, synced and the deleted job.
    """
    return delete_job({"id": id}, get_context())


@mcp.tool(
    name="list_jobs",
    description="List tracked jobs newest first, filtered by company name substring and/or status.",
)
def list_jobs_tool(query: str | None = None, status: str | None = None) -> dict:
    """
    List tracked jobs.

    Args:
        query: Case-insensitive company name substring
        status: Only jobs with this status

    Returns:
        Dictionary with jobs and count.
    """
    args = {}
    if query is not None:
        args["query"] = query
    if status is not None:
        args["status"] = status
    return list_jobs(args, get_context())


@mcp.tool(
    name="sync_jobs",
    description=(
        "Reconcile the local database with the remote sheet: download sheet-only jobs, "
        "upload local-only jobs and resolve jobs edited on both sides."
    ),
)
def sync_jobs_tool() -> dict:
    """
    Run one sync pass.

    Returns:
        Dictionary with uploaded, downloaded, updated, conflicts,
        last_sync_at and a summary message.
    """
    return sync_jobs({}, get_context())


@mcp.tool(
    name="export_jobs_csv",
    description="Export all tracked jobs to a CSV file.",
)
def export_jobs_csv_tool(output_path: str | None = None) -> dict:
    """
    Export jobs to CSV.

    Args:
        output_path: Target file (default: timestamped file in the export directory)

    Returns:
        Dictionary with exported_count and output_path.
    """
    args = {}
    if output_path is not None:
        args["output_path"] = output_path
    return export_jobs_csv(args, get_context())


@mcp.tool(
    name="import_jobs_csv",
    description=(
        "Import jobs from a CSV file produced by export_jobs_csv (older layouts accepted). "
        "Imported jobs are pushed to the sheet."
    ),
)
def import_jobs_csv_tool(input_path: str) -> dict:
    """
    Import jobs from CSV.

    Args:
        input_path: CSV file to read

    Returns:
        Dictionary with imported_count, skipped_count and synced_count.
    """
    return import_jobs_csv({"input_path": input_path}, get_context())


def main():
    """
    Main entry point for the MCP server.

    Runs the server in stdio mode, which is the standard transport
    for MCP servers that are invoked by LLM agents.
    """
    # Load and setup configuration
    config.setup_logging()

    # Log startup information
    logger = logging.getLogger(__name__)
    logger.info("Starting job tracker MCP Server")
    logger.info(f"Server name: {config.server_name}")
    logger.info(f"Database path: {config.db_path}")
    logger.info(f"Remote sheet: {config.sheet_base_url}")

    # Validate configuration and log warnings
    warnings = config.validate()
    for warning in warnings:
        logger.warning(warning)

    # Start the server
    logger.info("Server starting in stdio mode")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
