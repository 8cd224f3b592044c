"""Search and status filtering over a job list."""

from typing import Iterable, List, Optional

from models.job import Job
from models.status import JobStatus


def filter_jobs(
    jobs: Iterable[Job], query: str = "", status: Optional[JobStatus] = None
) -> List[Job]:
    """
    Filter jobs by company-name search text and status.

    A blank query matches every job; otherwise the query is matched as a
    case-insensitive substring of the company name. A None status matches
    every status. Input order is preserved.
    """
    needle = (query or "").strip().casefold()
    return [
        job
        for job in jobs
        if (not needle or needle in job.company_name.casefold())
        and (status is None or job.status == status)
    ]
