"""
Shared fixtures: a temporary job store, an in-memory remote sheet and a
tracker context wired to both.
"""

from typing import Dict, List, Optional, Set

import pytest

from db.jobs_store import JobStore
from models.job import Job
from models.status import JobStatus
from tools.tracker_context import TrackerContext
from utils.page_scraper import ScrapedJob
from utils.sheet_client import SheetClientError, SheetResponse


def make_job(
    job_id: int,
    url: Optional[str] = None,
    company: str = "Acme",
    title: str = "Engineer",
    description: str = "Build things",
    status: JobStatus = JobStatus.SAVED,
    timestamp: int = 1_000,
    last_modified: int = 1_000,
) -> Job:
    return Job(
        id=job_id,
        company_name=company,
        job_url=url or f"https://jobs.example.com/{job_id}",
        job_title=title,
        job_description=description,
        status=status,
        timestamp=timestamp,
        last_modified=last_modified,
    )


def ok_response(result: str = "success") -> SheetResponse:
    return SheetResponse(status_code=200, http_ok=True, reason="OK", result=result, success=True)


def failed_response(status_code: int = 500, message: str = "Script error") -> SheetResponse:
    return SheetResponse(
        status_code=status_code, http_ok=False, reason="Error", result="error", message=message
    )


class FakeSheetClient:
    """In-memory stand-in for SheetClient that records every call.

    Rows are matched by job URL for both updates and deletes.
    """

    def __init__(self, jobs: Optional[List[Job]] = None):
        self.rows: List[Job] = list(jobs or [])
        self.calls: List[tuple] = []
        self.fail_download = False
        self.unreachable = False
        self.reject_urls: Set[str] = set()
        self.delete_result = "success"

    def _check(self, job: Job) -> Optional[SheetResponse]:
        if self.unreachable:
            raise SheetClientError("connection refused")
        if job.job_url in self.reject_urls:
            return failed_response()
        return None

    def upload_job(self, job: Job) -> SheetResponse:
        self.calls.append(("upload", job))
        rejected = self._check(job)
        if rejected is not None:
            return rejected
        self.rows.append(job)
        return ok_response()

    def update_job(self, job: Job) -> SheetResponse:
        self.calls.append(("update", job))
        rejected = self._check(job)
        if rejected is not None:
            return rejected
        self.rows = [job if row.job_url == job.job_url else row for row in self.rows]
        return ok_response()

    def delete_job(self, job: Job) -> SheetResponse:
        self.calls.append(("delete", job))
        rejected = self._check(job)
        if rejected is not None:
            return rejected
        self.rows = [row for row in self.rows if row.job_url != job.job_url]
        return ok_response(result=self.delete_result)

    def download_jobs(self) -> List[Job]:
        self.calls.append(("download", None))
        if self.fail_download or self.unreachable:
            raise SheetClientError("Download failed: connection refused")
        return list(self.rows)

    def mutation_calls(self) -> List[tuple]:
        return [call for call in self.calls if call[0] != "download"]

    def by_url(self) -> Dict[str, Job]:
        return {row.job_url: row for row in self.rows}


class FakeScraper:
    def __init__(self, result: Optional[ScrapedJob] = None):
        self.result = result or ScrapedJob(
            company_name="Globex", job_title="Backend Engineer", description="Python services"
        )
        self.urls: List[str] = []

    def __call__(self, url: str) -> ScrapedJob:
        self.urls.append(url)
        return self.result


@pytest.fixture
def store(tmp_path):
    return JobStore(str(tmp_path / "jobs.db"))


@pytest.fixture
def fake_client():
    return FakeSheetClient()


@pytest.fixture
def fake_scraper():
    return FakeScraper()


@pytest.fixture
def ctx(store, fake_client, fake_scraper, tmp_path):
    return TrackerContext(
        store=store,
        client=fake_client,
        scraper=fake_scraper,
        base_dir=tmp_path,
        export_dir=tmp_path / "exports",
    )
