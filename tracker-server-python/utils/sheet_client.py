"""
HTTP client for the spreadsheet-backed remote job collection.

The remote side is a Google Apps Script web app deployed in front of a
Google Sheet. It exposes a single ``exec`` endpoint:

- ``GET exec``                      -> JSON array of every job row
- ``POST exec``                     -> append a job row
- ``POST exec?action=updateJob``    -> overwrite the row for a job
- ``POST exec?action=deleteJob``    -> delete the row for a job

Mutation responses carry a small JSON envelope
``{"result", "success", "error", "message"}``. Apps Script answers POSTs with
a redirect to the rendered output, so redirects are always followed.
"""

import logging
from typing import Any, List, Optional

import requests
from pydantic import BaseModel, ConfigDict, ValidationError

from models.job import Job
from utils.retry import retry

logger = logging.getLogger(__name__)

SCRIPT_BASE_URL_TEMPLATE = "https://script.google.com/macros/s/{deployment_id}/"

ACTION_UPDATE_JOB = "updateJob"
ACTION_DELETE_JOB = "deleteJob"


class SheetClientError(Exception):
    """Raised when the remote sheet cannot be reached or returns an unusable payload."""

    pass


class SheetResponse(BaseModel):
    """Outcome of a mutation call against the remote sheet."""

    model_config = ConfigDict(extra="ignore")

    status_code: int
    http_ok: bool
    reason: str = ""
    result: Optional[str] = None
    success: Optional[bool] = None
    error: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def from_http(cls, response: requests.Response) -> "SheetResponse":
        """Build from an HTTP response; a non-JSON body leaves the envelope empty."""
        envelope: dict = {}
        try:
            body = response.json()
            if isinstance(body, dict):
                envelope = {
                    key: body.get(key) for key in ("result", "success", "error", "message")
                }
        except ValueError:
            pass

        if envelope.get("success") is not None and not isinstance(envelope["success"], bool):
            envelope["success"] = str(envelope["success"]).strip().lower() == "true"
        for key in ("result", "error", "message"):
            if envelope.get(key) is not None:
                envelope[key] = str(envelope[key])

        return cls(
            status_code=response.status_code,
            http_ok=response.ok,
            reason=response.reason or "",
            **envelope,
        )

    @property
    def is_successful(self) -> bool:
        """HTTP-level success."""
        return self.http_ok

    @property
    def is_confirmed(self) -> bool:
        """HTTP success and the script itself reported ``result == "success"``."""
        return self.http_ok and (self.result or "").strip().lower() == "success"

    def describe(self) -> str:
        """Short human-readable reason for reporting a failed call."""
        return self.message or self.error or self.reason or f"HTTP {self.status_code}"


class SheetClient:
    """
    Remote job collection client.

    Usage:
        client = SheetClient(base_url, timeout_seconds=15)
        remote_jobs = client.download_jobs()
        response = client.upload_job(job)
        if response.is_successful:
            ...
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 15.0,
        retry_count: int = 2,
        retry_sleep_seconds: float = 1.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Script deployment URL ending in ``/`` (``exec`` is appended)
            timeout_seconds: Timeout applied to every HTTP call
            retry_count: Attempts for the idempotent download call
            retry_sleep_seconds: Base sleep between download attempts
            session: Optional requests session (injected in tests)
        """
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout_seconds = timeout_seconds
        self.retry_count = max(1, retry_count)
        self.retry_sleep_seconds = retry_sleep_seconds
        self.session = session or requests.Session()

    @classmethod
    def for_deployment(cls, deployment_id: str, **kwargs: Any) -> "SheetClient":
        return cls(SCRIPT_BASE_URL_TEMPLATE.format(deployment_id=deployment_id), **kwargs)

    @property
    def endpoint(self) -> str:
        return self.base_url + "exec"

    def upload_job(self, job: Job) -> SheetResponse:
        """Append a job row to the remote sheet."""
        return self._post(job, action=None)

    def update_job(self, job: Job) -> SheetResponse:
        """Overwrite the remote row for a job."""
        return self._post(job, action=ACTION_UPDATE_JOB)

    def delete_job(self, job: Job) -> SheetResponse:
        """Delete the remote row for a job; check ``is_confirmed`` on the result."""
        return self._post(job, action=ACTION_DELETE_JOB)

    def download_jobs(self) -> List[Job]:
        """
        Download every remote job.

        Rows that cannot be read as a Job are skipped with a warning so one
        malformed sheet row does not block synchronization.

        Returns:
            List of remote jobs in sheet order

        Raises:
            SheetClientError: If the sheet is unreachable or the payload is not a list
        """
        fetch = retry(
            max_attempts=self.retry_count,
            base_delay=self.retry_sleep_seconds,
            retryable=(requests.RequestException,),
        )(self._get_payload)

        try:
            payload = fetch()
        except requests.RequestException as e:
            raise SheetClientError(f"Download failed: {e}") from e

        if not isinstance(payload, list):
            raise SheetClientError(
                f"Download failed: expected a JSON array, got {type(payload).__name__}"
            )

        jobs = []
        for index, row in enumerate(payload):
            if not isinstance(row, dict):
                logger.warning(f"Skipping remote row {index}: not an object")
                continue
            try:
                jobs.append(Job.from_remote(row))
            except ValidationError as e:
                logger.warning(f"Skipping remote row {index}: {e.error_count()} invalid field(s)")
        return jobs

    def _get_payload(self) -> Any:
        response = self.session.get(
            self.endpoint, timeout=self.timeout_seconds, allow_redirects=True
        )
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as e:
            raise SheetClientError(f"Download failed: response is not valid JSON ({e})") from e

    def _post(self, job: Job, action: Optional[str]) -> SheetResponse:
        params = {"action": action} if action else None
        try:
            response = self.session.post(
                self.endpoint,
                params=params,
                json=job.to_remote_payload(),
                timeout=self.timeout_seconds,
                allow_redirects=True,
            )
        except requests.RequestException as e:
            verb = action or "upload"
            raise SheetClientError(f"{verb} request failed: {e}") from e

        return SheetResponse.from_http(response)
