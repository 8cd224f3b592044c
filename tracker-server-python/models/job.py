"""
Job record model shared by the local store, the remote sheet client and the
CSV codec.

Python attributes are snake_case; the camelCase aliases are the field names
used by the remote sheet API and the CSV header. Both spellings are accepted
on input.
"""

import time
from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.status import JobStatus, parse_job_status


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def coerce_epoch_millis(value: Any, default: int = 0) -> int:
    """
    Coerce a loosely typed epoch-millisecond value to int.

    Remote rows can carry numbers, numeric strings, floats or blanks.

    Args:
        value: Raw value
        default: Returned for None, blank or unparseable values

    Returns:
        Epoch milliseconds as int
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    text = str(value).strip()
    if not text:
        return default
    try:
        return int(text)
    except ValueError:
        try:
            return int(float(text))
        except ValueError:
            return default


class Job(BaseModel):
    """A tracked job posting.

    ``job_url`` is the natural key used to match a local record with its
    remote counterpart; ids are not assumed to agree across stores.
    ``last_modified`` is bumped on every local mutation and decides which
    side wins during synchronization.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: int
    company_name: str = Field(alias="companyName")
    job_url: str = Field(alias="jobUrl")
    job_title: str = Field(default="", alias="jobTitle")
    job_description: str = Field(default="", alias="jobDescription")
    status: JobStatus = JobStatus.SAVED
    timestamp: int = Field(default_factory=now_millis)
    last_modified: int = Field(default_factory=now_millis, alias="lastModified")

    @field_validator("company_name", "job_url", mode="before")
    @classmethod
    def require_text(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("cannot be empty")
        text = str(value).strip()
        if not text:
            raise ValueError("cannot be empty")
        return text

    @field_validator("job_title", "job_description", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        if value is None:
            return ""
        return str(value)

    @field_validator("status", mode="before")
    @classmethod
    def lenient_status(cls, value: Any) -> JobStatus:
        return parse_job_status(value)

    @field_validator("timestamp", "last_modified", mode="before")
    @classmethod
    def lenient_epoch(cls, value: Any) -> int:
        return coerce_epoch_millis(value)

    @classmethod
    def from_remote(cls, payload: Dict[str, Any]) -> "Job":
        """
        Build a Job from a remote sheet row.

        Rows written by older clients have no ``lastModified``; those are
        treated as never modified (0) rather than "now", otherwise every
        legacy row would look newer than its local copy.
        """
        data = dict(payload)
        data.setdefault("lastModified", 0)
        data.setdefault("timestamp", 0)
        return cls.model_validate(data)

    def content_key(self) -> Tuple[str, str, str, JobStatus]:
        """Fields compared when deciding whether two copies of a job differ."""
        return (self.company_name, self.job_title, self.job_description, self.status)

    def touched(self, **changes: Any) -> "Job":
        """Return a copy with ``changes`` applied and ``last_modified`` bumped."""
        changes["last_modified"] = now_millis()
        return self.with_changes(**changes)

    def with_changes(self, **changes: Any) -> "Job":
        """Return a validated copy with ``changes`` applied."""
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)

    def to_remote_payload(self) -> Dict[str, Any]:
        """Serialize to the camelCase JSON body expected by the sheet API."""
        return self.model_dump(mode="json", by_alias=True)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a snake_case JSON-safe dict for tool responses."""
        return self.model_dump(mode="json")
