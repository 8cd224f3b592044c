"""
Centralized, type-safe status definitions for the job tracker.

This module is the single source of truth for the application status
vocabulary. ``JobStatus`` inherits from ``(str, Enum)`` so members compare
equal to their plain-string labels and serialize naturally to JSON at the
remote API and CSV boundaries.

Labels coming from CSV files or older remote rows may use a stale label set
(an earlier schema had a single ``REJECTED`` value), so reading a label is
always done through ``parse_job_status`` which never raises.
"""

import re
from enum import Enum
from typing import Any, Optional

_SEPARATOR_PATTERN = re.compile(r"[\s\-]+")

# Labels from earlier schema versions mapped onto current members
LEGACY_STATUS_ALIASES = {
    "REJECTED": "RESUME_REJECTED",
}


class JobStatus(str, Enum):
    """Application status of a tracked job.

    Values equal member names; the name is what gets persisted locally,
    exported to CSV and sent to the remote sheet.
    """

    SAVED = "SAVED"
    APPLIED = "APPLIED"
    INTERVIEWING = "INTERVIEWING"
    OFFER = "OFFER"
    RESUME_REJECTED = "RESUME_REJECTED"
    INTERVIEW_REJECTED = "INTERVIEW_REJECTED"

    @property
    def label(self) -> str:
        """Storage label for this status (round-trips through ``JobStatus(label)``)."""
        return self.value


DEFAULT_STATUS = JobStatus.SAVED


def display_name(status: JobStatus) -> str:
    """
    Render a status for humans.

    The two rejection variants keep a hyphen so they read as one word;
    every other status has its underscores rendered as spaces.

    Examples:
        >>> display_name(JobStatus.RESUME_REJECTED)
        'RESUME-REJECTED'
        >>> display_name(JobStatus.SAVED)
        'SAVED'
    """
    if status is JobStatus.RESUME_REJECTED:
        return "RESUME-REJECTED"
    if status is JobStatus.INTERVIEW_REJECTED:
        return "INTERVIEW-REJECTED"
    return status.value.replace("_", " ")


def match_job_status(value: Any) -> Optional[JobStatus]:
    """
    Match a status label after normalization.

    Normalization trims the value, upper-cases it and collapses hyphens and
    whitespace runs to underscores, so ``"interview rejected"``,
    ``"Interview-Rejected"`` and ``"INTERVIEW_REJECTED"`` are all the same
    label. The legacy ``REJECTED`` label maps to ``RESUME_REJECTED``.

    Args:
        value: Raw label (string, enum member, or None)

    Returns:
        Matching JobStatus, or None when the label is not recognized
    """
    if isinstance(value, JobStatus):
        return value
    if value is None:
        return None

    normalized = _SEPARATOR_PATTERN.sub("_", str(value).strip().upper()).strip("_")
    normalized = LEGACY_STATUS_ALIASES.get(normalized, normalized)
    try:
        return JobStatus(normalized)
    except ValueError:
        return None


def parse_job_status(value: Any) -> JobStatus:
    """
    Leniently parse a status label; never raises.

    Same normalization as ``match_job_status``, but anything unrecognized
    (including None and blank labels) becomes SAVED.
    """
    matched = match_job_status(value)
    return matched if matched is not None else DEFAULT_STATUS
