"""
Conflict resolution policy for jobs present on both the local and remote side.

Rules, applied to two copies of a job that share a URL:
- Same company name, title, description and status -> no change
- Otherwise the copy with the strictly larger last_modified wins
- Equal last_modified with different content -> local copy wins and the
  action is counted as a conflict
"""

from enum import Enum

from models.job import Job


class ConflictResolution(str, Enum):
    """Action to take for a job present on both sides."""

    UPDATE_LOCAL = "UPDATE_LOCAL"    # remote is newer: overwrite local
    UPDATE_REMOTE = "UPDATE_REMOTE"  # local is newer: overwrite remote
    UPDATE_BOTH = "UPDATE_BOTH"      # tie: push local, count a conflict
    NO_CHANGE = "NO_CHANGE"


def contents_match(local: Job, remote: Job) -> bool:
    """True when both copies carry the same user-visible content."""
    return local.content_key() == remote.content_key()


def resolve_conflict(local: Job, remote: Job) -> ConflictResolution:
    """
    Decide which copy of a job is authoritative.

    Pure and deterministic: the same pair always yields the same decision.
    Status equality does not short-circuit the timestamp comparison.

    Args:
        local: Local copy
        remote: Remote copy with the same job_url

    Returns:
        ConflictResolution for the pair
    """
    if contents_match(local, remote):
        return ConflictResolution.NO_CHANGE

    if remote.last_modified > local.last_modified:
        return ConflictResolution.UPDATE_LOCAL
    if local.last_modified > remote.last_modified:
        return ConflictResolution.UPDATE_REMOTE
    return ConflictResolution.UPDATE_BOTH
