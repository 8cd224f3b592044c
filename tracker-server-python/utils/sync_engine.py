"""
Bidirectional synchronization between the local job store and the remote sheet.

A pass reconciles the full local snapshot against the full remote snapshot
using ``job_url`` as the join key:

1. Remote-only jobs are downloaded into the local store.
2. Jobs on both sides go through ``resolve_conflict`` and the winning copy
   overwrites the other.
3. Local-only jobs are uploaded to the sheet.

Every per-record action commits on its own, so a pass that stops half way
leaves both sides consistent record by record and the next pass picks up
where it left off. Only a failed remote download aborts a pass; any other
remote failure is logged and the record is skipped.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional

from db.jobs_store import JobStore
from models.errors import create_remote_error
from models.job import Job
from utils.conflict_policy import ConflictResolution, resolve_conflict
from utils.id_allocator import IdAllocator
from utils.sheet_client import SheetClient, SheetClientError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncResult:
    """Counts of the actions a sync pass performed."""

    uploaded: int = 0
    downloaded: int = 0
    updated: int = 0
    conflicts: int = 0

    @property
    def is_empty(self) -> bool:
        return not (self.uploaded or self.downloaded or self.updated or self.conflicts)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def index_by_url(jobs: List[Job], side: str) -> Dict[str, Job]:
    """
    Map job_url to job; the first occurrence of a URL wins.

    Args:
        jobs: Jobs from one side
        side: "local" or "remote", used in the duplicate warning
    """
    by_url: Dict[str, Job] = {}
    for job in jobs:
        if job.job_url in by_url:
            logger.warning(
                f"Duplicate {side} job for URL {job.job_url} (id={job.id}); "
                f"keeping id={by_url[job.job_url].id}"
            )
            continue
        by_url[job.job_url] = job
    return by_url


class SyncEngine:
    """
    Runs full reconciliation passes.

    Usage:
        engine = SyncEngine(store, client)
        result = engine.perform_sync()
    """

    def __init__(
        self,
        store: JobStore,
        client: SheetClient,
        allocator: Optional[IdAllocator] = None,
    ):
        self.store = store
        self.client = client
        self.allocator = allocator or IdAllocator(store, client)

    def perform_sync(self) -> SyncResult:
        """
        Run one reconciliation pass.

        Returns:
            SyncResult with uploaded/downloaded/updated/conflicts counts

        Raises:
            ToolError: REMOTE_ERROR if the remote job set cannot be downloaded;
                DB_ERROR if the local store fails
        """
        local_jobs = self.store.get_all_once()
        try:
            remote_jobs = self.client.download_jobs()
        except SheetClientError as e:
            logger.error(f"Sync failed: {e}")
            raise create_remote_error(str(e), retryable=True, original_error=e) from e

        logger.info(f"Starting sync: {len(local_jobs)} local jobs, {len(remote_jobs)} remote jobs")

        local_by_url = index_by_url(local_jobs, "local")
        remote_by_url = index_by_url(remote_jobs, "remote")
        remote_max_id = max((job.id for job in remote_jobs), default=0)

        uploaded = downloaded = updated = conflicts = 0

        for remote_job in remote_by_url.values():
            local_job = local_by_url.get(remote_job.job_url)

            if local_job is None:
                self._download(remote_job, remote_max_id)
                downloaded += 1
                continue

            resolution = resolve_conflict(local_job, remote_job)

            if resolution is ConflictResolution.UPDATE_LOCAL:
                self.store.upsert(remote_job.with_changes(id=local_job.id))
                updated += 1
                logger.debug(f"Updated local: {remote_job.company_name} (remote was newer)")

            elif resolution is ConflictResolution.UPDATE_REMOTE:
                if self._push_update(local_job, "remote update"):
                    updated += 1
                    logger.debug(f"Updated remote: {local_job.company_name} (local was newer)")

            elif resolution is ConflictResolution.UPDATE_BOTH:
                if self._push_update(local_job, "conflict resolution"):
                    updated += 1
                    conflicts += 1
                    logger.debug(
                        f"Conflict resolved: {local_job.company_name} (local took precedence)"
                    )

            else:
                logger.debug(f"No change needed: {local_job.company_name}")

        for local_job in local_by_url.values():
            if local_job.job_url in remote_by_url:
                continue
            try:
                response = self.client.upload_job(local_job)
            except SheetClientError as e:
                logger.warning(f"Failed to upload {local_job.company_name}: {e}")
                continue
            if response.is_successful:
                uploaded += 1
                logger.debug(f"Uploaded: {local_job.company_name}")
            else:
                logger.warning(
                    f"Failed to upload {local_job.company_name}: HTTP {response.status_code}"
                )

        result = SyncResult(
            uploaded=uploaded, downloaded=downloaded, updated=updated, conflicts=conflicts
        )
        logger.info(
            f"Sync completed: {uploaded} uploaded, {downloaded} downloaded, "
            f"{updated} updated, {conflicts} conflicts"
        )
        return result

    def _download(self, remote_job: Job, remote_max_id: int) -> None:
        """Insert a remote-only job, re-keying it if its id belongs to another local job."""
        occupant = self.store.get_by_id(remote_job.id)
        if occupant is not None and occupant.job_url != remote_job.job_url:
            new_id = self.allocator.next_id(remote_max_id=remote_max_id)
            logger.warning(
                f"Remote job id={remote_job.id} ({remote_job.job_url}) collides with local "
                f"job {occupant.job_url}; storing it as id={new_id}"
            )
            remote_job = remote_job.with_changes(id=new_id)

        self.store.upsert(remote_job)
        logger.debug(f"Downloaded: {remote_job.company_name}")

    def _push_update(self, local_job: Job, purpose: str) -> bool:
        """Send the local copy to the sheet; True on HTTP success."""
        try:
            response = self.client.update_job(local_job)
        except SheetClientError as e:
            logger.warning(f"Failed {purpose} for {local_job.company_name}: {e}")
            return False
        if not response.is_successful:
            logger.warning(
                f"Failed {purpose} for {local_job.company_name}: HTTP {response.status_code}"
            )
            return False
        return True
