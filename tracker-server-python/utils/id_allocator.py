"""
Id allocation spanning the local and remote id spaces.

New jobs get ``max(local max id, remote max id) + 1`` so an id minted on this
device never collides with a row another device already pushed to the sheet.
"""

import logging
from typing import Optional

from db.jobs_store import JobStore
from utils.sheet_client import SheetClient, SheetClientError

logger = logging.getLogger(__name__)


class IdAllocator:
    """Computes the next unused job id."""

    def __init__(self, store: JobStore, client: SheetClient):
        self.store = store
        self.client = client

    def fetch_remote_max_id(self) -> int:
        """
        Largest id in the remote collection.

        Returns:
            Remote max id, or 0 when the sheet is empty or unreachable
        """
        try:
            remote_jobs = self.client.download_jobs()
        except SheetClientError as e:
            logger.warning(f"Failed to get max id from remote sheet: {e}")
            return 0
        return max((job.id for job in remote_jobs), default=0)

    def next_id(self, remote_max_id: Optional[int] = None) -> int:
        """
        Next id after the largest local or remote id.

        Args:
            remote_max_id: Prefetched remote max id; fetched when None

        Returns:
            New job id
        """
        local_max_id = self.store.get_max_id() or 0
        if remote_max_id is None:
            remote_max_id = self.fetch_remote_max_id()
        return max(local_max_id, remote_max_id) + 1
