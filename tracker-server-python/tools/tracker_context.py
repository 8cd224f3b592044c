"""
Explicitly constructed dependencies shared by the tracker tool handlers.

The server builds one ``TrackerContext`` at startup and passes it to every
handler; tests build their own around a temporary database and a mocked
sheet client.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from config import Config
from db.jobs_store import JobStore
from utils.id_allocator import IdAllocator
from utils.page_scraper import PageScraper, Scraper
from utils.sheet_client import SheetClient
from utils.sync_engine import SyncEngine


@dataclass
class TrackerContext:
    """Store, remote client, scraper and the lock serializing bulk operations."""

    store: JobStore
    client: SheetClient
    scraper: Scraper
    allocator: Optional[IdAllocator] = None
    sync_engine: Optional[SyncEngine] = None
    # Held by sync, CSV import and CSV export so only one runs at a time
    operation_lock: threading.Lock = field(default_factory=threading.Lock)
    last_sync_at: Optional[str] = None
    # Relative file paths in tool arguments are resolved against base_dir
    base_dir: Path = field(default_factory=Path.cwd)
    export_dir: Path = Path("data/exports")

    def __post_init__(self):
        if self.allocator is None:
            self.allocator = IdAllocator(self.store, self.client)
        if self.sync_engine is None:
            self.sync_engine = SyncEngine(self.store, self.client, self.allocator)

    def resolve_path(self, path: str) -> Path:
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return candidate
        return self.base_dir / candidate

    def mark_synced(self) -> str:
        """Record a successful remote round-trip and return its ISO timestamp."""
        now = datetime.now(timezone.utc)
        self.last_sync_at = now.isoformat(timespec="seconds").replace("+00:00", "Z")
        return self.last_sync_at


def build_context(config: Config) -> TrackerContext:
    """
    Build the production context from configuration.

    Args:
        config: Loaded configuration

    Returns:
        TrackerContext wired to the configured database and remote sheet
    """
    store = JobStore(config.get_db_path_str())
    client = SheetClient(
        config.sheet_base_url,
        timeout_seconds=config.remote_timeout_seconds,
        retry_count=config.remote_retry_count,
        retry_sleep_seconds=config.remote_retry_sleep_seconds,
    )
    scraper = PageScraper(timeout_seconds=config.scrape_timeout_seconds)
    return TrackerContext(
        store=store,
        client=client,
        scraper=scraper,
        base_dir=config.repo_root,
        export_dir=config.resolve_repo_path(config.export_dir),
    )
