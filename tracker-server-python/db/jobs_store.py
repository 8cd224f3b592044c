"""
Local job store backed by SQLite.

Provides schema bootstrap, keyed reads (by id and by URL) and serialized
writes for the job tracker. Every operation opens its own connection and
always closes it, so reads from other threads see the latest committed state.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import ValidationError

from models.errors import create_db_error
from models.job import Job

logger = logging.getLogger(__name__)

JobsListener = Callable[[List[Job]], None]

_JOB_COLUMNS = """
    id,
    company_name,
    job_url,
    job_title,
    job_description,
    status,
    timestamp,
    last_modified
"""


def resolve_db_path(db_path: str) -> Path:
    """
    Resolve a database path; relative paths are taken from the repository root.

    Environment overrides are applied by ``Config``, which always passes an
    explicit path.

    Args:
        db_path: Database path (absolute or repo-relative)

    Returns:
        Absolute Path to the database
    """
    path = Path(db_path)

    if not path.is_absolute():
        current_file = Path(__file__).resolve()
        repo_root = current_file.parents[2]  # db/ -> tracker-server-python/ -> repo/
        path = repo_root / path

    return path


def bootstrap_schema(conn: sqlite3.Connection) -> None:
    """
    Create the jobs table and its indexes if they don't exist.

    ``job_url`` is indexed but not unique: uniqueness by URL is enforced by
    the callers, and rows imported from older data may still share a URL.

    Args:
        conn: Database connection

    Raises:
        ToolError: If schema creation fails
    """
    try:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS jobs (
                id INTEGER PRIMARY KEY,
                company_name TEXT NOT NULL,
                job_url TEXT NOT NULL,
                job_title TEXT NOT NULL DEFAULT '',
                job_description TEXT NOT NULL DEFAULT '',
                status TEXT NOT NULL DEFAULT 'SAVED',
                timestamp INTEGER NOT NULL,
                last_modified INTEGER NOT NULL
            )
        """)
        conn.execute("CREATE INDEX IF NOT EXISTS idx_jobs_url ON jobs(job_url)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_jobs_timestamp ON jobs(timestamp)")
        conn.commit()

    except sqlite3.Error as e:
        raise create_db_error(
            f"Failed to bootstrap schema: {str(e)}", retryable=False, original_error=e
        ) from e


def row_to_job(row: sqlite3.Row) -> Job:
    """Map a jobs row to a Job, parsing the stored status leniently."""
    return Job.model_validate(dict(row))


class JobStore:
    """
    SQLite-backed store of tracked jobs.

    Writes are serialized through a per-instance lock; listeners registered
    with ``subscribe`` receive the full ordered job list after each
    committed write.

    Usage:
        store = JobStore(db_path)
        store.upsert(job)
        existing = store.get_by_url(job.job_url)
    """

    def __init__(self, db_path: str):
        """
        Initialize the store, creating the database file and schema if needed.

        Args:
            db_path: Database path (absolute or repo-relative)

        Raises:
            ToolError: If the database cannot be created or opened
        """
        self.resolved_path = resolve_db_path(db_path)
        self._write_lock = threading.RLock()
        self._listeners: List[JobsListener] = []

        try:
            self.resolved_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise create_db_error(
                f"Failed to create parent directories: {str(e)}", retryable=False, original_error=e
            ) from e

        with self._connect() as conn:
            bootstrap_schema(conn)

    @contextmanager
    def _connect(self):
        """
        Open a connection, commit on success, roll back on error, always close.

        Yields:
            sqlite3.Connection: Database connection

        Raises:
            ToolError: If the connection or a statement fails
        """
        conn = None
        try:
            conn = sqlite3.connect(str(self.resolved_path))
            conn.row_factory = sqlite3.Row
            yield conn
            conn.commit()

        except sqlite3.OperationalError as e:
            if conn is not None:
                conn.rollback()
            raise create_db_error(str(e), retryable=True, original_error=e) from e

        except sqlite3.Error as e:
            if conn is not None:
                conn.rollback()
            raise create_db_error(str(e), retryable=False, original_error=e) from e

        finally:
            if conn is not None:
                conn.close()

    def get_all_once(self) -> List[Job]:
        """
        Snapshot of every job, newest first.

        Ordered by (timestamp DESC, id DESC) so ties are deterministic.
        """
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT {_JOB_COLUMNS} FROM jobs ORDER BY timestamp DESC, id DESC"
            ).fetchall()
        return self._rows_to_jobs(rows)

    def get_all(self) -> List[Job]:
        """Current job list; pair with ``subscribe`` to follow later changes."""
        return self.get_all_once()

    def get_by_id(self, job_id: int) -> Optional[Job]:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_JOB_COLUMNS} FROM jobs WHERE id = ?", (job_id,)
            ).fetchone()
        return row_to_job(row) if row is not None else None

    def get_by_url(self, url: str) -> Optional[Job]:
        """Return the first job stored under ``url``, or None."""
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_JOB_COLUMNS} FROM jobs WHERE job_url = ? ORDER BY id LIMIT 1",
                (url,),
            ).fetchone()
        return row_to_job(row) if row is not None else None

    def get_max_id(self) -> Optional[int]:
        """Largest id in the store, or None when it is empty."""
        with self._connect() as conn:
            row = conn.execute("SELECT MAX(id) AS max_id FROM jobs").fetchone()
        return row["max_id"] if row is not None else None

    def upsert(self, job: Job) -> None:
        """
        Insert the job, or replace every field of the row with the same id.

        Args:
            job: Job to persist

        Raises:
            ToolError: If the write fails
        """
        with self._write_lock:
            with self._connect() as conn:
                conn.execute(
                    f"""
                    INSERT INTO jobs ({_JOB_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        company_name = excluded.company_name,
                        job_url = excluded.job_url,
                        job_title = excluded.job_title,
                        job_description = excluded.job_description,
                        status = excluded.status,
                        timestamp = excluded.timestamp,
                        last_modified = excluded.last_modified
                    """,
                    (
                        job.id,
                        job.company_name,
                        job.job_url,
                        job.job_title,
                        job.job_description,
                        job.status.label,
                        job.timestamp,
                        job.last_modified,
                    ),
                )
            self._notify()

    def delete_by_id(self, job_id: int) -> bool:
        """
        Delete a job by id.

        Returns:
            True if a row was deleted, False if no job had that id
        """
        with self._write_lock:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM jobs WHERE id = ?", (job_id,))
                deleted = cursor.rowcount > 0
            if deleted:
                self._notify()
        return deleted

    def subscribe(self, listener: JobsListener) -> Callable[[], None]:
        """
        Register a listener for the ordered job list after each write.

        The listener is called once immediately with the current list.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)
        listener(self.get_all_once())

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        jobs = self.get_all_once()
        for listener in list(self._listeners):
            try:
                listener(jobs)
            except Exception as e:  # noqa: BLE001
                logger.warning(f"Job store listener failed: {e}")

    def _rows_to_jobs(self, rows: List[sqlite3.Row]) -> List[Job]:
        jobs = []
        for row in rows:
            try:
                jobs.append(row_to_job(row))
            except ValidationError as e:
                logger.warning(f"Skipping unreadable job row id={row['id']}: {e.error_count()} error(s)")
        return jobs
