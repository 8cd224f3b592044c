"""
Configuration module for the job tracker server.

Provides centralized configuration management with support for:
- Environment variables
- Default values
- Path resolution
- Logging configuration
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file at project root
# config.py is in tracker-server-python/, so .env is in parent directory
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=_env_path)

DEFAULT_SHEET_DEPLOYMENT_ID = (
    "AKfycbzUE5aItxZ6LAgb9KaEp7EAxpHqsKMucs2CLWVp7eM6u9Imz8s_0PVns6BlD8_jf1PE-A"
)


def _parse_float(env_var: str, default: float) -> float:
    """Parse a float from an environment variable, falling back on bad input."""
    value = os.getenv(env_var)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        logging.warning(f"Ignoring invalid {env_var}={value!r}; using {default}")
        return default


def _parse_int(env_var: str, default: int) -> int:
    """Parse an int from an environment variable, falling back on bad input."""
    value = os.getenv(env_var)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logging.warning(f"Ignoring invalid {env_var}={value!r}; using {default}")
        return default


class Config:
    """
    Configuration class for tracker server settings.

    Supports configuration via environment variables (and .env file) with sensible defaults.
    All paths are resolved relative to the repository root.
    """

    def __init__(self):
        """Initialize configuration from environment variables and defaults."""
        self._repo_root = self._find_repo_root()

        # Database configuration
        self.db_path = self._resolve_db_path()

        # Logging configuration
        self.log_level = os.getenv("JOBTRACKER_LOG_LEVEL", "INFO").upper()
        self.log_file = self._resolve_log_path()

        # Server configuration
        self.server_name = os.getenv("JOBTRACKER_SERVER_NAME", "job-tracker-mcp-server")

        # Remote sheet configuration
        self.sheet_deployment_id = os.getenv(
            "JOBTRACKER_SHEET_DEPLOYMENT_ID", DEFAULT_SHEET_DEPLOYMENT_ID
        )
        self.sheet_base_url = os.getenv(
            "JOBTRACKER_SHEET_BASE_URL",
            f"https://script.google.com/macros/s/{self.sheet_deployment_id}/",
        )
        self.remote_timeout_seconds = _parse_float("JOBTRACKER_REMOTE_TIMEOUT_SECONDS", 15.0)
        self.remote_retry_count = _parse_int("JOBTRACKER_REMOTE_RETRY_COUNT", 2)
        self.remote_retry_sleep_seconds = _parse_float(
            "JOBTRACKER_REMOTE_RETRY_SLEEP_SECONDS", 1.0
        )

        # Scraper configuration
        self.scrape_timeout_seconds = _parse_float("JOBTRACKER_SCRAPE_TIMEOUT_SECONDS", 10.0)

        # CSV export defaults
        self.export_dir = os.getenv("JOBTRACKER_EXPORT_DIR", "data/exports")

    def _find_repo_root(self) -> Path:
        """
        Find the repository root directory.

        Returns:
            Path to repository root
        """
        current_file = Path(__file__).resolve()
        # config.py is in tracker-server-python/, so parent is repo root
        return current_file.parent.parent

    def _resolve_db_path(self) -> Path:
        """
        Resolve the database path from environment or default.

        Resolution order:
        1. JOBTRACKER_DB environment variable (absolute or relative)
        2. JOBTRACKER_ROOT/data/jobs.db
        3. Default: <repo_root>/data/jobs.db

        Returns:
            Resolved absolute Path to database
        """
        db_env = os.getenv("JOBTRACKER_DB")
        if db_env:
            db_path = Path(db_env)
            if db_path.is_absolute():
                return db_path
            else:
                return self._repo_root / db_path

        root_env = os.getenv("JOBTRACKER_ROOT")
        if root_env:
            return Path(root_env) / "data" / "jobs.db"

        return self._repo_root / "data" / "jobs.db"

    def _resolve_log_path(self) -> Optional[Path]:
        """
        Resolve the log file path from environment.

        If JOBTRACKER_LOG_FILE is set, logs will be written to that file.
        Otherwise, logs go to stderr only.

        Returns:
            Path to log file, or None for stderr-only logging
        """
        log_env = os.getenv("JOBTRACKER_LOG_FILE")
        if not log_env:
            return None

        log_path = Path(log_env)
        if log_path.is_absolute():
            return log_path
        else:
            return self._repo_root / log_path

    @property
    def repo_root(self) -> Path:
        return self._repo_root

    def resolve_repo_path(self, path: str) -> Path:
        """Resolve a possibly relative path against the repository root."""
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return candidate
        return self._repo_root / candidate

    def setup_logging(self):
        """
        Configure logging based on configuration settings.

        Sets up logging to stderr and optionally to a file.
        Log level is controlled by JOBTRACKER_LOG_LEVEL.
        """
        numeric_level = getattr(logging, self.log_level, logging.INFO)

        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )

        root_logger = logging.getLogger()
        root_logger.setLevel(numeric_level)

        # Remove existing handlers to avoid duplicates
        root_logger.handlers.clear()

        # Always add stderr handler (stdout carries the stdio transport)
        stderr_handler = logging.StreamHandler()
        stderr_handler.setLevel(numeric_level)
        stderr_handler.setFormatter(formatter)
        root_logger.addHandler(stderr_handler)

        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

            logging.info(f"Logging to file: {self.log_file}")

        logging.info(f"Log level set to: {self.log_level}")
        logging.info(f"Repository root: {self._repo_root}")
        logging.info(f"Database path: {self.db_path}")

    def get_db_path_str(self) -> str:
        """
        Get database path as string for the job store.

        Returns:
            Database path as string
        """
        return str(self.db_path)

    def validate(self) -> list[str]:
        """
        Validate configuration and return any warnings.

        Returns:
            List of warning messages (empty if all valid)
        """
        warnings = []

        if not self.db_path.exists():
            warnings.append(
                f"Database file not found: {self.db_path}. "
                "A new empty database will be created on startup."
            )

        if not self.sheet_base_url.startswith(("http://", "https://")):
            warnings.append(
                f"Remote sheet URL is not an http(s) URL: {self.sheet_base_url!r}. "
                "Remote sync calls will fail and jobs will be kept locally only."
            )

        if self.remote_timeout_seconds <= 0:
            warnings.append(
                f"Remote timeout must be positive, got {self.remote_timeout_seconds}; "
                "requests would never time out."
            )

        if self.log_file:
            log_dir = self.log_file.parent
            if not log_dir.exists():
                try:
                    log_dir.mkdir(parents=True, exist_ok=True)
                except Exception as e:
                    warnings.append(f"Cannot create log directory {log_dir}: {e}")
            elif not os.access(log_dir, os.W_OK):
                warnings.append(f"Log directory not writable: {log_dir}")

        return warnings


# Global configuration instance
config = Config()


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Global Config instance
    """
    return config
