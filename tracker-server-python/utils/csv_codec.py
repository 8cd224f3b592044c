"""
CSV export/import codec for tracked jobs.

Export writes the current schema:

    companyName,jobUrl,jobTitle,jobDescription,status,timestamp

with RFC-4180 style quoting (a field is quoted when it contains a comma, a
quote or a line break; inner quotes are doubled) and the creation date
rendered as ``dd-Mon-yyyy``.

Import is lenient. Columns are located from the header so files written by
the older five-column schema (no ``jobTitle``) still load; unknown headers
fall back to the current column order. Status labels go through
``parse_job_status`` and dates are tried against every format the app has
ever written before falling back to a raw epoch value, then to "now".
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from models.job import Job, now_millis
from models.status import JobStatus, parse_job_status

logger = logging.getLogger(__name__)

CSV_HEADER = ["companyName", "jobUrl", "jobTitle", "jobDescription", "status", "timestamp"]
LEGACY_CSV_HEADER = ["companyName", "jobUrl", "jobDescription", "status", "timestamp"]

CSV_DATE_FORMAT = "%d-%b-%Y"
LEGACY_DATE_FORMAT = "%d-%m-%Y"
LEGACY_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
TIMESTAMP_FORMATS = (CSV_DATE_FORMAT, LEGACY_DATE_FORMAT, LEGACY_DATETIME_FORMAT)

MIN_FIELDS_PER_ROW = 4

# Normalized header name -> CsvJobRow attribute
_HEADER_ATTRIBUTES = {
    "companyname": "company_name",
    "company": "company_name",
    "joburl": "job_url",
    "url": "job_url",
    "jobtitle": "job_title",
    "title": "job_title",
    "jobdescription": "job_description",
    "description": "job_description",
    "status": "status",
    "timestamp": "timestamp",
    "date": "timestamp",
}

_DEFAULT_COLUMNS = ["company_name", "job_url", "job_title", "job_description", "status", "timestamp"]


@dataclass(frozen=True)
class CsvJobRow:
    """One parsed import row, before an id is assigned."""

    company_name: str
    job_url: str
    job_title: str
    job_description: str
    status: JobStatus
    timestamp: int

    def to_job(self, job_id: int, last_modified: Optional[int] = None) -> Job:
        return Job(
            id=job_id,
            company_name=self.company_name,
            job_url=self.job_url,
            job_title=self.job_title,
            job_description=self.job_description,
            status=self.status,
            timestamp=self.timestamp,
            last_modified=last_modified if last_modified is not None else now_millis(),
        )


@dataclass
class CsvParseResult:
    """Rows that parsed, plus how many rows were skipped as unusable."""

    rows: List[CsvJobRow] = field(default_factory=list)
    skipped: int = 0


def format_csv_timestamp(epoch_millis: int) -> str:
    """
    Render epoch milliseconds as the export date (UTC).

    Values outside the datetime range are written as the raw integer, which
    ``parse_csv_timestamp`` reads back unchanged.
    """
    try:
        moment = datetime.fromtimestamp(epoch_millis / 1000, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        logger.warning(f"Timestamp {epoch_millis} out of range; exporting raw value")
        return str(epoch_millis)
    return moment.strftime(CSV_DATE_FORMAT)


def parse_csv_timestamp(value: str, default: Optional[int] = None) -> int:
    """
    Parse an exported date leniently.

    Tries, in order: ``dd-Mon-yyyy``, legacy ``dd-MM-yyyy``, legacy
    ``yyyy-MM-dd HH:mm:ss`` (all as UTC), then a raw integer epoch in
    milliseconds. The first successful parse wins.

    Args:
        value: Raw timestamp text
        default: Returned when nothing parses (defaults to now)

    Returns:
        Epoch milliseconds
    """
    text = (value or "").strip()
    if text:
        for fmt in TIMESTAMP_FORMATS:
            try:
                moment = datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
            except ValueError:
                continue
            return int(moment.timestamp() * 1000)
        try:
            return int(text)
        except ValueError:
            pass
    return default if default is not None else now_millis()


def export_jobs_csv(jobs: Iterable[Job]) -> str:
    """
    Serialize jobs to CSV text with a header row.

    Args:
        jobs: Jobs to export, written in the given order

    Returns:
        CSV document (``\\n`` line endings)
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for job in jobs:
        writer.writerow(
            [
                job.company_name,
                job.job_url,
                job.job_title,
                job.job_description,
                job.status.label,
                format_csv_timestamp(job.timestamp),
            ]
        )
    return buffer.getvalue()


def split_csv_records(text: str) -> List[List[str]]:
    """
    Split CSV text into records of fields.

    Quote-aware: commas and line breaks inside quoted fields stay in the
    field, and ``""`` inside a quoted field is a literal quote. Blank lines
    come back as empty records.
    """
    return [list(record) for record in csv.reader(io.StringIO(text), strict=False)]


def resolve_columns(header: List[str]) -> List[Optional[str]]:
    """
    Map header cells to row attributes.

    Returns the attribute for each column position (None for unknown
    columns). Headers that don't identify at least the company and URL
    columns are treated as unlabeled and the current column order is used.
    """
    columns: List[Optional[str]] = []
    for cell in header:
        key = "".join(cell.replace("\ufeff", "").split()).replace("_", "").lower()
        columns.append(_HEADER_ATTRIBUTES.get(key))

    if "company_name" not in columns or "job_url" not in columns:
        return list(_DEFAULT_COLUMNS)
    return columns


def _is_blank(record: List[str]) -> bool:
    return all(not cell.strip() for cell in record)


def parse_jobs_csv(text: str) -> CsvParseResult:
    """
    Parse an exported CSV document into import rows.

    The first record is the header and is never imported. Blank records are
    ignored. Records with fewer than four fields, or with no company name or
    URL, are skipped and counted.

    Args:
        text: CSV document

    Returns:
        CsvParseResult with parsed rows and the skipped count
    """
    result = CsvParseResult()
    records = split_csv_records(text.lstrip("\ufeff"))
    if not records:
        return result

    columns = resolve_columns(records[0])

    for record in records[1:]:
        if _is_blank(record):
            continue
        if len(record) < MIN_FIELDS_PER_ROW:
            result.skipped += 1
            continue

        values: Dict[str, str] = {}
        for position, cell in enumerate(record):
            attribute = columns[position] if position < len(columns) else None
            if attribute is not None and attribute not in values:
                values[attribute] = cell

        company_name = values.get("company_name", "").strip()
        job_url = values.get("job_url", "").strip()
        if not company_name or not job_url:
            result.skipped += 1
            continue

        result.rows.append(
            CsvJobRow(
                company_name=company_name,
                job_url=job_url,
                job_title=values.get("job_title", "").strip(),
                job_description=values.get("job_description", ""),
                status=parse_job_status(values.get("status", "")),
                timestamp=parse_csv_timestamp(values.get("timestamp", "")),
            )
        )

    return result
