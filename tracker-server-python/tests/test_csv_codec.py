"""
Tests for the CSV export/import codec.
"""

from datetime import datetime, timezone

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from conftest import make_job
from models.status import JobStatus
from utils.csv_codec import (
    CSV_HEADER,
    LEGACY_CSV_HEADER,
    export_jobs_csv,
    format_csv_timestamp,
    parse_csv_timestamp,
    parse_jobs_csv,
    resolve_columns,
    split_csv_records,
)


def utc_millis(*args) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


OCT_17 = utc_millis(2026, 10, 17)


class TestTimestamps:
    def test_format_uses_day_month_name_year(self):
        assert format_csv_timestamp(OCT_17 + 5_000) == "17-Oct-2026"

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("17-Oct-2026", OCT_17),
            ("17-10-2026", OCT_17),
            ("2026-10-17 08:30:00", utc_millis(2026, 10, 17, 8, 30)),
            ("1760659200000", 1_760_659_200_000),
        ],
    )
    def test_parse_formats_in_order(self, text, expected):
        assert parse_csv_timestamp(text) == expected

    def test_unparseable_uses_default(self):
        assert parse_csv_timestamp("yesterday", default=42) == 42
        assert parse_csv_timestamp("", default=42) == 42

    def test_unparseable_without_default_is_now(self):
        before = int(datetime.now(timezone.utc).timestamp() * 1000)
        assert parse_csv_timestamp("soon") >= before


class TestExport:
    def test_header_and_row(self):
        job = make_job(1, url="https://a.example.com/1", status=JobStatus.APPLIED, timestamp=OCT_17)

        text = export_jobs_csv([job])

        assert text == (
            "companyName,jobUrl,jobTitle,jobDescription,status,timestamp\n"
            "Acme,https://a.example.com/1,Engineer,Build things,APPLIED,17-Oct-2026\n"
        )

    def test_special_characters_quoted(self):
        job = make_job(
            1,
            company="Acme, Inc.",
            description='Say "hello"\nthen leave',
            timestamp=OCT_17,
        )

        row = export_jobs_csv([job]).split("\n", 1)[1]

        assert row.startswith('"Acme, Inc.",')
        assert '"Say ""hello""\nthen leave"' in row

    def test_empty_list_is_header_only(self):
        assert export_jobs_csv([]) == ",".join(CSV_HEADER) + "\n"

    def test_out_of_range_timestamp_written_raw(self):
        job = make_job(1, url="https://a.example.com/1", timestamp=10**18)

        row = export_jobs_csv([job]).split("\n")[1]

        assert row.endswith(",1000000000000000000")
        assert parse_csv_timestamp(row.rsplit(",", 1)[1]) == 10**18


class TestSplitRecords:
    def test_quoted_commas_and_newlines_stay_in_field(self):
        records = split_csv_records('a,"b,c","line1\nline2","say ""hi"""\nd,e\n')
        assert records == [["a", "b,c", "line1\nline2", 'say "hi"'], ["d", "e"]]

    def test_blank_lines_are_empty_records(self):
        assert split_csv_records("a,b\n\nc,d\n") == [["a", "b"], [], ["c", "d"]]


class TestResolveColumns:
    def test_current_header(self):
        assert resolve_columns(CSV_HEADER) == [
            "company_name",
            "job_url",
            "job_title",
            "job_description",
            "status",
            "timestamp",
        ]

    def test_legacy_header(self):
        assert resolve_columns(LEGACY_CSV_HEADER) == [
            "company_name",
            "job_url",
            "job_description",
            "status",
            "timestamp",
        ]

    def test_header_with_bom_and_odd_case(self):
        assert resolve_columns(["\ufeffCompany Name", "JOB_URL"])[:2] == ["company_name", "job_url"]

    def test_unrecognized_header_uses_default_order(self):
        assert resolve_columns(["a", "b", "c"])[0] == "company_name"


class TestParse:
    def test_round_trip(self):
        jobs = [
            make_job(1, company="Acme, Inc.", status=JobStatus.OFFER, timestamp=OCT_17),
            make_job(
                2,
                description='Multi\nline "quoted", text',
                status=JobStatus.INTERVIEW_REJECTED,
                timestamp=utc_millis(2025, 1, 2),
            ),
        ]

        result = parse_jobs_csv(export_jobs_csv(jobs))

        assert result.skipped == 0
        assert len(result.rows) == 2
        for row, job in zip(result.rows, jobs):
            assert row.company_name == job.company_name
            assert row.job_url == job.job_url
            assert row.job_title == job.job_title
            assert row.job_description == job.job_description
            assert row.status is job.status
            assert row.timestamp == job.timestamp

    def test_legacy_five_column_file(self):
        text = (
            "companyName,jobUrl,jobDescription,status,timestamp\n"
            "Acme,https://a.example.com/1,Old description,REJECTED,17-10-2026\n"
        )

        row = parse_jobs_csv(text).rows[0]

        assert row.job_title == ""
        assert row.job_description == "Old description"
        assert row.status is JobStatus.RESUME_REJECTED
        assert row.timestamp == OCT_17

    def test_short_and_blank_rows(self):
        text = (
            ",".join(CSV_HEADER) + "\n"
            "Acme,https://a.example.com/1,Engineer,Desc,SAVED,17-Oct-2026\n"
            "\n"
            "Too,short,row\n"
            " ,https://a.example.com/2,Engineer,Desc,SAVED,17-Oct-2026\n"
            "Acme,,Engineer,Desc,SAVED,17-Oct-2026\n"
        )

        result = parse_jobs_csv(text)

        assert len(result.rows) == 1
        assert result.skipped == 3

    def test_missing_status_and_timestamp_columns(self):
        text = ",".join(CSV_HEADER) + "\nAcme,https://a.example.com/1,Engineer,Desc\n"

        row = parse_jobs_csv(text).rows[0]

        assert row.status is JobStatus.SAVED
        assert row.timestamp > 0

    def test_header_only_and_empty(self):
        assert parse_jobs_csv(",".join(CSV_HEADER) + "\n").rows == []
        assert parse_jobs_csv("").rows == []

    def test_byte_order_mark_tolerated(self):
        text = "\ufeff" + export_jobs_csv([make_job(1, timestamp=OCT_17)])
        assert len(parse_jobs_csv(text).rows) == 1

    def test_row_to_job(self):
        row = parse_jobs_csv(export_jobs_csv([make_job(1, timestamp=OCT_17)])).rows[0]
        job = row.to_job(15, last_modified=99)

        assert job.id == 15
        assert job.last_modified == 99
        assert job.timestamp == OCT_17


field_text = st.text(
    alphabet=st.characters(exclude_categories=("Cs", "Cc"), exclude_characters="\ufeff")
    | st.sampled_from([",", '"', "\n"]),
    max_size=30,
)


class TestRoundTripProperty:
    @settings(max_examples=50)
    @given(
        company=field_text.filter(lambda value: value.strip() == value and value != ""),
        title=field_text.filter(lambda value: value.strip() == value),
        description=field_text.filter(lambda value: value.strip() != ""),
        status=st.sampled_from(list(JobStatus)),
    )
    def test_text_fields_survive(self, company, title, description, status):
        job = make_job(
            1,
            company=company,
            title=title,
            description=description,
            status=status,
            timestamp=OCT_17,
        )

        rows = parse_jobs_csv(export_jobs_csv([job])).rows

        assert len(rows) == 1
        assert (rows[0].company_name, rows[0].job_title, rows[0].job_description) == (
            company,
            title,
            description,
        )
        assert rows[0].status is status
