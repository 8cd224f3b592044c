"""Tests for the save_job and restore_job tool handlers."""

from unittest.mock import patch

from conftest import make_job
from models.status import JobStatus
from tools.save_job import SYNC_FAILURE_PREFIX, SYNC_SUCCESS_MESSAGE, restore_job, save_job

POSTING = "https://careers.example.com/jobs/42"


class TestSaveJob:
    def test_scrapes_saves_and_uploads(self, ctx, store, fake_client, fake_scraper):
        result = save_job({"url": f"Look at this role: {POSTING}"}, ctx)

        assert result["success"] is True
        assert result["synced"] is True
        assert result["duplicate"] is False
        assert result["message"] == SYNC_SUCCESS_MESSAGE
        assert fake_scraper.urls == [POSTING]

        saved = store.get_by_url(POSTING)
        assert saved.id == 1
        assert saved.company_name == "Globex"
        assert saved.job_title == "Backend Engineer"
        assert saved.status is JobStatus.SAVED
        assert [call[0] for call in fake_client.mutation_calls()] == ["upload"]
        assert result["job"]["status_display"] == "SAVED"

    def test_id_above_both_maxima(self, ctx, store, fake_client):
        store.upsert(make_job(3))
        fake_client.rows = [make_job(7, url="https://jobs.example.com/remote")]

        result = save_job({"url": POSTING}, ctx)

        assert result["job"]["id"] == 8

    def test_duplicate_url_not_saved_again(self, ctx, store, fake_client, fake_scraper):
        store.upsert(make_job(5, url=POSTING, status=JobStatus.INTERVIEW_REJECTED))

        result = save_job({"url": POSTING}, ctx)

        assert result["duplicate"] is True
        assert result["message"] == "Job already saved! Current status: INTERVIEW-REJECTED"
        assert result["job"]["id"] == 5
        assert fake_scraper.urls == []
        assert fake_client.calls == []

    def test_remote_failure_keeps_local_copy(self, ctx, store, fake_client):
        fake_client.reject_urls = {POSTING}

        result = save_job({"url": POSTING}, ctx)

        assert result["success"] is True
        assert result["synced"] is False
        assert result["message"] == SYNC_FAILURE_PREFIX + "Script error"
        assert store.get_by_url(POSTING) is not None

    def test_unreachable_remote_keeps_local_copy(self, ctx, store, fake_client):
        fake_client.unreachable = True

        result = save_job({"url": POSTING}, ctx)

        assert result["synced"] is False
        assert result["message"].startswith(SYNC_FAILURE_PREFIX)
        assert store.get_by_url(POSTING).id == 1

    def test_text_without_link(self, ctx, store):
        result = save_job({"url": "no link in here"}, ctx)

        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert result["error"]["message"] == "Invalid url: no http(s) link found in input"
        assert store.get_all_once() == []

    def test_missing_url(self, ctx):
        result = save_job({}, ctx)
        assert result["error"]["code"] == "VALIDATION_ERROR"

    def test_unexpected_error_is_internal(self, ctx):
        with patch.object(ctx.store, "get_by_url", side_effect=RuntimeError("boom")):
            result = save_job({"url": POSTING}, ctx)

        assert result["error"]["code"] == "INTERNAL_ERROR"
        assert result["error"]["retryable"] is True


class TestRestoreJob:
    def test_restores_deleted_job_with_same_id(self, ctx, store, fake_client):
        job = make_job(11, url=POSTING, status=JobStatus.OFFER)

        result = restore_job({"job": job.to_dict()}, ctx)

        assert result["success"] is True
        assert result["synced"] is True
        assert result["message"] == f"Job restored. {SYNC_SUCCESS_MESSAGE}"
        assert store.get_by_id(11) == job
        assert fake_client.by_url()[POSTING] == job

    def test_accepts_camel_case_payload(self, ctx, store):
        payload = make_job(12, url=POSTING).to_remote_payload()

        restore_job({"job": payload}, ctx)

        assert store.get_by_id(12).job_url == POSTING

    def test_invalid_job_payload(self, ctx):
        result = restore_job({"job": {"id": 1, "company_name": "Acme"}}, ctx)

        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert "job_url" in result["error"]["message"] or "jobUrl" in result["error"]["message"]
