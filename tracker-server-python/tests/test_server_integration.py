"""
Integration tests for the MCP server entry point: tool registration and
delegation from the registered tool functions to the handlers.
"""

from unittest.mock import patch

import pytest

import server
from server import (
    delete_job_tool,
    export_jobs_csv_tool,
    list_jobs_tool,
    mcp,
    save_job_tool,
    update_job_details_tool,
)

TOOL_NAMES = [
    "save_job",
    "restore_job",
    "update_job_status",
    "update_job_details",
    "delete_job",
    "list_jobs",
    "sync_jobs",
    "export_jobs_csv",
    "import_jobs_csv",
]


class TestServerRegistration:
    def test_server_has_default_name(self):
        assert mcp.name == "job-tracker-mcp-server"

    def test_instructions_mention_every_tool(self):
        for name in TOOL_NAMES:
            assert name in mcp.instructions

    @pytest.mark.parametrize("name", TOOL_NAMES)
    def test_tool_is_registered(self, name):
        assert name in mcp._tool_manager._tools
        assert mcp._tool_manager._tools[name].description


class TestToolDelegation:
    @pytest.fixture(autouse=True)
    def use_test_context(self, ctx):
        with patch.object(server, "get_context", return_value=ctx):
            yield

    def test_save_then_list(self, fake_client):
        saved = save_job_tool("https://careers.example.com/jobs/1")
        listed = list_jobs_tool(query="globex")

        assert saved["success"] is True
        assert listed["count"] == 1
        assert listed["jobs"][0]["id"] == saved["job"]["id"]

    def test_details_only_sends_given_fields(self, store):
        save_job_tool("https://careers.example.com/jobs/1")

        result = update_job_details_tool(1, job_title="Principal Engineer")

        assert result["job"]["job_title"] == "Principal Engineer"
        assert result["job"]["company_name"] == "Globex"

    def test_delete(self, store):
        save_job_tool("https://careers.example.com/jobs/1")

        assert delete_job_tool(1)["success"] is True
        assert store.get_all_once() == []

    def test_export_default_path(self, tmp_path):
        result = export_jobs_csv_tool()
        assert result["output_path"].startswith(str(tmp_path / "exports"))
