"""Pydantic schemas for the CSV import and export tools."""

from __future__ import annotations

from typing import Optional

from pydantic import field_validator

from schemas.common import StrictIgnoreRequest, StrictResponse, validate_optional_non_empty_str


class ImportJobsCsvRequest(StrictIgnoreRequest):
    """Request schema for import_jobs_csv."""

    input_path: str

    @field_validator("input_path")
    @classmethod
    def validate_input_path(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Invalid input_path: cannot be empty")
        return value


class ImportJobsCsvResponse(StrictResponse):
    """Success response schema for import_jobs_csv."""

    imported_count: int
    skipped_count: int
    synced_count: int
    message: str


class ExportJobsCsvRequest(StrictIgnoreRequest):
    """Request schema for export_jobs_csv."""

    output_path: Optional[str] = None

    @field_validator("output_path")
    @classmethod
    def validate_output_path(cls, value: Optional[str]) -> Optional[str]:
        return validate_optional_non_empty_str(value, "output_path")


class ExportJobsCsvResponse(StrictResponse):
    """Success response schema for export_jobs_csv."""

    exported_count: int
    output_path: str
    message: str
