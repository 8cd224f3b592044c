"""Turn pydantic validation failures into VALIDATION_ERROR tool errors."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from models.errors import ToolError, create_validation_error

_VALUE_ERROR_PREFIX = "Value error, "


def _field_path(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc)


def _issue_message(issue: dict[str, Any]) -> str:
    message = issue.get("msg") or "Invalid input"
    if message.startswith(_VALUE_ERROR_PREFIX):
        message = message[len(_VALUE_ERROR_PREFIX) :]

    field = _field_path(issue.get("loc", ()))
    # Field validators already name the field ("Invalid status: ...")
    if not field or message.startswith("Invalid "):
        return message
    return f"Invalid {field}: {message}"


def map_pydantic_validation_error(error: ValidationError) -> ToolError:
    """
    Map a pydantic ValidationError to a ToolError.

    Only the first issue is reported; the tool caller fixes one argument at
    a time.
    """
    issues = error.errors()
    if not issues:
        return create_validation_error("Invalid input")
    return create_validation_error(_issue_message(issues[0]))
