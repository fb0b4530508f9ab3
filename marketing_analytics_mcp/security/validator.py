"""Input validation for the Marketing Analytics MCP Server."""
from typing import Any, Dict, List, Optional, Type
import re

import pydantic
from pydantic import BaseModel, ConfigDict

DATE_PATTERN = r'^\d{4}-\d{2}-\d{2}$'
GA4_DATE_PATTERN = r'^(\d{4}-\d{2}-\d{2}|today|yesterday|\d+daysAgo)$'

# Control characters are the only thing a quoted GAQL literal cannot carry
_CONTROL_CHARACTERS = re.compile(r'[\x00-\x1f\x7f]')

_SELECT_PATTERN = re.compile(r'^\s*SELECT\s+(?P<fields>.+?)\s+FROM\s+\w+', re.IGNORECASE | re.DOTALL)


class ValidationError(Exception):
    """Custom exception for validation errors."""
    pass


class ToolArguments(BaseModel):
    """Base model for tool arguments. Keys a tool does not declare are ignored."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


def _location(loc) -> str:
    return ".".join(str(part) for part in loc)


def describe_errors(error: pydantic.ValidationError) -> str:
    """
    Summarise a pydantic ValidationError in one line.

    Missing fields are listed together; otherwise the first problem is
    reported with the parameter it concerns.
    """
    errors = error.errors()
    missing = [_location(e["loc"]) for e in errors if e["type"] == "missing"]
    if missing:
        return f"Missing required parameter: {', '.join(missing)}"
    first = errors[0]
    return f"Invalid parameter '{_location(first['loc'])}': {first['msg']}"


def validate_arguments(
    model: Optional[Type[BaseModel]], arguments: Optional[Dict[str, Any]]
) -> Dict[str, Any]:
    """
    Validate tool arguments against the tool's argument model.

    Null values count as absent, so the model default applies.

    Args:
        model: Pydantic model of the arguments, None for tools without any
        arguments: Arguments as received from the client

    Returns:
        Keyword arguments for the handler, defaults filled in

    Raises:
        ValidationError: If validation fails
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise ValidationError("Arguments must be an object")
    if model is None:
        return {}

    provided = {key: value for key, value in arguments.items() if value is not None}
    try:
        params = model.model_validate(provided)
    except pydantic.ValidationError as e:
        raise ValidationError(describe_errors(e)) from e
    return params.model_dump()


def validate_campaign_name(name: str) -> bool:
    """
    Validate a campaign name used as a GAQL filter.

    Args:
        name: Campaign name (or fragment) to validate

    Returns:
        True if valid

    Raises:
        ValidationError: If validation fails
    """
    if not name or not isinstance(name, str):
        raise ValidationError("Campaign name must be a non-empty string")

    if len(name) > 255:
        raise ValidationError("Campaign name must be between 1 and 255 characters")

    if _CONTROL_CHARACTERS.search(name):
        raise ValidationError("Campaign name must not contain control characters")

    return True


def validate_entity_id(entity_id: str, label: str = "ID") -> bool:
    """
    Validate a numeric Meta object ID (campaign, ad set, ad).

    Raises:
        ValidationError: If validation fails
    """
    if not entity_id or not isinstance(entity_id, str):
        raise ValidationError(f"{label} must be a non-empty string")

    if not re.match(r'^\d+$', entity_id):
        raise ValidationError(f"{label} must be numeric")

    return True


def gaql_string_literal(value: str) -> str:
    """Quote a value as a GAQL string literal, escaping backslashes and quotes"""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def parse_select_fields(query: str) -> List[str]:
    """
    Extract the field list of a GAQL SELECT statement.

    Args:
        query: GAQL query

    Returns:
        Field names in SELECT order, e.g. ["campaign.name", "metrics.clicks"]

    Raises:
        ValidationError: If the query is not a SELECT ... FROM ... statement
    """
    if not query or not isinstance(query, str):
        raise ValidationError("Query must be a non-empty string")

    match = _SELECT_PATTERN.match(query)
    if not match:
        raise ValidationError("Only SELECT ... FROM ... queries are supported")

    fields = [field.strip() for field in match.group("fields").split(",")]
    if not all(fields):
        raise ValidationError("SELECT clause contains an empty field")

    for field in fields:
        if not re.match(r'^[a-z_][a-z0-9_.]*$', field, re.IGNORECASE):
            raise ValidationError(f"Invalid field in SELECT clause: {field}")

    return fields
