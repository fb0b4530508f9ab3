"""Security module for input validation and sanitization."""
from .validator import (
    DATE_PATTERN,
    GA4_DATE_PATTERN,
    ToolArguments,
    ValidationError,
    describe_errors,
    validate_arguments,
    validate_campaign_name,
    validate_entity_id,
    gaql_string_literal,
    parse_select_fields,
)

__all__ = [
    "DATE_PATTERN",
    "GA4_DATE_PATTERN",
    "ToolArguments",
    "ValidationError",
    "describe_errors",
    "validate_arguments",
    "validate_campaign_name",
    "validate_entity_id",
    "gaql_string_literal",
    "parse_select_fields",
]
