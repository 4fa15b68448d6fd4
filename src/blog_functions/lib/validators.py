"""Request validation for both functions."""

import math
from collections.abc import Mapping
from typing import Any

from ..config import DEFAULT_LIMIT, DEFAULT_OFFSET, DEFAULT_THRESHOLD, MAX_CONTENT_LENGTH_DB
from ..errors import (
    ContentTooLargeError,
    InvalidParameterError,
    MissingFieldError,
    TypeMismatchError,
)
from ..models import SearchQuery


# ---------------------------------------------------------------------------
# Summary request body
# ---------------------------------------------------------------------------

def validate_request_body(body: Any) -> None:
    """Check a summary request body, raising on the first failed rule."""
    if not isinstance(body, Mapping):
        raise MissingFieldError("Request body must be a JSON object")

    title = body.get("title")
    content = body.get("content")

    if not title or not content:
        raise MissingFieldError("Missing title or content")

    if not isinstance(title, str) or not isinstance(content, str):
        raise TypeMismatchError("Title and content must be strings")

    if len(content) > MAX_CONTENT_LENGTH_DB:
        raise ContentTooLargeError(f"Content exceeds {MAX_CONTENT_LENGTH_DB} characters")


# ---------------------------------------------------------------------------
# Search parameters
# ---------------------------------------------------------------------------

def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _as_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def validate_search_params(params: Mapping[str, Any]) -> SearchQuery:
    """Validate raw search parameters and return a ``SearchQuery``.

    Query-string values arrive as strings and are coerced here. Absent or
    blank optional parameters take their defaults.
    """
    query = params.get("query")
    if not isinstance(query, str) or not query.strip():
        raise InvalidParameterError("query", "Query parameter is required and cannot be empty")

    limit = DEFAULT_LIMIT
    raw = params.get("limit")
    if not _is_missing(raw):
        limit = _as_int(raw)
        if limit is None or limit < 1:
            raise InvalidParameterError("limit", "Limit must be a positive number")

    offset = DEFAULT_OFFSET
    raw = params.get("offset")
    if not _is_missing(raw):
        offset = _as_int(raw)
        if offset is None or offset < 0:
            raise InvalidParameterError("offset", "Offset must be a non-negative number")

    threshold = DEFAULT_THRESHOLD
    raw = params.get("threshold")
    if not _is_missing(raw):
        threshold = _as_float(raw)
        if threshold is None or not 0.0 <= threshold <= 1.0:
            raise InvalidParameterError("threshold", "Threshold must be between 0 and 1")

    return SearchQuery(query=query, limit=limit, offset=offset, threshold=threshold)
