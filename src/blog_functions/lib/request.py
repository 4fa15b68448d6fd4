"""Request body resolution.

Function runtimes and HTTP clients hand the body over in different shapes:
a pre-parsed ``body_json``, a raw ``body_text``, or an ambiguous ``body``
that may be either. ``resolve_body`` tries each extractor in
``BODY_EXTRACTORS`` order and returns the first result.
"""

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..errors import InvalidJsonError


@dataclass
class FunctionRequest:
    """Transport-neutral view of an incoming function request."""

    method: str = "GET"
    path: str = "/"
    query: dict[str, str] = field(default_factory=dict)
    body_json: Any = None
    body_text: str | None = None
    body: Any = None


def _field(req, name: str):
    if isinstance(req, Mapping):
        return req.get(name)
    return getattr(req, name, None)


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidJsonError(f"Invalid JSON in request body: {exc}") from exc


def _from_body_json(req) -> Any:
    value = _field(req, "body_json")
    if isinstance(value, Mapping):
        return value
    return None


def _from_body_text(req) -> Any:
    value = _field(req, "body_text")
    if isinstance(value, str) and value.strip():
        return _parse_json(value)
    return None


def _from_body(req) -> Any:
    value = _field(req, "body")
    if isinstance(value, str) and value.strip():
        return _parse_json(value)
    if isinstance(value, Mapping):
        return value
    return None


BODY_EXTRACTORS: list[Callable[[Any], Any]] = [
    _from_body_json,
    _from_body_text,
    _from_body,
]


def resolve_body(req) -> Any:
    """Resolve the request body to a single parsed value.

    Returns an empty dict when no representation is present; validation
    rejects that downstream. Raises ``InvalidJsonError`` when a text body is
    not valid JSON.
    """
    for extract in BODY_EXTRACTORS:
        body = extract(req)
        if body is not None:
            return body
    return {}
