"""Response envelope builders.

Every response either function produces, success or failure, has the shape
``{success, statusCode, message, data?, error?}`` and an HTTP status equal to
``statusCode``.
"""

from typing import Any

from fastapi.responses import JSONResponse

from ..models import ResponseEnvelope


def envelope(
    success: bool,
    status_code: int,
    message: str,
    data: dict[str, Any] | None = None,
    error: str | None = None,
) -> JSONResponse:
    body = ResponseEnvelope(
        success=success, status_code=status_code, message=message, data=data, error=error
    )
    content = body.model_dump(mode="json", by_alias=True)
    # Optional members are left out rather than sent as null.
    for key in ("data", "error"):
        if content[key] is None:
            del content[key]
    return JSONResponse(status_code=status_code, content=content)


def send_success(message: str, data: dict[str, Any] | None = None) -> JSONResponse:
    return envelope(True, 200, message, data=data)


def send_error(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    return envelope(False, status_code, message, error=error)
