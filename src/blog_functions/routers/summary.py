"""Summary router.

POST /generate-post-summary
    Generate a short summary for a blog post ``{title, content}``. Upstream
    failures degrade to a first-words summary instead of an error.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..errors import FunctionError, InvalidJsonError
from ..lib.request import FunctionRequest, resolve_body
from ..lib.response import send_error, send_success
from ..lib.summary import generate_blog_summary
from ..lib.validators import validate_request_body

router = APIRouter(tags=["summary"])

logger = logging.getLogger(__name__)


async def to_function_request(request: Request) -> FunctionRequest:
    """Adapt a Starlette request to the transport-neutral ``FunctionRequest``."""
    raw = await request.body()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidJsonError(f"Invalid JSON in request body: {exc}") from exc
    return FunctionRequest(
        method=request.method,
        path=request.url.path,
        query=dict(request.query_params),
        body_text=text,
    )


@router.post("/generate-post-summary")
async def generate_post_summary(request: Request) -> JSONResponse:
    """Validate the post and return its summary."""
    logger.info("Processing summary generation request")
    try:
        body = resolve_body(await to_function_request(request))
        validate_request_body(body)
        summary = await generate_blog_summary(request.app.state.genai, body)
    except FunctionError as exc:
        logger.error("Error in summary handler: %s", exc.message)
        return send_error(exc.status_code, exc.message)
    except Exception as exc:
        logger.exception("Unexpected error in summary handler")
        return send_error(500, str(exc) or "Internal server error")

    logger.info("Summary generated and returned successfully")
    return send_success("Post summary generated successfully", {"summary": summary})
