"""Search router.

GET /search?query=...&limit=...&offset=...&threshold=...
    Rank post rows by cosine similarity to the query embedding. Upstream
    failures are reported as errors.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..errors import FunctionError
from ..lib.response import send_error, send_success
from ..lib.search import perform_semantic_search

router = APIRouter(tags=["search"])

logger = logging.getLogger(__name__)


@router.get("/search")
async def semantic_search(request: Request) -> JSONResponse:
    logger.info("Processing semantic search request")
    state = request.app.state
    try:
        result = await perform_semantic_search(
            state.genai, state.tables, dict(request.query_params)
        )
    except FunctionError as exc:
        logger.error("Error in search handler: %s", exc.message)
        return send_error(exc.status_code, exc.message, exc.message)
    except Exception as exc:
        logger.exception("Unexpected error in search handler")
        message = str(exc) or "Internal Server Error"
        return send_error(500, message, message)

    logger.info("Search completed successfully")
    return send_success("Relevant posts fetched successfully", result.model_dump(mode="json"))
