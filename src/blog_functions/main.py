import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .lib.genai import GenAIClient
from .lib.response import send_error
from .lib.tables import TablesClient
from .routers import health, search, summary

logging.basicConfig(level=get_settings().log_level)

logger = logging.getLogger(__name__)

ROUTING_MESSAGES = {
    404: "Endpoint not found",
    405: "Method not allowed",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the upstream clients once per process and close them on shutdown.

    Handlers read them from ``app.state``; tests assign fakes there directly.
    """
    settings = get_settings()
    app.state.genai = GenAIClient(
        settings.genai_api_key,
        settings.genai_base_url,
        timeout=settings.http_timeout,
    )
    app.state.tables = TablesClient(
        settings.appwrite_endpoint,
        settings.appwrite_project_id,
        settings.appwrite_api_key,
        settings.appwrite_database_id,
        settings.appwrite_posts_table_id,
        timeout=settings.http_timeout,
    )
    try:
        yield
    finally:
        await app.state.genai.aclose()
        await app.state.tables.aclose()


app = FastAPI(
    title="Blog Functions",
    description="AI post summaries and semantic post search",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(summary.router)
app.include_router(search.router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = ROUTING_MESSAGES.get(exc.status_code, str(exc.detail))
    return send_error(exc.status_code, message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return send_error(400, "Invalid request", str(exc.errors()))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error for %s %s", request.method, request.url.path)
    return send_error(500, "Internal server error", str(exc) or None)
