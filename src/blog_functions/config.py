"""Configuration for the summary and search functions.

Tunables live as module-level constants; credentials and endpoints come from
the environment (see ``get_settings``).
"""

import os
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Summary function
# ---------------------------------------------------------------------------

# Largest post body the database accepts.
MAX_CONTENT_LENGTH_DB = 100_000
# Largest slice of plain text sent to the model.
MAX_CONTENT_LENGTH = 3_000
SUMMARY_MAX_WORDS = 70

# Retry policy for rate-limited (429) generate calls.
MAX_RETRIES = 3
RETRY_BASE_DELAY_MS = 10_000
RETRY_MAX_JITTER_MS = 1_000

SUMMARY_MODEL = "gemini-flash-lite-latest"

# Recognised generation parameters, passed through to the model untouched.
SUMMARY_GENERATION_CONFIG = {
    "temperature": 1.0,
    "max_output_tokens": 150,
    "top_p": 0.95,
    "thinking_budget": 0,
}

# ---------------------------------------------------------------------------
# Search function
# ---------------------------------------------------------------------------

DEFAULT_LIMIT = 1000
DEFAULT_OFFSET = 0
DEFAULT_THRESHOLD = 0.5

EMBEDDING_MODEL = "gemini-embedding-001"
EMBEDDING_DIMENSIONALITY = 768


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

DEFAULT_GENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


@dataclass(frozen=True)
class Settings:
    genai_api_key: str | None
    genai_base_url: str
    appwrite_endpoint: str | None
    appwrite_project_id: str | None
    appwrite_api_key: str | None
    appwrite_database_id: str | None
    appwrite_posts_table_id: str | None
    http_timeout: float = 30.0
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Read settings from the environment."""
    return Settings(
        genai_api_key=os.environ.get("GOOGLE_GENAI_API_KEY"),
        genai_base_url=os.environ.get("GOOGLE_GENAI_BASE_URL", DEFAULT_GENAI_BASE_URL),
        appwrite_endpoint=os.environ.get("APPWRITE_ENDPOINT"),
        appwrite_project_id=os.environ.get("APPWRITE_PROJECT_ID"),
        appwrite_api_key=os.environ.get("APPWRITE_API_KEY"),
        appwrite_database_id=os.environ.get("APPWRITE_DATABASE_ID"),
        appwrite_posts_table_id=os.environ.get("APPWRITE_POSTS_TABLE_ID"),
        http_timeout=float(os.environ.get("HTTP_TIMEOUT", "30")),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )
