"""Semantic post search.

1. Validate the raw parameters into a ``SearchQuery``.
2. Embed the query text with the Gemini embedding model.
3. List a page of post rows from the posts table.
4. Score every row by cosine similarity, sort descending and drop rows
   below the threshold.

Upstream failures are not retried; they fail the request.
"""

import logging
from collections.abc import Mapping
from typing import Any

from ..config import EMBEDDING_DIMENSIONALITY, EMBEDDING_MODEL
from ..errors import UpstreamEmptyResultError, UpstreamUnavailableError
from ..models import ScoredPost, SearchResult
from .similarity import cosine_similarity, parse_embedding
from .tables import fetch_posts
from .validators import validate_search_params

logger = logging.getLogger(__name__)


async def generate_embedding(genai, text: str) -> list[float]:
    """Embed *text*, raising ``UpstreamEmptyResultError`` on an empty vector."""
    logger.info("Generating embeddings using Gemini API")
    try:
        embedding = await genai.embed_content(EMBEDDING_MODEL, text, EMBEDDING_DIMENSIONALITY)
    except UpstreamUnavailableError as exc:
        raise UpstreamUnavailableError(f"Failed to generate embedding: {exc}") from exc

    if not embedding:
        raise UpstreamEmptyResultError("Failed to generate embedding: empty embedding returned from Gemini API")

    logger.info("Generated embedding with %d dimensions", len(embedding))
    return embedding


def rank_posts(
    query_embedding: list[float],
    rows: list[dict[str, Any]],
    threshold: float,
) -> list[ScoredPost]:
    """Score *rows* against *query_embedding* and keep those at or above *threshold*.

    Rows whose embedding is missing or cannot be compared are skipped.
    """
    scored: list[ScoredPost] = []
    for row in rows:
        try:
            vec = parse_embedding(row.get("embedding"))
            if vec is None:
                logger.warning("Skipping post %s without embedding", row.get("$id"))
                continue
            similarity = cosine_similarity(query_embedding, vec)
            scored.append(ScoredPost.model_validate({**row, "similarity": similarity}))
        except ValueError as exc:
            logger.warning("Skipping post %s: %s", row.get("$id"), exc)
            continue

    scored.sort(key=lambda p: p.similarity, reverse=True)
    return [p for p in scored if p.similarity >= threshold]


async def perform_semantic_search(
    genai,
    tables,
    params: Mapping[str, Any],
    additional_queries: list[str] | None = None,
) -> SearchResult:
    """Run a semantic search for the raw request *params*."""
    search = validate_search_params(params)
    logger.info("Starting semantic search for query: %r", search.query)

    query_embedding = await generate_embedding(genai, search.query)

    page = await fetch_posts(tables, search.limit, search.offset, additional_queries)
    rows = page.get("rows") or []

    logger.info("Processing %d posts for similarity calculation", len(rows))
    relevant = rank_posts(query_embedding, rows, search.threshold)
    logger.info(
        "Found %d relevant posts above threshold %s", len(relevant), search.threshold
    )

    return SearchResult(
        rows=relevant,
        length=len(relevant),
        query=search.query,
        threshold=search.threshold,
        limit=search.limit,
        offset=search.offset,
    )
