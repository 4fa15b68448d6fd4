from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .config import DEFAULT_LIMIT, DEFAULT_OFFSET, DEFAULT_THRESHOLD


class Post(BaseModel):
    """A blog post row. Extra row attributes (``$id`` etc.) pass through."""

    model_config = ConfigDict(extra="allow")

    title: str | None = Field(None, description="Post title")
    content: str | None = Field(None, description="Post body, may contain HTML")
    embedding: list[float] | str | None = Field(
        None,
        description="Precomputed embedding, either a list of floats or its JSON-encoded string",
    )


class ScoredPost(Post):
    """A post annotated with its similarity to the search query."""

    similarity: float = Field(..., ge=-1.0, le=1.0, description="Cosine similarity to the query")


class SearchQuery(BaseModel):
    """Validated search parameters."""

    model_config = ConfigDict(frozen=True)

    query: str = Field(..., min_length=1)
    limit: int = Field(DEFAULT_LIMIT, ge=1)
    offset: int = Field(DEFAULT_OFFSET, ge=0)
    threshold: float = Field(DEFAULT_THRESHOLD, ge=0.0, le=1.0)


class SearchResult(BaseModel):
    """Search response payload."""

    rows: list[ScoredPost] = Field(default_factory=list)
    length: int
    query: str
    threshold: float
    limit: int
    offset: int


class ResponseEnvelope(BaseModel):
    """Shape shared by every response of both functions."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    status_code: int = Field(..., alias="statusCode")
    message: str
    data: dict[str, Any] | None = None
    error: str | None = None
