"""Appwrite TablesDB access over REST.

``Query`` builds the JSON query strings Appwrite expects in ``queries[]``;
``TablesClient.list_rows`` performs the paginated listing.
"""

import json
import logging
from typing import Any

import httpx

from ..errors import UpstreamUnavailableError

logger = logging.getLogger(__name__)


class Query:
    """Builders for Appwrite query strings."""

    @staticmethod
    def _build(method: str, attribute: str | None = None, values: list | None = None) -> str:
        query: dict[str, Any] = {"method": method}
        if attribute is not None:
            query["attribute"] = attribute
        if values is not None:
            query["values"] = values
        return json.dumps(query)

    @staticmethod
    def limit(limit: int) -> str:
        return Query._build("limit", values=[limit])

    @staticmethod
    def offset(offset: int) -> str:
        return Query._build("offset", values=[offset])

    @staticmethod
    def equal(attribute: str, value) -> str:
        values = value if isinstance(value, list) else [value]
        return Query._build("equal", attribute, values)


class TablesClient:
    """Async client for listing rows from an Appwrite table."""

    def __init__(
        self,
        endpoint: str | None,
        project_id: str | None,
        api_key: str | None,
        database_id: str | None,
        table_id: str | None,
        http: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self.endpoint = (endpoint or "").rstrip("/")
        self.project_id = project_id
        self.database_id = database_id
        self.table_id = table_id
        self._api_key = api_key
        self._http = http or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            "X-Appwrite-Project": self.project_id or "",
            "X-Appwrite-Key": self._api_key or "",
        }

    async def list_rows(self, queries: list[str] | None = None) -> dict[str, Any]:
        """List rows of the configured table.

        Returns the Appwrite body, ``{"total": int, "rows": [...]}``.
        """
        url = f"{self.endpoint}/tablesdb/{self.database_id}/tables/{self.table_id}/rows"
        params = [("queries[]", q) for q in (queries or [])]
        try:
            resp = await self._http.get(url, params=params, headers=self._headers())
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UpstreamUnavailableError(
                f"Appwrite returned {exc.response.status_code}: {exc.response.text}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(f"Appwrite request failed: {exc}") from exc
        return resp.json()


async def fetch_posts(
    tables: TablesClient,
    limit: int,
    offset: int,
    additional_queries: list[str] | None = None,
) -> dict[str, Any]:
    """Fetch a page of post rows, skipping *offset* and returning at most *limit*."""
    logger.info("Fetching posts from database (limit: %s, offset: %s)", limit, offset)
    try:
        resp = await tables.list_rows(
            [Query.limit(limit), Query.offset(offset), *(additional_queries or [])]
        )
    except UpstreamUnavailableError as exc:
        raise UpstreamUnavailableError(f"Failed to fetch posts from database: {exc}") from exc
    logger.info("Fetched %d posts from database", len(resp.get("rows") or []))
    return resp
