"""
Async client for the YouTube Data API v3 search and video endpoints.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

import aiohttp

from dj_automation.exceptions import ApiError
from dj_automation.models.config import DEFAULT_YOUTUBE_BASE_URL
from dj_automation.models.records import SearchCandidate

log = logging.getLogger(__name__)


class YouTubeAPIClient:
    """
    Thin async client for the two YouTube Data API endpoints the pipeline uses.

    Every failure (transport, timeout, error status, malformed body) is raised
    as ApiError. Requests are never retried.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_YOUTUBE_BASE_URL,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initializes the API client.

        Args:
            token: YouTube Data API key.
            base_url: API root, e.g. https://www.googleapis.com/youtube/v3
            session: An existing session to use. The client will not close it.
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "YouTubeAPIClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _initialize_session(self) -> aiohttp.ClientSession:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"Accept-Encoding": "gzip, deflate"},
                timeout=aiohttp.ClientTimeout(total=30, connect=10),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Closes the session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def api_call(self, endpoint: str, **params: Any) -> Dict[str, Any]:
        """
        Performs a single GET against `endpoint` and returns the decoded JSON.
        """
        if not self.token:
            raise ApiError(
                "No YouTube API token configured.", endpoint=endpoint
            )

        session = await self._initialize_session()
        url = f"{self.base_url}/{endpoint}"
        log.debug(f"GET {url} params={params}")
        params["key"] = self.token

        start_time = time.monotonic()
        try:
            async with session.get(url, params=params) as r:
                duration_ms = (time.monotonic() - start_time) * 1000
                log.debug(f"{endpoint} responded {r.status} in {duration_ms:.0f} ms")

                if r.status >= 400:
                    message = await self._read_error_message(r)
                    raise ApiError(
                        f"YouTube API '{endpoint}' returned HTTP {r.status}: {message}",
                        endpoint=endpoint,
                        status=r.status,
                    )

                body = await r.json()
                if not isinstance(body, dict):
                    raise ApiError(
                        f"YouTube API '{endpoint}' returned a malformed body "
                        f"({type(body).__name__} instead of an object).",
                        endpoint=endpoint,
                        status=r.status,
                    )
                return body
        except ApiError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise ApiError(
                f"Request to YouTube API '{endpoint}' failed: {str(e) or type(e).__name__}",
                endpoint=endpoint,
            ) from e

    @staticmethod
    async def _read_error_message(response: aiohttp.ClientResponse) -> str:
        """Pulls `error.message` out of an API error body, if there is one."""
        try:
            body = await response.json(content_type=None)
        except (aiohttp.ClientError, ValueError):
            return response.reason or "Unknown error"
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return error["message"]
        return response.reason or "Unknown error"

    # Public API Methods
    async def search(self, query: str) -> List[SearchCandidate]:
        """Returns the first page of video results, in relevance order."""
        response = await self.api_call(
            "search", q=query, part="snippet", type="video"
        )

        candidates = []
        for item in response.get("items") or []:
            candidate = SearchCandidate.from_api_item(item)
            if candidate is None:
                log.debug(f"Skipping search item without a video id: {item!r:.80}")
                continue
            candidates.append(candidate)

        log.debug(f"Search for '{query}' returned {len(candidates)} candidates.")
        return candidates

    async def fetch_detail(self, video_id: str) -> Dict[str, Any]:
        """Returns the full snippet and contentDetails record of one video."""
        response = await self.api_call(
            "videos", id=video_id, part="snippet,contentDetails"
        )
        items = response.get("items") or []
        if not items or not isinstance(items[0], dict):
            raise ApiError(f"No video found with id '{video_id}'.", endpoint="videos")
        return items[0]
