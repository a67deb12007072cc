"""Hand-written stand-ins for the browser, HTTP session and pipeline collaborators."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from dj_automation.models.records import SearchCandidate


# --- Playwright ---------------------------------------------------------------


class FakeElement:
    def __init__(self, text: str) -> None:
        self.text = text

    async def inner_text(self) -> str:
        return self.text


class FakePage:
    def __init__(
        self,
        elements: dict[str, str | list[str]] | None = None,
        *,
        closed_after_goto: bool = False,
        goto_error: Exception | None = None,
    ) -> None:
        self.elements = elements or {}
        self.closed_after_goto = closed_after_goto
        self.goto_error = goto_error
        self.visited: list[str] = []
        self.load_states: list[str] = []
        self.queried: list[str] = []
        self.default_timeout: float | None = None
        self._closed = False

    def set_default_timeout(self, timeout: float) -> None:
        self.default_timeout = timeout

    async def goto(self, url: str) -> None:
        self.visited.append(url)
        if self.goto_error:
            raise self.goto_error
        if self.closed_after_goto:
            self._closed = True

    def is_closed(self) -> bool:
        return self._closed

    async def wait_for_load_state(self, state: str) -> None:
        self.load_states.append(state)

    async def query_selector_all(self, selector: str) -> list[FakeElement]:
        self.queried.append(selector)
        found = self.elements.get(selector, [])
        texts = [found] if isinstance(found, str) else found
        return [FakeElement(text) for text in texts]


class FakeContext:
    def __init__(self, page: FakePage) -> None:
        self.page = page

    async def new_page(self) -> FakePage:
        return self.page


class FakeBrowser:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.close_calls = 0
        self.user_agents: list[str] = []

    async def new_context(self, user_agent: str) -> FakeContext:
        self.user_agents.append(user_agent)
        return FakeContext(self.page)

    async def close(self) -> None:
        self.close_calls += 1


class FakeChromium:
    def __init__(self, browser: FakeBrowser, launch_error: Exception | None = None) -> None:
        self.browser = browser
        self.launch_error = launch_error
        self.launch_kwargs: list[dict[str, Any]] = []

    async def launch(self, **kwargs: Any) -> FakeBrowser:
        self.launch_kwargs.append(kwargs)
        if self.launch_error:
            raise self.launch_error
        return self.browser


class FakePlaywright:
    def __init__(self, chromium: FakeChromium) -> None:
        self.chromium = chromium
        self.stopped = False


def playwright_factory(playwright: FakePlaywright):
    @asynccontextmanager
    async def _factory():
        try:
            yield playwright
        finally:
            playwright.stopped = True

    return _factory


# --- aiohttp ------------------------------------------------------------------


class FakeResponse:
    def __init__(self, status: int = 200, body: Any = None, reason: str = "OK") -> None:
        self.status = status
        self.body = body
        self.reason = reason

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def json(self, content_type: str | None = "application/json") -> Any:
        if isinstance(self.body, Exception):
            raise self.body
        return self.body


class FakeSession:
    def __init__(self, *responses: FakeResponse | Exception) -> None:
        self.responses = list(responses)
        self.requests: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    def get(self, url: str, params: dict[str, Any] | None = None) -> FakeResponse:
        self.requests.append((url, dict(params or {})))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True


def search_item(video_id: str, title: str = "Some Video") -> dict[str, Any]:
    return {
        "kind": "youtube#searchResult",
        "id": {"kind": "youtube#video", "videoId": video_id},
        "snippet": {
            "title": title,
            "thumbnails": {"default": {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg"}},
        },
    }


# --- Pipeline collaborators ---------------------------------------------------


class FakeMetadataClient:
    def __init__(self, record: dict[str, str] | None) -> None:
        self.record = record
        self.queries: list[str] = []

    async def fetch_metadata(self, query: str) -> dict[str, str] | None:
        self.queries.append(query)
        return self.record


class FakeSearchClient:
    def __init__(
        self,
        candidates: list[SearchCandidate] | None = None,
        error: Exception | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        self.candidates = candidates or []
        self.error = error
        self.detail = detail or {}
        self.queries: list[str] = []
        self.detail_ids: list[str] = []

    async def search(self, query: str) -> list[SearchCandidate]:
        self.queries.append(query)
        if self.error:
            raise self.error
        return list(self.candidates)

    async def fetch_detail(self, video_id: str) -> dict[str, Any]:
        self.detail_ids.append(video_id)
        return self.detail


class FakeDownloader:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, dict[str, str] | None]] = []

    async def download_song(self, url: str, tags: dict[str, str] | None = None) -> Path:
        self.calls.append((url, tags))
        if self.error:
            raise self.error
        return Path("/music") / f"{url.rsplit('=', 1)[-1]}.mp3"


def candidate(video_id: str, title: str = "Some Video") -> SearchCandidate:
    return SearchCandidate.from_api_item(search_item(video_id, title))
