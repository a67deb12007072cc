from __future__ import annotations

import asyncio

from dj_automation.core.pipeline import PipelineOrchestrator
from dj_automation.core.runner import QueryRunner
from dj_automation.exceptions import ApiError, DownloadError
from dj_automation.models.outcome import Matched, NoMatch, PipelineStage, SourceFailure
from fakes import FakeDownloader, FakeMetadataClient, FakeSearchClient, candidate


class ScriptedSearchClient(FakeSearchClient):
    """Fails for the queries listed in `failing`, returns one candidate otherwise."""

    def __init__(self, failing: dict[str, Exception], empty: set[str] = frozenset()) -> None:
        super().__init__()
        self.failing = failing
        self.empty = empty

    async def search(self, query: str):
        self.queries.append(query)
        if query in self.failing:
            raise self.failing[query]
        if query in self.empty:
            return []
        return [candidate(query.replace(" ", "-"))]


def _runner(search, downloader=None) -> QueryRunner:
    orchestrator = PipelineOrchestrator(
        metadata_client=FakeMetadataClient(None),
        search_client=search,
        downloader=downloader or FakeDownloader(),
    )
    return QueryRunner(orchestrator)


def test_one_failing_query_does_not_stop_the_next() -> None:
    search = ScriptedSearchClient({"bad key": ApiError("API key not valid", endpoint="search", status=400)})
    downloader = FakeDownloader()
    runner = _runner(search, downloader)

    outcomes = asyncio.run(runner.run_all(["bad key", "gorgon city voodoo"]))

    assert outcomes[0] == SourceFailure("bad key", PipelineStage.SEARCHING_CANDIDATES, "API key not valid")
    assert isinstance(outcomes[1], Matched)
    assert search.queries == ["bad key", "gorgon city voodoo"]
    assert [url for url, _ in downloader.calls] == ["https://www.youtube.com/watch?v=gorgon-city-voodoo"]
    assert runner.stats.failed == 1
    assert runner.stats.matched == 1
    assert runner.stats.has_failures


def test_download_failure_is_reported_at_delegating_stage() -> None:
    runner = _runner(ScriptedSearchClient({}), FakeDownloader(error=DownloadError("ffmpeg not found")))

    outcomes = asyncio.run(runner.run_all(["curbi vertigo"]))

    assert outcomes == [SourceFailure("curbi vertigo", PipelineStage.DELEGATING, "ffmpeg not found")]


def test_no_match_is_counted_but_not_a_failure() -> None:
    runner = _runner(ScriptedSearchClient({}, empty={"obscure"}))

    outcomes = asyncio.run(runner.run_all(["obscure", "sonny fodera closer"]))

    assert outcomes[0] == NoMatch("obscure")
    assert isinstance(outcomes[1], Matched)
    assert runner.stats.no_match == 1
    assert not runner.stats.has_failures


def test_duplicate_and_blank_queries_are_dropped_in_order() -> None:
    search = ScriptedSearchClient({})
    runner = _runner(search)

    outcomes = asyncio.run(runner.run_all(["b", " a ", "", "b", "a", "   "]))

    assert search.queries == ["b", "a"]
    assert len(outcomes) == 2
    assert runner.stats.queries_total == 2
    assert runner.stats.duplicates_skipped == 2


def test_queries_run_strictly_one_after_another() -> None:
    events = []

    class TracingSearchClient(FakeSearchClient):
        async def search(self, query: str):
            events.append(("start", query))
            await asyncio.sleep(0)
            events.append(("end", query))
            return [candidate("x")]

    runner = _runner(TracingSearchClient())

    asyncio.run(runner.run_all(["one", "two"]))

    assert events == [("start", "one"), ("end", "one"), ("start", "two"), ("end", "two")]


def test_observer_is_forwarded() -> None:
    seen = []
    runner = _runner(ScriptedSearchClient({}))

    asyncio.run(runner.run_all(["curbi vertigo"], observer=lambda stage, label: seen.append(stage)))

    assert seen[0] == PipelineStage.FETCHING_METADATA
    assert seen[-1] == PipelineStage.DONE
