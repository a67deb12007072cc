"""
The per-query pipeline: Tunebat metadata, YouTube search, match, download.
"""

import logging
from typing import Callable, Optional

from rich.markup import escape

from dj_automation.api.client import YouTubeAPIClient
from dj_automation.media.downloader import AudioDownloader
from dj_automation.models.outcome import Matched, NoMatch, PipelineOutcome, PipelineStage
from dj_automation.models.records import MetadataRecord
from dj_automation.scraping.tunebat import TunebatClient

from .matcher import ResultMatcher

log = logging.getLogger(__name__)

StageObserver = Callable[[PipelineStage, str], None]


def search_label(query: str, metadata: Optional[MetadataRecord]) -> str:
    """Human-facing name of what is being searched for."""
    if metadata and metadata.get("artist") and metadata.get("title"):
        return f"{metadata['artist']} - {metadata['title']}"
    return query


class PipelineOrchestrator:
    """
    Runs one query through every stage, strictly in sequence.

    Missing metadata only degrades the run; ApiError from the search client
    and any error from the downloader propagate to the caller unchanged.
    """

    def __init__(
        self,
        metadata_client: TunebatClient,
        search_client: YouTubeAPIClient,
        downloader: AudioDownloader,
        matcher: Optional[ResultMatcher] = None,
        fetch_details: bool = False,
    ):
        self.metadata_client = metadata_client
        self.search_client = search_client
        self.downloader = downloader
        self.matcher = matcher or ResultMatcher()
        self.fetch_details = fetch_details

    async def run(
        self, query: str, observer: Optional[StageObserver] = None
    ) -> PipelineOutcome:
        """
        Resolves `query` to a downloaded file.

        Args:
            query: Free-text search term, e.g. "curbi vertigo".
            observer: Called with (stage, label) on every state transition.

        Returns:
            Matched or NoMatch.

        Raises:
            ApiError: The search or detail request failed.
            DownloadError: The downloader could not produce the file.
        """

        def advance(stage: PipelineStage, label: str) -> None:
            log.debug(f"[{query}] -> {stage.value}")
            if observer:
                observer(stage, label)

        advance(PipelineStage.FETCHING_METADATA, query)
        metadata = await self.metadata_client.fetch_metadata(query)
        if metadata is None:
            log.warning(
                f"[yellow]No Tunebat data for '{escape(query)}'. "
                "Searching YouTube with the raw search term.[/yellow]"
            )
        else:
            log.info(f"Tunebat data for '{escape(query)}': {escape(str(metadata))}")

        label = search_label(query, metadata)
        advance(PipelineStage.SEARCHING_CANDIDATES, label)
        candidates = await self.search_client.search(query)

        advance(PipelineStage.MATCHING, label)
        result = self.matcher.select_best(candidates, metadata)
        if result is None:
            log.info(f"No result found on YouTube for '{escape(query)}'.")
            return NoMatch(query)

        if self.fetch_details:
            result.detail = await self.search_client.fetch_detail(result.id)

        log.info(
            f"Result found for {escape(result.decoded_name)}: {result.resource_url}"
        )

        advance(PipelineStage.DELEGATING, result.decoded_name)
        path = await self.downloader.download_song(
            result.resource_url, tags=result.metadata
        )

        advance(PipelineStage.DONE, result.decoded_name)
        return Matched(query, result, path)
