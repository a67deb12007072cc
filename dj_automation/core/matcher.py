"""
Turns raw search candidates into normalized results and picks the match.
"""

from typing import List, Optional, Sequence

from dj_automation.models.records import (
    YOUTUBE_WATCH_URL,
    MetadataRecord,
    NormalizedResult,
    SearchCandidate,
)


class ResultMatcher:
    """
    Selects candidates by the platform's own relevance order. No scoring is
    layered on top: the first search result is the match.
    """

    @staticmethod
    def normalize(
        candidate: SearchCandidate, metadata: Optional[MetadataRecord]
    ) -> NormalizedResult:
        return NormalizedResult(
            id=candidate.id,
            display_name=candidate.title,
            resource_url=f"{YOUTUBE_WATCH_URL}{candidate.id}",
            thumbnail_url=candidate.thumbnail_url,
            metadata=metadata,
        )

    def select_best(
        self,
        candidates: Sequence[SearchCandidate],
        metadata: Optional[MetadataRecord],
    ) -> Optional[NormalizedResult]:
        """Returns the first candidate normalized, or None if there are none."""
        if not candidates:
            return None
        return self.normalize(candidates[0], metadata)

    def select_all(
        self,
        candidates: Sequence[SearchCandidate],
        metadata: Optional[MetadataRecord],
    ) -> List[NormalizedResult]:
        """
        Normalizes every candidate in order. All results share the same
        metadata object. An empty input gives an empty list.
        """
        return [self.normalize(candidate, metadata) for candidate in candidates]
