"""
Record types passed between the pipeline stages.
"""

import html
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

# Field name -> trimmed text scraped for that field.
MetadataRecord = Dict[str, str]

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v="


class FieldMap(Mapping[str, str]):
    """
    Immutable, ordered mapping of field names to CSS selectors.

    Iteration follows insertion order, so extraction always visits fields in
    the order the caller declared them.
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, str]):
        items: Tuple[Tuple[str, str], ...] = tuple(fields.items())
        if not items:
            raise ValueError("A field map needs at least one field.")
        for name, selector in items:
            if not name or not selector or not selector.strip():
                raise ValueError(f"Field '{name}' has an empty selector.")
        object.__setattr__(self, "_fields", dict(items))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("FieldMap is immutable.")

    def __getitem__(self, name: str) -> str:
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"FieldMap({self._fields!r})"


@dataclass(frozen=True)
class SearchCandidate:
    """One raw search result, in the order the platform ranked it."""

    id: str
    title: str
    thumbnail_url: Optional[str]
    payload: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_api_item(cls, item: Any) -> Optional["SearchCandidate"]:
        """
        Builds a candidate from a `search` API item. Returns None for items
        that are not objects or carry no video id.
        """
        if not isinstance(item, dict):
            return None
        ident = item.get("id")
        video_id = ident.get("videoId") if isinstance(ident, dict) else None
        if not video_id:
            return None

        snippet = item.get("snippet") or {}
        thumbnail = (snippet.get("thumbnails") or {}).get("default") or {}
        return cls(
            id=video_id,
            title=snippet.get("title", ""),
            thumbnail_url=thumbnail.get("url"),
            payload=item,
        )


@dataclass
class NormalizedResult:
    """A matched candidate combined with the metadata scraped for its query."""

    id: str
    display_name: str
    resource_url: str
    thumbnail_url: Optional[str]
    metadata: Optional[MetadataRecord]
    detail: Optional[Dict[str, Any]] = field(default=None, repr=False)

    @property
    def decoded_name(self) -> str:
        """The title with HTML entities decoded, for display and logging."""
        return html.unescape(self.display_name)

    @property
    def duration(self) -> Optional[str]:
        """ISO 8601 duration from the detail record, if one was fetched."""
        if not self.detail:
            return None
        return self.detail.get("contentDetails", {}).get("duration")
