"""
Client for song metadata (key, BPM, Camelot key, popularity) from tunebat.com.
"""

import logging
from typing import Optional

from dj_automation.models.records import FieldMap, MetadataRecord

from .browser import BrowserSessionManager

log = logging.getLogger(__name__)

TUNEBAT_FIELDS = FieldMap(
    {
        "artist": ".ant-typography-ellipsis._2zAVA",
        "title": ".ant-typography-ellipsis-multiple-line.aZDDf",
        "key": ".k43JJ:nth-child(1) .lAjUd",
        "bpm": ".k43JJ:nth-child(2) .lAjUd",
        "camelotKey": ".k43JJ:nth-child(3) .lAjUd",
        "popularity": ".k43JJ:nth-child(4) .lAjUd",
    }
)


class TunebatClient:
    """Scrapes the top Tunebat search result for a query."""

    def __init__(
        self,
        base_url: str,
        session_manager: BrowserSessionManager,
        field_map: FieldMap = TUNEBAT_FIELDS,
    ):
        self.base_url = base_url
        self.session_manager = session_manager
        self.field_map = field_map

    async def fetch_metadata(self, query: str) -> Optional[MetadataRecord]:
        log.debug(f"Fetching Tunebat metadata for '{query}'")
        return await self.session_manager.acquire_and_scrape(
            self.base_url, self.field_map, query
        )
