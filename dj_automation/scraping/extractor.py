"""
Extracts one text value per configured field from a rendered page.
"""

import logging
from typing import Optional

from playwright.async_api import Page

from dj_automation.models.records import FieldMap, MetadataRecord

log = logging.getLogger(__name__)


class DomExtractor:
    """
    Reads the inner text of the first element (in document order) matching
    each selector in a field map. Extraction is all-or-nothing: a single
    missing field discards the whole record.
    """

    async def extract(
        self, page: Page, field_map: FieldMap, query: str
    ) -> Optional[MetadataRecord]:
        record: MetadataRecord = {}

        for name, selector in field_map.items():
            elements = await page.query_selector_all(selector)
            if not elements:
                # Usually means the site layout changed.
                log.warning(
                    f"[yellow]No matching element for '{name}' in the result for "
                    f"'{query}' (selector: {selector}).[/yellow]"
                )
                return None
            if len(elements) > 1:
                log.debug(
                    f"Selector for '{name}' matched {len(elements)} elements on "
                    f"the page for '{query}', using the first."
                )

            text = await elements[0].inner_text()
            record[name] = text.strip()

        log.debug(f"Extracted {len(record)} fields for '{query}'.")
        return record
