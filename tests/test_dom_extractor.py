from __future__ import annotations

import asyncio
import logging

import pytest

from dj_automation.models.records import FieldMap
from dj_automation.scraping.extractor import DomExtractor
from fakes import FakePage


@pytest.mark.parametrize(
    "fields",
    [
        {"artist": ".a"},
        {"artist": ".a", "title": ".t"},
        {"artist": ".a", "title": ".t", "key": ".k", "bpm": ".b", "camelotKey": ".c", "popularity": ".p"},
    ],
)
def test_extract_returns_one_trimmed_value_per_field(fields: dict[str, str]) -> None:
    page = FakePage({selector: f"  value for {name}\n" for name, selector in fields.items()})

    record = asyncio.run(DomExtractor().extract(page, FieldMap(fields), "curbi vertigo"))

    assert record is not None
    assert len(record) == len(fields)
    assert list(record) == list(fields)
    for name in fields:
        assert record[name] == f"value for {name}"


def test_extract_does_not_normalize_case_or_punctuation() -> None:
    page = FakePage({".t": "  Vertigo (Extended Mix)!  "})

    record = asyncio.run(DomExtractor().extract(page, FieldMap({"title": ".t"}), "q"))

    assert record == {"title": "Vertigo (Extended Mix)!"}


def test_missing_field_discards_the_whole_record(caplog) -> None:
    page = FakePage({".a": "Curbi", ".t": "Vertigo"})
    field_map = FieldMap({"artist": ".a", "bpm": ".missing", "title": ".t"})

    with caplog.at_level(logging.WARNING, logger="dj_automation"):
        record = asyncio.run(DomExtractor().extract(page, field_map, "curbi vertigo"))

    assert record is None
    # Stops at the first missing field.
    assert page.queried == [".a", ".missing"]
    assert "'bpm'" in caplog.text
    assert "curbi vertigo" in caplog.text


def test_missing_last_field_still_returns_none() -> None:
    page = FakePage({".a": "Curbi"})

    record = asyncio.run(
        DomExtractor().extract(page, FieldMap({"artist": ".a", "title": ".t"}), "q")
    )

    assert record is None


def test_several_matches_use_the_first_and_are_logged(caplog) -> None:
    page = FakePage({".bpm": ["126", "124", "128"]})

    with caplog.at_level(logging.DEBUG, logger="dj_automation"):
        record = asyncio.run(DomExtractor().extract(page, FieldMap({"bpm": ".bpm"}), "curbi vertigo"))

    assert record == {"bpm": "126"}
    assert "matched 3 elements" in caplog.text


def test_single_match_is_not_reported(caplog) -> None:
    page = FakePage({".bpm": "126"})

    with caplog.at_level(logging.DEBUG, logger="dj_automation"):
        asyncio.run(DomExtractor().extract(page, FieldMap({"bpm": ".bpm"}), "q"))

    assert "matched" not in caplog.text
