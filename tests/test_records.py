from __future__ import annotations

import pytest

from dj_automation.models.records import FieldMap, NormalizedResult, SearchCandidate
from fakes import search_item


def test_field_map_keeps_declaration_order() -> None:
    fields = FieldMap({"title": ".t", "artist": ".a", "bpm": ".b"})

    assert list(fields) == ["title", "artist", "bpm"]
    assert fields["artist"] == ".a"
    assert len(fields) == 3


def test_field_map_is_immutable_and_detached_from_its_source() -> None:
    source = {"title": ".t"}
    fields = FieldMap(source)
    source["artist"] = ".a"

    assert list(fields) == ["title"]
    with pytest.raises(AttributeError):
        fields._fields = {}
    with pytest.raises(TypeError):
        fields["artist"] = ".a"


@pytest.mark.parametrize("fields", [{}, {"title": ""}, {"title": "   "}, {"": ".t"}])
def test_field_map_rejects_empty_definitions(fields) -> None:
    with pytest.raises(ValueError):
        FieldMap(fields)


def test_candidate_from_api_item() -> None:
    item = search_item("abc123", "Curbi - Vertigo")

    result = SearchCandidate.from_api_item(item)

    assert result.id == "abc123"
    assert result.title == "Curbi - Vertigo"
    assert result.payload is item


def test_candidate_without_video_id_is_skipped() -> None:
    assert SearchCandidate.from_api_item({"id": {"kind": "youtube#channel"}}) is None
    assert SearchCandidate.from_api_item({}) is None


def test_decoded_name_unescapes_html_entities() -> None:
    result = NormalizedResult(
        id="x",
        display_name="Gorgon City &amp; Drama - Voodoo &#39;Remix&#39;",
        resource_url="https://www.youtube.com/watch?v=x",
        thumbnail_url=None,
        metadata=None,
    )

    assert result.decoded_name == "Gorgon City & Drama - Voodoo 'Remix'"
    assert result.duration is None
