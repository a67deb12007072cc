"""
Writes scraped Tunebat metadata as ID3 tags to downloaded MP3 files.
"""

import logging
import re
from pathlib import Path
from typing import Optional

import mutagen.id3 as id3
from mutagen.id3 import ID3NoHeaderError

from dj_automation.models.records import MetadataRecord

log = logging.getLogger(__name__)

_KEY_REGEX = re.compile(
    r"^\s*(?P<note>[A-Ga-g])\s*(?P<accidental>[#♯b♭]?)\s*(?P<mode>major|minor|maj|min|m)?\s*$",
    re.IGNORECASE,
)


def to_id3_key(key: str) -> Optional[str]:
    """
    Converts a key such as 'F♯ Minor' to the compact TKEY notation ('F#m').
    Returns None when the value cannot be parsed.
    """
    match = _KEY_REGEX.match(key or "")
    if not match:
        return None

    note = match.group("note").upper()
    accidental = {"♯": "#", "♭": "b"}.get(match.group("accidental"), match.group("accidental"))
    mode = (match.group("mode") or "").lower()
    suffix = "m" if mode in ("minor", "min", "m") else ""
    return f"{note}{accidental}{suffix}"


def to_bpm(bpm: str) -> Optional[str]:
    """Extracts a whole-number BPM from text such as '128' or '127.9 BPM'."""
    match = re.search(r"\d+(?:\.\d+)?", bpm or "")
    if not match:
        return None
    return str(round(float(match.group(0))))


class Tagger:
    """Writes DJ-relevant metadata tags to MP3 files."""

    def tag_file(self, file_path: Path, metadata: MetadataRecord) -> bool:
        try:
            self._tag_mp3(file_path, metadata)
            return True
        except Exception as e:
            log.error(
                f"Failed to tag file '{file_path.name}': {e}",
                exc_info=log.getEffectiveLevel() == logging.DEBUG,
            )
            return False

    def _tag_mp3(self, file_path: Path, metadata: MetadataRecord) -> None:
        try:
            audio = id3.ID3(file_path)
        except ID3NoHeaderError:
            audio = id3.ID3()

        if artist := metadata.get("artist"):
            audio.add(id3.TPE1(encoding=3, text=artist))
        if title := metadata.get("title"):
            audio.add(id3.TIT2(encoding=3, text=title))
        if bpm := to_bpm(metadata.get("bpm", "")):
            audio.add(id3.TBPM(encoding=3, text=bpm))
        if key := metadata.get("key"):
            audio.add(id3.TKEY(encoding=3, text=to_id3_key(key) or key))
        if camelot := metadata.get("camelotKey"):
            audio.add(id3.TXXX(encoding=3, desc="CAMELOT", text=camelot))
        if popularity := metadata.get("popularity"):
            audio.add(id3.TXXX(encoding=3, desc="POPULARITY", text=popularity))

        audio.save(file_path, v2_version=3)
        log.debug(f"Tagged '{file_path.name}' with {sorted(metadata)}")
