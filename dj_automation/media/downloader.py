"""
Downloads a YouTube video's audio track with yt-dlp and converts it with ffmpeg.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from pathvalidate import sanitize_filename
from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError as YtDlpDownloadError

from dj_automation.exceptions import DownloadError
from dj_automation.models.records import MetadataRecord

from .tagger import Tagger

log = logging.getLogger(__name__)

_FORMAT_AUDIO = "bestaudio/best"


def build_output_stem(tags: Optional[MetadataRecord]) -> str:
    """
    File name (without extension) for the download: 'Artist - Title' when the
    metadata has both, otherwise yt-dlp's video title field.
    """
    if tags and tags.get("artist") and tags.get("title"):
        name = sanitize_filename(f"{tags['artist']} - {tags['title']}", platform="universal")
        if name:
            # '%' starts a field in yt-dlp output templates.
            return name.replace("%", "%%")
    return "%(title)s"


class AudioDownloader:
    """
    Download collaborator of the pipeline: takes a video URL and produces an
    audio file in the output directory.
    """

    def __init__(
        self,
        output_dir: Path,
        audio_format: str = "mp3",
        audio_quality: str = "320",
        tagger: Optional[Tagger] = None,
        ydl_factory: Callable[[Dict[str, Any]], Any] = YoutubeDL,
    ):
        """
        Args:
            output_dir: Directory the audio files are written to.
            audio_format: Target codec for ffmpeg's audio extraction.
            audio_quality: Bitrate in kbps (or a 0-10 VBR level) for the codec.
            tagger: Writes the scraped metadata to MP3 files when given.
            ydl_factory: Builds the YoutubeDL instance from an options dict.
        """
        self.output_dir = Path(output_dir).expanduser()
        self.audio_format = audio_format
        self.audio_quality = audio_quality
        self.tagger = tagger
        self._ydl_factory = ydl_factory

    def build_ydl_opts(self, tags: Optional[MetadataRecord] = None) -> Dict[str, Any]:
        return {
            "format": _FORMAT_AUDIO,
            "outtmpl": str(self.output_dir / f"{build_output_stem(tags)}.%(ext)s"),
            "noplaylist": True,
            "quiet": True,
            "no_warnings": True,
            "noprogress": True,
            "retries": 0,
            "postprocessors": [
                {
                    "key": "FFmpegExtractAudio",
                    "preferredcodec": self.audio_format,
                    "preferredquality": self.audio_quality,
                }
            ],
        }

    async def download_song(
        self, url: str, tags: Optional[MetadataRecord] = None
    ) -> Path:
        """
        Downloads `url` as audio and returns the path of the produced file.

        Raises:
            DownloadError: yt-dlp failed or no output file was produced.
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        opts = self.build_ydl_opts(tags)

        log.debug(f"Downloading {url} to {self.output_dir}")
        path = await asyncio.to_thread(self._download, url, opts)
        log.info(f"Saved [green]{path.name}[/green]")

        if self.tagger and tags and path.suffix.lower() == ".mp3":
            await asyncio.to_thread(self.tagger.tag_file, path, tags)

        return path

    def _download(self, url: str, opts: Dict[str, Any]) -> Path:
        try:
            with self._ydl_factory(opts) as ydl:
                info = ydl.extract_info(url, download=True)
                if not info:
                    raise DownloadError(f"yt-dlp returned no information for {url}.")
                path = self._resolve_output_path(ydl, info)
        except YtDlpDownloadError as e:
            raise DownloadError(f"Download of {url} failed: {e}") from e

        if not path.is_file():
            raise DownloadError(f"Expected output file '{path}' was not created.")
        return path

    def _resolve_output_path(self, ydl: Any, info: Dict[str, Any]) -> Path:
        """Finds the post-processed file yt-dlp wrote for `info`."""
        downloads = info.get("requested_downloads") or []
        if downloads and downloads[-1].get("filepath"):
            return Path(downloads[-1]["filepath"])
        return Path(ydl.prepare_filename(info)).with_suffix(f".{self.audio_format}")
