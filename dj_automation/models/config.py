"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_YOUTUBE_BASE_URL = "https://www.googleapis.com/youtube/v3"
DEFAULT_TUNEBAT_BASE_URL = "https://tunebat.com/Search?q="
DEFAULT_OUTPUT_DIR = "~/Downloads"

SUPPORTED_AUDIO_FORMATS = ("mp3", "m4a", "opus", "wav", "flac")


class AppConfig(BaseModel):
    """A validated configuration model for the application."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # API & sources
    youtube_token: str = Field(default="", repr=False, validate_default=True)
    youtube_base_url: str = DEFAULT_YOUTUBE_BASE_URL
    tunebat_base_url: str = DEFAULT_TUNEBAT_BASE_URL

    # Download settings
    output_dir: str = DEFAULT_OUTPUT_DIR
    audio_format: str = "mp3"
    audio_quality: str = "320"
    write_tags: bool = True

    # Scraping & pipeline
    headless: bool = True
    navigation_timeout_ms: int = 30000
    fetch_details: bool = False

    @field_validator("youtube_token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        """The token is required for every search."""
        if not v:
            raise ValueError(
                "YouTube API token is not configured. Run 'dj-automation init "
                "<TOKEN>' or set YOUTUBE_TOKEN."
            )
        return v

    @field_validator("youtube_base_url", "tunebat_base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"'{v}' is not an http(s) URL.")
        return v

    @field_validator("youtube_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("audio_format")
    @classmethod
    def validate_audio_format(cls, v: str) -> str:
        v = v.lower()
        if v not in SUPPORTED_AUDIO_FORMATS:
            raise ValueError(
                f"Audio format must be one of {', '.join(SUPPORTED_AUDIO_FORMATS)}."
            )
        return v

    @field_validator("navigation_timeout_ms")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Ensures a reasonable navigation timeout."""
        if v < 1000 or v > 120000:
            raise ValueError("Navigation timeout must be between 1000 and 120000 ms.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        return set(cls.model_fields)
