"""
Media Processing Layer.

This package is responsible for all media file operations: downloading and
converting the matched video's audio, and tagging the result.
"""

from .downloader import AudioDownloader
from .tagger import Tagger

__all__ = ["AudioDownloader", "Tagger"]
