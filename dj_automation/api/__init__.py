"""
YouTube API Layer.

This package handles all communication with the YouTube Data API v3.
"""

from .client import YouTubeAPIClient

__all__ = ["YouTubeAPIClient"]
