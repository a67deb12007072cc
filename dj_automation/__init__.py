"""
dj-automation: resolve a song search into a tagged audio file using Tunebat
metadata and YouTube search results.
"""

__version__ = "1.0.0"
