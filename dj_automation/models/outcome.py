"""
Terminal outcomes of a single pipeline run and the stages it moves through.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .records import NormalizedResult


class PipelineStage(Enum):
    """States of the per-query pipeline."""

    IDLE = "idle"
    FETCHING_METADATA = "fetching_metadata"
    SEARCHING_CANDIDATES = "searching_candidates"
    MATCHING = "matching"
    DELEGATING = "delegating"
    DONE = "done"


@dataclass(frozen=True)
class Matched:
    """A candidate was found and handed to the downloader."""

    query: str
    result: NormalizedResult
    path: Optional[Path] = None


@dataclass(frozen=True)
class NoMatch:
    """The search returned no usable candidates."""

    query: str


@dataclass(frozen=True)
class SourceFailure:
    """The pipeline aborted at `stage` for the given reason."""

    query: str
    stage: PipelineStage
    reason: str


PipelineOutcome = Union[Matched, NoMatch, SourceFailure]
