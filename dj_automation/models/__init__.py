"""
Data Models Layer.

This package contains the records passed between pipeline stages, the
pipeline outcome variants, run statistics, and the Pydantic configuration
model.
"""

from .config import AppConfig
from .outcome import Matched, NoMatch, PipelineOutcome, PipelineStage, SourceFailure
from .records import (
    FieldMap,
    MetadataRecord,
    NormalizedResult,
    SearchCandidate,
)
from .stats import RunStats

__all__ = [
    "AppConfig",
    "FieldMap",
    "Matched",
    "MetadataRecord",
    "NoMatch",
    "NormalizedResult",
    "PipelineOutcome",
    "PipelineStage",
    "RunStats",
    "SearchCandidate",
    "SourceFailure",
]
