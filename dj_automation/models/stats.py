"""
Dataclass for tracking the outcome counts of a run.
"""

import time
from dataclasses import dataclass, field

from .outcome import Matched, NoMatch, PipelineOutcome, SourceFailure


@dataclass
class RunStats:
    """Tracks statistics for one invocation over any number of queries."""

    queries_total: int = 0
    matched: int = 0
    no_match: int = 0
    failed: int = 0
    duplicates_skipped: int = 0
    _start_time: float = field(default_factory=time.monotonic, repr=False)

    def record(self, outcome: PipelineOutcome) -> None:
        """Counts a terminal outcome."""
        if isinstance(outcome, Matched):
            self.matched += 1
        elif isinstance(outcome, NoMatch):
            self.no_match += 1
        elif isinstance(outcome, SourceFailure):
            self.failed += 1

    @property
    def elapsed_seconds(self) -> float:
        return time.monotonic() - self._start_time

    @property
    def has_failures(self) -> bool:
        return self.failed > 0
