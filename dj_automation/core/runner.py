"""
Runs several queries through the pipeline, one at a time, isolating failures.
"""

import logging
from typing import Iterable, List, Optional

from rich.markup import escape

from dj_automation.models.outcome import PipelineOutcome, PipelineStage, SourceFailure
from dj_automation.models.stats import RunStats

from .pipeline import PipelineOrchestrator, StageObserver

log = logging.getLogger(__name__)


class QueryRunner:
    """
    Feeds queries to the orchestrator sequentially. The browser session is not
    built for concurrent reuse, so queries never overlap.
    """

    def __init__(
        self, orchestrator: PipelineOrchestrator, stats: Optional[RunStats] = None
    ):
        self.orchestrator = orchestrator
        self.stats = stats or RunStats()

    async def run_all(
        self, queries: Iterable[str], observer: Optional[StageObserver] = None
    ) -> List[PipelineOutcome]:
        raw = [q.strip() for q in queries if q and q.strip()]
        unique = list(dict.fromkeys(raw))
        if len(unique) < len(raw):
            self.stats.duplicates_skipped += len(raw) - len(unique)
            log.info(f"Removed {len(raw) - len(unique)} duplicate search terms.")

        outcomes = []
        for query in unique:
            outcome = await self.run_one(query, observer)
            outcomes.append(outcome)
        return outcomes

    async def run_one(
        self, query: str, observer: Optional[StageObserver] = None
    ) -> PipelineOutcome:
        """Runs a single query; a fatal error becomes a SourceFailure."""
        last_stage = PipelineStage.IDLE

        def track(stage: PipelineStage, label: str) -> None:
            nonlocal last_stage
            last_stage = stage
            if observer:
                observer(stage, label)

        self.stats.queries_total += 1
        try:
            outcome = await self.orchestrator.run(query, observer=track)
        except Exception as e:
            log.error(
                f"[red]✗ '{escape(query)}' failed while {last_stage.value}: "
                f"{escape(str(e))}[/red]"
            )
            log.debug("Full traceback:", exc_info=True)
            outcome = SourceFailure(query, last_stage, str(e) or type(e).__name__)

        self.stats.record(outcome)
        return outcome
