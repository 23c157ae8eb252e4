"""
Reporter for collecting outcomes and producing end-of-run reports.

This module provides the Reporter class which an execution engine
drives through start() / record() / report().
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping

from rich.console import Console

from ..config import OutputFormat, ReporterConfig, resolve_config
from .formatting import CompactFormatter, VerboseFormatter
from .models import Outcome, RunSummary, Snapshot, classify
from .persistence import WriteResult, load_snapshot, save_snapshot, write_summary
from .regressions import analyze_regressions

logger = logging.getLogger(__name__)


class Reporter:
    """
    Collects test outcomes and reports on them at the end of a run.

    The previous snapshot is loaded once, at construction, and is never
    modified afterwards, so calling report() twice is redundant but safe.

    Example:
        from tally import Outcome, Reporter

        reporter = Reporter(format="verbose")
        reporter.start()

        reporter.record(Outcome(group="MathTest", name="test_adds"))
        reporter.record(Outcome(group="MathTest", name="test_divides",
                                failed=True, failure_message="expected 2, got 3"))

        summary = reporter.report()
        print(summary.failed)  # True
    """

    def __init__(
        self,
        config: ReporterConfig | None = None,
        *,
        console: Console | None = None,
        clock: Callable[[], float] = time.monotonic,
        environ: Mapping[str, str] | None = None,
        **options: Any,
    ):
        """
        Initialize the reporter.

        Args:
            config: Fully resolved configuration; built from ``options``
                and ``environ`` when omitted
            console: Where console output goes (stdout by default)
            clock: Monotonic time source in seconds
            environ: Environment snapshot used to resolve ``options``
            **options: Explicit options, see ReporterConfig
        """
        self.config = config if config is not None else resolve_config(options, environ)
        self.console = console if console is not None else Console()
        self.clock = clock
        self.formatter = (
            VerboseFormatter() if self.config.format == OutputFormat.VERBOSE else CompactFormatter()
        )

        self.previous: Snapshot = (
            load_snapshot(self.config.results_file) if self.config.track_regressions else {}
        )
        self.current: Snapshot = {}
        self._outcomes: dict[str, Outcome] = {}
        self._started_at: float | None = None

    @property
    def outcomes(self) -> list[Outcome]:
        """Recorded outcomes in recording order."""
        return list(self._outcomes.values())

    def start(self) -> None:
        """Mark the run as started."""
        self._started_at = self.clock()

    def record(self, outcome: Outcome) -> None:
        """Record one completed test. A repeated identity replaces the earlier entry."""
        identity = outcome.identity
        self._outcomes[identity] = outcome
        self.current[identity] = outcome.status.value

    def elapsed(self) -> float | None:
        """Seconds since start(), or None if the run was never started."""
        if self._started_at is None:
            return None
        return self.clock() - self._started_at

    def summarize(self) -> RunSummary:
        """Classify everything recorded so far, without printing or writing."""
        regressions = None
        if self.previous:
            regressions = analyze_regressions(self.previous, self.current)
        return RunSummary(
            classification=classify(self.outcomes),
            duration=self.elapsed(),
            regressions=regressions,
        )

    def report(self) -> RunSummary:
        """
        Print the summary and persist the snapshot and summary files.

        Returns:
            The RunSummary that was reported
        """
        summary = self.summarize()

        for line in self.render(summary):
            self.console.print(line, markup=False, highlight=False, emoji=False, soft_wrap=True)

        self.persist(summary)
        return summary

    def render(self, summary: RunSummary) -> list[str]:
        """Console lines for a summary in the configured format."""
        return self.formatter.render(summary)

    def persist(self, summary: RunSummary) -> list[WriteResult]:
        """
        Write the current snapshot and the summary document.

        The two writes are independent; a failure of one does not stop
        the other and neither raises.
        """
        if not self.config.write_reports:
            return []
        results = [
            save_snapshot(self.config.results_file, self.current),
            write_summary(self.config.report_file, summary),
        ]
        for result in results:
            self._check_write(result)
        return results

    def _check_write(self, result: WriteResult) -> None:
        if result.ok:
            return
        message = f"Could not write {result.path}: {result.error}"
        if self.config.debug:
            logger.warning(message)
        else:
            logger.debug(message)
