"""
Reporting for Test Runs

This package collects test outcomes from an execution engine and turns
them into console output, a persisted snapshot and a summary document.

Features:
    - Outcome collection keyed by "Group#case" identity
    - Pass / fail / error / skip classification
    - Compact and verbose console formats
    - Regression detection against the previous run
    - Summary document in minimal key-value markup

Usage:
    from tally.reporting import Outcome, Reporter

    reporter = Reporter(format="compact")
    reporter.start()

    reporter.record(Outcome(group="MathTest", name="test_adds"))
    reporter.record(Outcome(group="MathTest", name="test_divides", failed=True,
                            failure_message="expected 2, got 3"))

    summary = reporter.report()
    # R t2 d1ms p1 f1 e0 s0
    # F divides
"""

# Models
from .models import (
    Classification,
    Outcome,
    OutcomeStatus,
    RegressionDiff,
    RunSummary,
    Snapshot,
    SourceLocation,
    classify,
)

# Formatting
from .formatting import (
    CompactFormatter,
    VerboseFormatter,
    clean_message,
    format_duration,
    humanize,
)

# Regressions and persistence
from .regressions import analyze_regressions
from .persistence import (
    WriteResult,
    build_summary_document,
    load_snapshot,
    render_markup,
    save_snapshot,
    write_summary,
)

# Reporter
from .reporter import Reporter

__all__ = [
    # Models
    "Classification",
    "Outcome",
    "OutcomeStatus",
    "RegressionDiff",
    "RunSummary",
    "Snapshot",
    "SourceLocation",
    "classify",
    # Formatting
    "CompactFormatter",
    "VerboseFormatter",
    "clean_message",
    "format_duration",
    "humanize",
    # Regressions and persistence
    "analyze_regressions",
    "WriteResult",
    "build_summary_document",
    "load_snapshot",
    "render_markup",
    "save_snapshot",
    "write_summary",
    # Reporter
    "Reporter",
]
