"""
Tally - Test Run Reporter

This package turns a stream of test outcomes into compact console
summaries, a persisted results snapshot and a summary document, and
flags regressions against the previous run.

Subpackages:
    - reporting: Outcome collection, formatting, regressions and persistence
    - outcomes: Load recorded outcomes from YAML/JSON files

Usage:
    from tally import Outcome, Reporter, SourceLocation

    reporter = Reporter(format="verbose")
    reporter.start()

    reporter.record(Outcome(group="MathTest", name="test_adds"))
    reporter.record(Outcome(
        group="MathTest",
        name="test_divides",
        failed=True,
        failure_message="expected 2, got 3",
        location=SourceLocation("tests/test_math.py", 14),
    ))

    summary = reporter.report()
"""

__version__ = "0.1.0"

# Configuration
from .config import OutputFormat, ReporterConfig, resolve_config
from .errors import ConfigError, TallyError

# Re-export reporting for convenience
from .reporting import (
    # Models
    Classification,
    Outcome,
    OutcomeStatus,
    RegressionDiff,
    RunSummary,
    Snapshot,
    SourceLocation,
    classify,
    # Formatting
    clean_message,
    format_duration,
    humanize,
    # Regressions and persistence
    analyze_regressions,
    load_snapshot,
    render_markup,
    save_snapshot,
    write_summary,
    # Reporter
    Reporter,
)

# Re-export outcome files for convenience
from .outcomes import (
    ValidationError,
    ValidationResult,
    load_outcomes,
    parse_outcomes_yaml,
)

__all__ = [
    # Package info
    "__version__",
    # Configuration
    "OutputFormat",
    "ReporterConfig",
    "resolve_config",
    # Errors
    "ConfigError",
    "TallyError",
    # Reporting - Models
    "Classification",
    "Outcome",
    "OutcomeStatus",
    "RegressionDiff",
    "RunSummary",
    "Snapshot",
    "SourceLocation",
    "classify",
    # Reporting - Formatting
    "clean_message",
    "format_duration",
    "humanize",
    # Reporting - Regressions and persistence
    "analyze_regressions",
    "load_snapshot",
    "render_markup",
    "save_snapshot",
    "write_summary",
    # Reporting - Reporter
    "Reporter",
    # Outcome files
    "ValidationError",
    "ValidationResult",
    "load_outcomes",
    "parse_outcomes_yaml",
]
