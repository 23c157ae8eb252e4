"""
Pytest integration.

Feeds every collected test's outcome into a Reporter and prints the
compact or verbose summary at the end of the session. The plugin is
installed through the ``pytest11`` entry point but stays inactive
unless ``--tally`` or ``--tally-format`` is given:

    pytest --tally
    pytest --tally-format=verbose --tally-results=.cache/results.json
"""

from __future__ import annotations

import logging
from typing import Any

import pytest

from .reporting import Outcome, Reporter, SourceLocation

logger = logging.getLogger(__name__)

PLUGIN_NAME = "tally-reporter"

# Exceptions that mean "the test failed", as opposed to "the test broke"
FAILURE_EXCEPTIONS = (
    AssertionError,
    pytest.fail.Exception,
    pytest.skip.Exception,
    pytest.xfail.Exception,
)


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("tally", "compact test run reporting")
    group.addoption(
        "--tally", action="store_true", default=False,
        help="Report results with tally (compact format unless TALLY_FORMAT says otherwise)",
    )
    group.addoption(
        "--tally-format", default=None, metavar="FORMAT",
        help="Console format: compact or verbose (enables tally)",
    )
    group.addoption(
        "--tally-results", default=None, metavar="PATH",
        help="Snapshot file used for regression tracking",
    )
    group.addoption(
        "--tally-report", default=None, metavar="PATH",
        help="Summary document file",
    )
    group.addoption(
        "--tally-no-regressions", action="store_true", default=False,
        help="Don't compare against the previous run",
    )
    group.addoption(
        "--tally-no-write", action="store_true", default=False,
        help="Don't write the snapshot or summary files",
    )


def pytest_configure(config: pytest.Config) -> None:
    if not (config.getoption("tally") or config.getoption("tally_format")):
        return
    reporter = Reporter(
        format=config.getoption("tally_format"),
        results_file=config.getoption("tally_results"),
        report_file=config.getoption("tally_report"),
        track_regressions=not config.getoption("tally_no_regressions"),
        write_reports=not config.getoption("tally_no_write"),
    )
    config.pluginmanager.register(TallyPlugin(reporter), PLUGIN_NAME)


def split_nodeid(nodeid: str) -> tuple[str, str]:
    """
    Split a pytest node id into (group, name).

    Example:
        split_nodeid("tests/test_math.py::TestAdd::test_ints")
        # ("tests/test_math.py::TestAdd", "test_ints")
    """
    group, sep, name = nodeid.rpartition("::")
    if not sep:
        return "", nodeid
    return group, name


def location_from_report(report: pytest.TestReport) -> SourceLocation | None:
    """Location from ``report.location``; pytest line numbers are 0-based."""
    try:
        path, lineno, _ = report.location
    except (TypeError, ValueError):
        return None
    if not path or lineno is None:
        return None
    return SourceLocation(path=str(path), line=int(lineno) + 1)


def _failure_message(report: pytest.TestReport) -> str | None:
    longrepr = report.longrepr
    if longrepr is None:
        return None
    # Skips carry a (path, lineno, "Skipped: reason") tuple
    if isinstance(longrepr, tuple) and len(longrepr) == 3:
        return str(longrepr[2])
    crash = getattr(longrepr, "reprcrash", None)
    if crash is not None and getattr(crash, "message", None):
        return crash.message
    return report.longreprtext


class TallyPlugin:
    """Translates pytest phase reports into Outcomes."""

    def __init__(self, reporter: Reporter):
        self.reporter = reporter
        self._pending: dict[str, Outcome] = {}
        self._broken: set[str] = set()

    def pytest_sessionstart(self, session: pytest.Session) -> None:
        self.reporter.start()

    def pytest_runtest_makereport(self, item: pytest.Item, call: pytest.CallInfo[Any]) -> None:
        # Only inspects the exception; the report itself is built by pytest
        if call.when == "call" and call.excinfo is not None:
            if not call.excinfo.errisinstance(FAILURE_EXCEPTIONS):
                self._broken.add(item.nodeid)

    def pytest_runtest_logreport(self, report: pytest.TestReport) -> None:
        outcome = self._pending.get(report.nodeid)
        if outcome is None:
            group, name = split_nodeid(report.nodeid)
            outcome = Outcome(group=group, name=name, location=location_from_report(report))
            self._pending[report.nodeid] = outcome

        if report.when == "call":
            outcome.duration = report.duration

        if report.skipped:
            outcome.skipped = True
            wasxfail = getattr(report, "wasxfail", None)
            if wasxfail is not None:
                outcome.failure_message = f"xfail: {wasxfail}" if wasxfail else "xfail"
            else:
                outcome.failure_message = _failure_message(report)
        elif report.failed:
            if report.when == "call" and report.nodeid not in self._broken:
                outcome.failed = True
            else:
                outcome.errored = True
            if outcome.failure_message is None:
                outcome.failure_message = _failure_message(report)

        if report.when == "teardown":
            self._record(report.nodeid)

    def pytest_terminal_summary(self, terminalreporter: Any) -> None:
        for nodeid in list(self._pending):
            self._record(nodeid)

        summary = self.reporter.summarize()
        terminalreporter.write_line("")
        for line in self.reporter.render(summary):
            terminalreporter.write_line(line)
        self.reporter.persist(summary)

    def _record(self, nodeid: str) -> None:
        outcome = self._pending.pop(nodeid)
        self._broken.discard(nodeid)
        logger.debug(f"{outcome.identity}: {outcome.status.value}")
        self.reporter.record(outcome)
