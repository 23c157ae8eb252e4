"""Tests for the Reporter lifecycle: start, record, report."""

import io
import json
import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from tally.config import OutputFormat, ReporterConfig
from tally.errors import ConfigError
from tally.reporting import Outcome, Reporter, SourceLocation
from tally.reporting.formatting import CompactFormatter, VerboseFormatter


def ok(name: str = "test_ok") -> Outcome:
    return Outcome(group="SampleTest", name=name)


def bad(name: str = "test_bad", message: str = "boom") -> Outcome:
    return Outcome(group="SampleTest", name=name, failed=True, failure_message=message)


class TestRecord:

    def test_records_status_per_identity(self, make_reporter: Callable[..., Reporter]) -> None:
        reporter = make_reporter()

        reporter.record(ok())
        reporter.record(bad())

        assert reporter.current == {"SampleTest#test_ok": "pass", "SampleTest#test_bad": "fail"}

    def test_duplicate_identity_last_write_wins(
        self, make_reporter: Callable[..., Reporter]
    ) -> None:
        reporter = make_reporter()

        reporter.record(bad("test_flaky"))
        reporter.record(ok("test_flaky"))

        assert reporter.current == {"SampleTest#test_flaky": "pass"}
        assert len(reporter.outcomes) == 1
        assert reporter.summarize().classification.total == 1


class TestReport:

    def test_compact_output(
        self, make_reporter: Callable[..., Reporter], output: io.StringIO
    ) -> None:
        reporter = make_reporter()
        reporter.start()
        reporter.record(ok())
        reporter.record(Outcome(
            group="SampleTest", name="test_bad", failed=True, failure_message="boom",
            location=SourceLocation("tests/test_sample.py", 12),
        ))

        summary = reporter.report()

        assert output.getvalue().splitlines() == [
            "R t2 d250ms p1 f1 e0 s0",
            "F test_sample.py:12 bad",
        ]
        assert summary.failed

    def test_verbose_output(
        self, make_reporter: Callable[..., Reporter], output: io.StringIO
    ) -> None:
        reporter = make_reporter(format="VERBOSE")
        reporter.start()
        reporter.record(ok())

        reporter.report()

        assert "🏃 1 tests (250ms)" in output.getvalue()
        assert "✅ 1" in output.getvalue()

    def test_empty_run(
        self, make_reporter: Callable[..., Reporter], output: io.StringIO
    ) -> None:
        summary = make_reporter().report()

        assert output.getvalue().splitlines() == ["R t0 d0 p0 f0 e0 s0"]
        assert summary.classification.total == 0
        assert not summary.failed

    def test_brackets_in_names_are_printed_verbatim(
        self, make_reporter: Callable[..., Reporter], output: io.StringIO
    ) -> None:
        reporter = make_reporter()
        reporter.record(bad("test_param[red]"))

        reporter.report()

        assert "F param[red]" in output.getvalue().splitlines()

    def test_writes_snapshot_and_summary(
        self,
        make_reporter: Callable[..., Reporter],
        results_file: Path,
        report_file: Path,
    ) -> None:
        reporter = make_reporter()
        reporter.start()
        reporter.record(ok())
        reporter.record(bad())

        reporter.report()

        stored = json.loads(results_file.read_text())
        assert stored["SampleTest#test_ok"] == "pass"
        assert stored["SampleTest#test_bad"] == "fail"

        contents = report_file.read_text()
        assert "[summary]" in contents
        assert "tests = 2" in contents
        assert "failures = 1" in contents
        assert "time_s = 0.25" in contents
        assert "[regressions]" not in contents

    def test_write_reports_disabled(
        self,
        make_reporter: Callable[..., Reporter],
        results_file: Path,
        report_file: Path,
    ) -> None:
        reporter = make_reporter(write_reports=False)
        reporter.record(ok())

        reporter.report()

        assert not results_file.exists()
        assert not report_file.exists()

    def test_report_twice_is_safe(
        self, make_reporter: Callable[..., Reporter], output: io.StringIO
    ) -> None:
        reporter = make_reporter()
        reporter.record(bad())

        first = reporter.report()
        second = reporter.report()

        assert first.classification.total == second.classification.total == 1
        assert second.regressions is None

    def test_unwritable_paths_do_not_raise(
        self,
        make_reporter: Callable[..., Reporter],
        output: io.StringIO,
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        reporter = make_reporter(
            results_file=blocker / "results.json",
            report_file=blocker / "report.toml",
            debug=True,
        )
        reporter.record(ok())

        with caplog.at_level(logging.WARNING, logger="tally"):
            reporter.report()

        assert output.getvalue().startswith("R t1 ")
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 2
        assert "Could not write" in warnings[0].getMessage()

    def test_write_failures_are_quiet_without_debug(
        self,
        make_reporter: Callable[..., Reporter],
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        reporter = make_reporter(results_file=blocker / "results.json")

        with caplog.at_level(logging.WARNING, logger="tally"):
            reporter.report()

        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_one_failed_write_does_not_stop_the_other(
        self,
        make_reporter: Callable[..., Reporter],
        tmp_path: Path,
        report_file: Path,
    ) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        reporter = make_reporter(results_file=blocker / "results.json")
        reporter.record(ok())

        reporter.report()

        assert "tests = 1" in report_file.read_text()


class TestRegressionTracking:

    def test_round_trip_with_same_statuses_has_no_regressions(
        self,
        make_reporter: Callable[..., Reporter],
        output: io.StringIO,
        report_file: Path,
    ) -> None:
        first = make_reporter()
        first.record(ok())
        first.record(bad())
        first.report()

        second = make_reporter()
        second.record(ok())
        second.record(bad())
        summary = second.report()

        assert summary.regressions is not None
        assert summary.regressions.is_empty
        assert not any(line.startswith("REG") for line in output.getvalue().splitlines())
        assert "[regressions]\nnew_failures = []\nfixes = []" in report_file.read_text()

    def test_reports_new_failures_and_fixes(
        self,
        make_reporter: Callable[..., Reporter],
        output: io.StringIO,
        results_file: Path,
        report_file: Path,
    ) -> None:
        results_file.parent.mkdir(parents=True)
        results_file.write_text(json.dumps({"A#test_a": "pass", "B#test_b": "fail"}))

        reporter = make_reporter()
        reporter.record(Outcome(group="A", name="test_a", failed=True))
        reporter.record(Outcome(group="B", name="test_b"))
        summary = reporter.report()

        assert summary.regressions.new_failures == ["a@A"]
        assert summary.regressions.fixes == ["b@B"]
        assert "REG +1 -1" in output.getvalue().splitlines()
        contents = report_file.read_text()
        assert 'new_failures = ["a@A"]' in contents
        assert 'fixes = ["b@B"]' in contents

    def test_previous_snapshot_is_fixed_at_construction(
        self, make_reporter: Callable[..., Reporter], results_file: Path
    ) -> None:
        results_file.parent.mkdir(parents=True)
        results_file.write_text(json.dumps({"SampleTest#test_ok": "pass"}))
        reporter = make_reporter()
        reporter.record(Outcome(group="SampleTest", name="test_ok", errored=True))

        first = reporter.report()
        second = reporter.report()

        assert reporter.previous == {"SampleTest#test_ok": "pass"}
        assert first.regressions.new_failures == second.regressions.new_failures == ["ok@SampleTest"]

    def test_tracking_disabled_ignores_previous_snapshot(
        self, make_reporter: Callable[..., Reporter], results_file: Path
    ) -> None:
        results_file.parent.mkdir(parents=True)
        results_file.write_text(json.dumps({"SampleTest#test_ok": "fail"}))

        reporter = make_reporter(track_regressions=False)
        reporter.record(ok())

        assert reporter.previous == {}
        assert reporter.report().regressions is None

    def test_missing_previous_snapshot(
        self, make_reporter: Callable[..., Reporter], report_file: Path
    ) -> None:
        reporter = make_reporter()
        reporter.record(ok())

        summary = reporter.report()

        assert reporter.previous == {}
        assert summary.regressions is None
        assert "[regressions]" not in report_file.read_text()


class TestConstruction:

    def test_formatter_follows_config(self, console) -> None:
        quiet = {"track_regressions": False, "write_reports": False}
        compact = Reporter(ReporterConfig(**quiet), console=console)
        verbose = Reporter(ReporterConfig(format=OutputFormat.VERBOSE, **quiet), console=console)

        assert isinstance(compact.formatter, CompactFormatter)
        assert isinstance(verbose.formatter, VerboseFormatter)

    def test_format_from_environment(self, console, tmp_path: Path) -> None:
        reporter = Reporter(
            console=console,
            environ={"TALLY_FORMAT": "verbose", "TALLY_RESULTS": str(tmp_path / "r.json")},
        )

        assert reporter.config.format == OutputFormat.VERBOSE
        assert reporter.config.results_file == tmp_path / "r.json"

    def test_elapsed_without_start(self, make_reporter: Callable[..., Reporter]) -> None:
        assert make_reporter().elapsed() is None

    def test_elapsed_uses_injected_clock(
        self, make_reporter: Callable[..., Reporter], fake_clock
    ) -> None:
        reporter = make_reporter(clock=fake_clock(100.0, 175.0))
        reporter.start()
        assert reporter.elapsed() == 75.0

    def test_unknown_option_fails_at_construction(self, console) -> None:
        with pytest.raises(ConfigError, match="colour"):
            Reporter(console=console, environ={}, colour="red")
