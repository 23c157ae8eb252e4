"""Shared fixtures for tally tests."""

import io
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

from tally.reporting import Reporter

TALLY_ENV_VARS = ("TALLY_FORMAT", "TALLY_RESULTS", "TALLY_REPORT", "DEBUG")


@pytest.fixture(autouse=True)
def clean_tally_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of reporter configuration."""
    for name in TALLY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class FakeClock:
    """Monotonic clock that returns scripted readings, repeating the last one."""

    def __init__(self, *readings: float):
        self.readings = list(readings) or [0.0]

    def __call__(self) -> float:
        if len(self.readings) > 1:
            return self.readings.pop(0)
        return self.readings[0]


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(output: io.StringIO) -> Console:
    return Console(file=output, width=200, color_system=None)


@pytest.fixture
def results_file(tmp_path: Path) -> Path:
    return tmp_path / "tmp" / "test_results.json"


@pytest.fixture
def report_file(tmp_path: Path) -> Path:
    return tmp_path / "tmp" / "test_report.toml"


@pytest.fixture
def make_reporter(
    console: Console, results_file: Path, report_file: Path
) -> Callable[..., Reporter]:
    """Build a Reporter writing into tmp_path and printing into ``output``."""

    def _make(**options: Any) -> Reporter:
        options.setdefault("results_file", results_file)
        options.setdefault("report_file", report_file)
        options.setdefault("clock", FakeClock(10.0, 10.25))
        return Reporter(console=console, environ={}, **options)

    return _make


@pytest.fixture
def fake_clock() -> type[FakeClock]:
    return FakeClock
