"""
Report data models for test runs.

This module defines the data structures for capturing test outcomes,
their classification at report time, and the summary document that
is persisted at the end of a run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


IDENTITY_SEPARATOR = "#"

# identity -> status string, e.g. {"SampleTest#test_ok": "pass"}
Snapshot = dict[str, str]


class OutcomeStatus(str, Enum):
    """Status of a single recorded test case."""
    PASS = "pass"
    FAIL = "fail"
    ERROR = "error"
    SKIP = "skip"


@dataclass(frozen=True)
class SourceLocation:
    """Where a test case is defined."""
    path: str
    line: int

    @property
    def filename(self) -> str:
        """Basename of the path, used for display."""
        return self.path.replace("\\", "/").rsplit("/", 1)[-1]

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}"


@dataclass
class Outcome:
    """
    Result of one test case as delivered by the execution engine.

    The status is derived from the flags with a fixed precedence:
    skip > error > fail > pass. A record with no failure indication
    is a pass.
    """
    group: str
    name: str
    skipped: bool = False
    errored: bool = False
    failed: bool = False
    failure_message: str | None = None
    location: SourceLocation | None = None
    duration: float | None = None  # seconds

    @property
    def identity(self) -> str:
        return f"{self.group or ''}{IDENTITY_SEPARATOR}{self.name or ''}"

    @property
    def status(self) -> OutcomeStatus:
        if self.skipped:
            return OutcomeStatus.SKIP
        if self.errored:
            return OutcomeStatus.ERROR
        if self.failed:
            return OutcomeStatus.FAIL
        return OutcomeStatus.PASS

    @classmethod
    def from_status(
        cls,
        group: str,
        name: str,
        status: OutcomeStatus | str,
        **kwargs: Any,
    ) -> Outcome:
        """Build an outcome from an explicit status instead of flags."""
        status = OutcomeStatus(status)
        return cls(
            group=group,
            name=name,
            skipped=status == OutcomeStatus.SKIP,
            errored=status == OutcomeStatus.ERROR,
            failed=status == OutcomeStatus.FAIL,
            **kwargs,
        )


@dataclass
class Classification:
    """Outcomes partitioned into four disjoint, ordered lists."""
    passed: list[Outcome] = field(default_factory=list)
    failed: list[Outcome] = field(default_factory=list)
    errored: list[Outcome] = field(default_factory=list)
    skipped: list[Outcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.passed) + len(self.failed) + len(self.errored) + len(self.skipped)

    @property
    def passes(self) -> int:
        return self.total - len(self.failed) - len(self.errored) - len(self.skipped)

    @property
    def has_problems(self) -> bool:
        """True when anything failed or errored."""
        return bool(self.failed or self.errored)


@dataclass
class RegressionDiff:
    """New failures and fixes relative to the previous run."""
    new_failures: list[str] = field(default_factory=list)
    fixes: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.new_failures and not self.fixes


@dataclass
class RunSummary:
    """
    Everything the reporter knows at the end of a run.

    ``regressions`` is None when there was no previous snapshot to
    compare against.
    """
    classification: Classification
    duration: float | None = None
    regressions: RegressionDiff | None = None

    @property
    def failed(self) -> bool:
        return self.classification.has_problems


def classify(outcomes: list[Outcome]) -> Classification:
    """Partition outcomes by status, preserving recording order."""
    result = Classification()
    buckets = {
        OutcomeStatus.PASS: result.passed,
        OutcomeStatus.FAIL: result.failed,
        OutcomeStatus.ERROR: result.errored,
        OutcomeStatus.SKIP: result.skipped,
    }
    for outcome in outcomes:
        buckets[outcome.status].append(outcome)
    return result


def split_identity(identity: str) -> tuple[str, str]:
    """Split ``Group#case`` into its parts. A missing separator yields an empty case."""
    group, _, name = identity.partition(IDENTITY_SEPARATOR)
    return group, name
