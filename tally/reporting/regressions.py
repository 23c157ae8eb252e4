"""
Regression analysis between two run snapshots.
"""

from __future__ import annotations

from .formatting import identity_to_location
from .models import OutcomeStatus, RegressionDiff, Snapshot


PASS = OutcomeStatus.PASS.value
BROKEN = {OutcomeStatus.FAIL.value, OutcomeStatus.ERROR.value}


def analyze_regressions(previous: Snapshot, current: Snapshot) -> RegressionDiff:
    """
    Compare the current snapshot against the previous one.

    A test that passed before and now fails or errors is a new failure;
    one that failed or errored before and now passes is a fix. Skips on
    either side and tests without a previous status are ignored.

    Args:
        previous: Snapshot loaded from the last run
        current: Snapshot of this run

    Returns:
        RegressionDiff with ``name@Group`` entries in current-snapshot order
    """
    diff = RegressionDiff()
    for identity, status in current.items():
        before = previous.get(identity)
        if before is None:
            continue
        if before == PASS and status in BROKEN:
            diff.new_failures.append(identity_to_location(identity))
        elif before in BROKEN and status == PASS:
            diff.fixes.append(identity_to_location(identity))
    return diff
