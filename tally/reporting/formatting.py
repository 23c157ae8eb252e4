"""
Console formatting for test run summaries.

Two output modes are supported:
    - compact: one terse, greppable line per category (R/REG/F/E/S prefixes)
    - verbose: multi-line, icon-decorated output with a detail block

Formatters only build lines; writing them is left to the Reporter.
"""

from __future__ import annotations

import math
import re

from .models import Outcome, RegressionDiff, RunSummary, split_identity


TEST_PREFIX = re.compile(r"^test[_ ]")
DIVIDER = "-" * 40


# ─────────────────────────────────────────────────────────────────────────────
# Text helpers
# ─────────────────────────────────────────────────────────────────────────────

def humanize(name: str | None) -> str:
    """
    Turn a test method name into a readable title.

    Example:
        humanize("test_the_title_renders")  # "the title renders"
    """
    return TEST_PREFIX.sub("", name or "", count=1).replace("_", " ")


def clean_message(message: str | None) -> str:
    """First line of a failure message, stripped."""
    if message is None:
        return "No message"
    lines = str(message).split("\n")
    first = lines[0].strip() if lines else ""
    return first or "Unknown error"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_duration(seconds: float | None) -> str:
    """
    Format elapsed seconds for display.

    Examples:
        0.0005 -> "<1ms", 0.5 -> "500ms", 1.2 -> "1.2s", 75 -> "1m15s"

    Remainder seconds are rounded independently of the minutes, so
    119.7 renders as "1m60s".
    """
    if not isinstance(seconds, (int, float)) or isinstance(seconds, bool):
        return "0"
    if seconds < 0.001:
        return "<1ms"
    if seconds < 1:
        return f"{_round_half_up(seconds * 1000)}ms"
    if seconds < 60:
        return f"{_round_half_up(seconds * 10) / 10:.1f}s"
    minutes = math.floor(seconds / 60)
    remainder = _round_half_up(seconds % 60)
    return f"{minutes}m{remainder}s"


def format_location(outcome: Outcome) -> str:
    """``file:line`` for the detail block."""
    if outcome.location is None:
        return "unknown location"
    return str(outcome.location)


def format_test_location(outcome: Outcome) -> str:
    """``name@file:line``, or just the name when no location is known."""
    title = humanize(outcome.name)
    if outcome.location is None:
        return title
    return f"{title}@{outcome.location}"


def format_test_location_compact(outcome: Outcome) -> str:
    """``file:line name``, or just the name when no location is known."""
    title = humanize(outcome.name)
    if outcome.location is None:
        return title
    return f"{outcome.location} {title}"


def identity_to_location(identity: str) -> str:
    """``name@Group`` for a snapshot identity, which carries no location."""
    group, name = split_identity(identity)
    return f"{humanize(name)}@{group}"


# ─────────────────────────────────────────────────────────────────────────────
# Formatters
# ─────────────────────────────────────────────────────────────────────────────

class CompactFormatter:
    """
    Terse, machine-parseable output.

    Example:
        R t3 d12ms p1 f1 e0 s1
        REG +1 -0
        F test_math.py:10 adds numbers
        S test_math.py:22 divides by zero
    """

    def render(self, summary: RunSummary) -> list[str]:
        c = summary.classification
        lines = [
            f"R t{c.total} d{format_duration(summary.duration)} "
            f"p{c.passes} f{len(c.failed)} e{len(c.errored)} s{len(c.skipped)}"
        ]

        regressions = summary.regressions
        if regressions is not None and not regressions.is_empty:
            lines.append(f"REG +{len(regressions.new_failures)} -{len(regressions.fixes)}")

        for prefix, outcomes in (("F", c.failed), ("E", c.errored), ("S", c.skipped)):
            lines.extend(f"{prefix} {format_test_location_compact(o)}" for o in outcomes)

        return lines


class VerboseFormatter:
    """Human-oriented output with icons and a failure detail block."""

    def render(self, summary: RunSummary) -> list[str]:
        c = summary.classification
        lines = ["", f"🏃 {c.total} tests ({format_duration(summary.duration)})"]

        if c.passes > 0:
            lines.append(f"✅ {c.passes}")

        if summary.regressions is not None:
            lines.extend(self._regression_lines(summary.regressions))

        if c.failed:
            failed = [format_test_location(o) for o in c.failed]
            lines.append(f"❌ {len(failed)} failed: {', '.join(failed)}")

        if c.errored:
            errored = [format_test_location(o) for o in c.errored]
            lines.append(f"💥 {len(errored)}: {', '.join(errored)}")

        if c.skipped:
            lines.append(f"⏭️  {len(c.skipped)} skipped:")
            for outcome in c.skipped:
                message = clean_message(outcome.failure_message)
                lines.append(f"    - {format_test_location(outcome)}: {message}")

        if c.has_problems:
            lines.extend(self._detail_lines(summary))

        return lines

    def _regression_lines(self, regressions: RegressionDiff) -> list[str]:
        lines = []
        if regressions.new_failures:
            lines.append(
                f"✅➡️❌ {len(regressions.new_failures)}: {', '.join(regressions.new_failures)}"
            )
        if regressions.fixes:
            lines.append(f"🎉 {len(regressions.fixes)}: {', '.join(regressions.fixes)}")
        return lines

    def _detail_lines(self, summary: RunSummary) -> list[str]:
        c = summary.classification
        lines = ["", "📋 Details:", DIVIDER]
        stanzas = [("❌", o) for o in c.failed] + [("💥", o) for o in c.errored]
        for icon, outcome in stanzas:
            lines.extend([
                f"{icon} {outcome.name}",
                f"   {format_location(outcome)}",
                f"   {clean_message(outcome.failure_message)}",
                "",
            ])
        return lines
