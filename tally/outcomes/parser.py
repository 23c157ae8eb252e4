"""
Outcome parser.

This module converts validated YAML data into typed Outcome records.
"""

from __future__ import annotations

from typing import Any

from ..reporting.models import Outcome, OutcomeStatus, SourceLocation


class OutcomeParser:
    """Parses and converts validated YAML to a list of Outcomes."""

    def __init__(self, data: dict[str, Any]):
        self.data = data

    def parse(self) -> list[Outcome]:
        """Convert validated data to typed Outcomes, in file order."""
        return [self._parse_outcome(entry) for entry in self.data["outcomes"]]

    def _parse_outcome(self, entry: dict[str, Any]) -> Outcome:
        common = {
            "failure_message": entry.get("message"),
            "location": self._parse_location(entry),
            "duration": entry.get("duration"),
        }

        if "status" in entry:
            return Outcome.from_status(
                entry["group"],
                entry["name"],
                OutcomeStatus(entry["status"]),
                **common,
            )

        return Outcome(
            group=entry["group"],
            name=entry["name"],
            skipped=entry.get("skipped", False),
            errored=entry.get("errored", False),
            failed=entry.get("failed", False),
            **common,
        )

    def _parse_location(self, entry: dict[str, Any]) -> SourceLocation | None:
        """Both file and line are needed for a usable location."""
        file = entry.get("file")
        line = entry.get("line")
        if file is None or line is None:
            return None
        return SourceLocation(path=file, line=line)
