"""
Schema validation for outcome files.

This module contains the validation logic that checks raw parsed YAML
against the outcome file schema and reports errors with helpful messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..reporting.models import OutcomeStatus


# ─────────────────────────────────────────────────────────────────────────────
# Validation Result Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ValidationError:
    """One problem in an outcome file, located by its path."""
    path: str  # e.g., "outcomes[0].name"
    message: str
    value: Any = None
    suggestion: str | None = None

    def __str__(self) -> str:
        lines = [f"❌ {self.path}: {self.message}"]
        if self.value is not None:
            lines.append(f"   Got: {self.value!r}")
        if self.suggestion:
            lines.append(f"   💡 {self.suggestion}")
        return "\n".join(lines)


@dataclass
class ValidationResult:
    """Problems found while checking an outcome file; valid when empty."""
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(
        self,
        path: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None
    ) -> None:
        self.errors.append(ValidationError(path, message, value, suggestion))

    def __str__(self) -> str:
        if self.is_valid:
            return "✅ Outcome file is valid"
        count = len(self.errors)
        lines = [f"Outcome file has {count} problem{'s' if count != 1 else ''}:\n"]
        lines.extend(str(e) for e in self.errors)
        return "\n".join(lines)


# ─────────────────────────────────────────────────────────────────────────────
# Outcome Validator
# ─────────────────────────────────────────────────────────────────────────────

class OutcomeValidator:
    """Validates raw parsed YAML against the outcome file schema."""

    REQUIRED_TOP_LEVEL = {"outcomes"}
    OPTIONAL_TOP_LEVEL = {"name"}
    REQUIRED_FIELDS = {"group", "name"}
    FLAG_FIELDS = {"skipped", "errored", "failed"}
    OPTIONAL_FIELDS = FLAG_FIELDS | {"status", "message", "file", "line", "duration"}
    VALID_STATUSES = {s.value for s in OutcomeStatus}

    def __init__(self, data: dict[str, Any]):
        self.data = data
        self.result = ValidationResult()

    def validate(self) -> ValidationResult:
        """Run all validation checks and return result."""
        self._validate_top_level()
        if not self.result.is_valid:
            return self.result

        self._validate_outcomes()
        return self.result

    def _validate_top_level(self) -> None:
        """Check required and unknown top-level keys."""
        keys = set(self.data.keys())
        missing = self.REQUIRED_TOP_LEVEL - keys
        unknown = keys - self.REQUIRED_TOP_LEVEL - self.OPTIONAL_TOP_LEVEL

        for key in missing:
            self.result.add_error(
                key,
                f"Required field '{key}' is missing",
                suggestion=f"Add '{key}:' to your outcome file"
            )

        for key in unknown:
            self.result.add_error(
                key,
                f"Unknown top-level field '{key}'",
                suggestion=f"Valid fields are: {', '.join(sorted(self.REQUIRED_TOP_LEVEL | self.OPTIONAL_TOP_LEVEL))}"
            )

    def _validate_outcomes(self) -> None:
        outcomes = self.data.get("outcomes")
        if not isinstance(outcomes, list):
            self.result.add_error(
                "outcomes",
                "Must be a list",
                value=outcomes
            )
            return

        for i, entry in enumerate(outcomes):
            self._validate_outcome(i, entry)

    def _validate_outcome(self, index: int, entry: Any) -> None:
        path = f"outcomes[{index}]"

        if not isinstance(entry, dict):
            self.result.add_error(
                path,
                "Outcome must be an object",
                value=entry
            )
            return

        unknown = set(entry) - self.REQUIRED_FIELDS - self.OPTIONAL_FIELDS
        for key in sorted(unknown, key=str):
            self.result.add_error(
                f"{path}.{key}",
                "Unknown field",
                suggestion=f"Valid fields: {', '.join(sorted(self.REQUIRED_FIELDS | self.OPTIONAL_FIELDS))}"
            )

        for key in sorted(self.REQUIRED_FIELDS):
            value = entry.get(key)
            if value is None:
                self.result.add_error(
                    f"{path}.{key}",
                    f"Outcome must have a '{key}' field"
                )
            elif not isinstance(value, str):
                self.result.add_error(
                    f"{path}.{key}",
                    "Must be a string",
                    value=value
                )
            elif not value.strip():
                self.result.add_error(
                    f"{path}.{key}",
                    "Cannot be empty"
                )

        status = entry.get("status")
        if status is not None:
            if status not in self.VALID_STATUSES:
                self.result.add_error(
                    f"{path}.status",
                    "Invalid status",
                    value=status,
                    suggestion=f"Valid statuses: {', '.join(sorted(self.VALID_STATUSES))}"
                )
            flags = sorted(self.FLAG_FIELDS & set(entry))
            if flags:
                self.result.add_error(
                    f"{path}.status",
                    f"Cannot be combined with {', '.join(flags)}",
                    suggestion="Use either 'status' or the boolean flags"
                )

        for flag in sorted(self.FLAG_FIELDS):
            value = entry.get(flag)
            if value is not None and not isinstance(value, bool):
                self.result.add_error(
                    f"{path}.{flag}",
                    "Must be a boolean",
                    value=value
                )

        message = entry.get("message")
        if message is not None and not isinstance(message, str):
            self.result.add_error(
                f"{path}.message",
                "Must be a string",
                value=message
            )

        self._validate_location(path, entry)

        duration = entry.get("duration")
        if duration is not None:
            if isinstance(duration, bool) or not isinstance(duration, (int, float)) or duration < 0:
                self.result.add_error(
                    f"{path}.duration",
                    "Must be a non-negative number (seconds)",
                    value=duration
                )

    def _validate_location(self, path: str, entry: dict) -> None:
        file = entry.get("file")
        line = entry.get("line")

        if file is not None and not isinstance(file, str):
            self.result.add_error(
                f"{path}.file",
                "Must be a string",
                value=file
            )

        if line is not None:
            if isinstance(line, bool) or not isinstance(line, int) or line < 1:
                self.result.add_error(
                    f"{path}.line",
                    "Must be a positive integer",
                    value=line
                )
            elif file is None:
                self.result.add_error(
                    f"{path}.line",
                    "Requires a 'file' field",
                    suggestion="Add 'file: path/to/test_file.py' next to 'line'"
                )
