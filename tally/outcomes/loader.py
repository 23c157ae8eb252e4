"""
Outcome file loader.

This module provides the public API for loading and validating
outcome files from disk or YAML strings. JSON files load as well,
since JSON is a subset of YAML.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from ..reporting.models import Outcome
from .parser import OutcomeParser
from .validation import OutcomeValidator, ValidationResult


def load_outcomes(path: str | Path) -> tuple[list[Outcome] | None, ValidationResult]:
    """
    Load and validate outcomes from a YAML or JSON file.

    Args:
        path: Path to the outcome file

    Returns:
        Tuple of (list of Outcomes or None, ValidationResult)
        If validation fails, the list will be None.

    Example:
        outcomes, result = load_outcomes("run/outcomes.yaml")
        if not result.is_valid:
            print(result)
            sys.exit(2)
        for outcome in outcomes:
            reporter.record(outcome)
    """
    path = Path(path)

    # Check file exists
    if not path.exists():
        result = ValidationResult()
        result.add_error(
            str(path),
            "File not found",
            suggestion="Check the file path is correct"
        )
        return None, result

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        result = ValidationResult()
        result.add_error(str(path), f"Could not read file: {e}")
        return None, result

    return _load(text, str(path))


def parse_outcomes_yaml(yaml_string: str) -> tuple[list[Outcome] | None, ValidationResult]:
    """
    Validate and parse outcomes from a YAML string (useful for testing).

    Args:
        yaml_string: YAML content as a string

    Returns:
        Tuple of (list of Outcomes or None, ValidationResult)
    """
    return _load(yaml_string, "yaml")


def _load(text: str, source: str) -> tuple[list[Outcome] | None, ValidationResult]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        result = ValidationResult()
        result.add_error(
            source,
            f"Invalid YAML syntax: {e}",
            suggestion="Check YAML formatting (indentation, colons, etc.)"
        )
        return None, result

    if not isinstance(data, dict):
        result = ValidationResult()
        result.add_error(
            source,
            "File must contain a YAML object (not a list or scalar)",
            value=type(data).__name__
        )
        return None, result

    validator = OutcomeValidator(data)
    result = validator.validate()

    if not result.is_valid:
        return None, result

    parser = OutcomeParser(data)
    return parser.parse(), result
