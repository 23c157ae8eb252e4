"""
Outcome Files

This package loads test outcomes recorded by an external engine from a
YAML (or JSON) file so they can be replayed through a Reporter.

Usage:
    from tally.outcomes import load_outcomes, parse_outcomes_yaml

    # Load from file
    outcomes, result = load_outcomes("run/outcomes.yaml")
    if not result.is_valid:
        print(result)

    # Or parse from string
    outcomes, result = parse_outcomes_yaml(yaml_string)
"""

# Public API
from .loader import load_outcomes, parse_outcomes_yaml

# Parsing and validation
from .parser import OutcomeParser
from .validation import OutcomeValidator, ValidationError, ValidationResult

__all__ = [
    # Loader functions
    "load_outcomes",
    "parse_outcomes_yaml",
    # Parsing
    "OutcomeParser",
    # Validation
    "OutcomeValidator",
    "ValidationError",
    "ValidationResult",
]
