"""
Exceptions raised by Tally.

Reporting itself never raises during a run; these cover programming
errors at construction time.
"""

from __future__ import annotations


class TallyError(Exception):
    """Base class for all Tally errors."""


class ConfigError(TallyError):
    """Reporter options that cannot be resolved."""
