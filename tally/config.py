"""
Reporter configuration.

Options are resolved once, at construction, from explicit options and
a snapshot of the environment:

    explicit option > environment variable > built-in default

Usage:
    config = resolve_config({"format": "verbose"}, os.environ)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from .errors import ConfigError


ENV_RESULTS_FILE = "TALLY_RESULTS"
ENV_REPORT_FILE = "TALLY_REPORT"
ENV_FORMAT = "TALLY_FORMAT"
ENV_DEBUG = "DEBUG"

DEFAULT_RESULTS_FILE = "tmp/test_results.json"
DEFAULT_REPORT_FILE = "tmp/test_report.toml"


class OutputFormat(str, Enum):
    """Console output modes."""
    COMPACT = "compact"
    VERBOSE = "verbose"

    @classmethod
    def parse(cls, value: Any) -> OutputFormat:
        """Case-insensitive lookup; anything unrecognized is compact."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.COMPACT


@dataclass(frozen=True)
class ReporterConfig:
    """Effective reporter configuration."""
    results_file: Path = Path(DEFAULT_RESULTS_FILE)
    report_file: Path = Path(DEFAULT_REPORT_FILE)
    format: OutputFormat = OutputFormat.COMPACT
    track_regressions: bool = True
    write_reports: bool = True
    debug: bool = False


OPTION_NAMES = frozenset(f.name for f in fields(ReporterConfig))


def resolve_config(
    options: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ReporterConfig:
    """
    Resolve the effective configuration.

    Args:
        options: Explicit options; None values count as "not given"
        environ: Environment snapshot (defaults to os.environ)

    Returns:
        ReporterConfig

    Raises:
        ConfigError: If an unknown option name is given
    """
    options = {k: v for k, v in (options or {}).items() if v is not None}
    environ = os.environ if environ is None else environ

    unknown = set(options) - OPTION_NAMES
    if unknown:
        raise ConfigError(
            f"Unknown reporter option(s): {', '.join(sorted(unknown))}. "
            f"Valid options are: {', '.join(sorted(OPTION_NAMES))}"
        )

    def pick(name: str, env_var: str | None, default: Any) -> Any:
        if name in options:
            return options[name]
        if env_var and environ.get(env_var):
            return environ[env_var]
        return default

    return ReporterConfig(
        results_file=Path(pick("results_file", ENV_RESULTS_FILE, DEFAULT_RESULTS_FILE)),
        report_file=Path(pick("report_file", ENV_REPORT_FILE, DEFAULT_REPORT_FILE)),
        format=OutputFormat.parse(pick("format", ENV_FORMAT, OutputFormat.COMPACT)),
        track_regressions=bool(options.get("track_regressions", True)),
        write_reports=bool(options.get("write_reports", True)),
        debug=bool(pick("debug", ENV_DEBUG, False)),
    )
