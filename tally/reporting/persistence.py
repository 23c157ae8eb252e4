"""
Persistence for run snapshots and summary documents.

Every function here is safe to call at the end of a test run: read
failures yield an empty snapshot and write failures are returned as a
WriteResult instead of being raised.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .formatting import clean_message, format_test_location
from .models import RunSummary, Snapshot

logger = logging.getLogger(__name__)


@dataclass
class WriteResult:
    """Outcome of writing a report file."""
    path: Path
    ok: bool = True
    error: str | None = None

    @classmethod
    def failure(cls, path: Path, exc: Exception) -> WriteResult:
        return cls(path=path, ok=False, error=f"{type(exc).__name__}: {exc}")

    def __str__(self) -> str:
        if self.ok:
            return f"✅ Wrote {self.path}"
        return f"❌ Could not write {self.path}: {self.error}"


# ─────────────────────────────────────────────────────────────────────────────
# Snapshots
# ─────────────────────────────────────────────────────────────────────────────

def load_snapshot(path: str | Path) -> Snapshot:
    """
    Load a previously saved snapshot.

    A missing, unreadable or corrupt file is treated as "no history"
    and returns an empty snapshot.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.debug(f"No previous results at {path}")
        return {}
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.debug(f"Ignoring unreadable previous results at {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.debug(f"Ignoring previous results at {path}: not a JSON object")
        return {}

    snapshot = {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}
    logger.debug(f"Loaded {len(snapshot)} previous results from {path}")
    return snapshot


def save_snapshot(path: str | Path, snapshot: Snapshot) -> WriteResult:
    """Write the snapshot as a flat JSON object, creating parent directories."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(snapshot, indent=2), encoding="utf-8")
    except OSError as e:
        return WriteResult.failure(path, e)
    logger.debug(f"Saved {len(snapshot)} results to {path}")
    return WriteResult(path=path)


# ─────────────────────────────────────────────────────────────────────────────
# Summary document
# ─────────────────────────────────────────────────────────────────────────────

def build_summary_document(summary: RunSummary) -> dict[str, dict[str, Any]]:
    """Convert a RunSummary to the sectioned summary document."""
    c = summary.classification
    duration = summary.duration
    document: dict[str, dict[str, Any]] = {
        "summary": {
            "tests": c.total,
            "passes": c.passes,
            "failures": len(c.failed),
            "errors": len(c.errored),
            "skips": len(c.skipped),
            "time_s": float(duration) if isinstance(duration, (int, float)) else 0.0,
        },
        "details": {
            "failed": [format_test_location(o) for o in c.failed],
            "errors": [format_test_location(o) for o in c.errored],
            "skipped": [
                f"{format_test_location(o)}: {clean_message(o.failure_message)}"
                for o in c.skipped
            ],
        },
    }

    if summary.regressions is not None:
        document["regressions"] = {
            "new_failures": list(summary.regressions.new_failures),
            "fixes": list(summary.regressions.fixes),
        }

    return document


def _quote(value: Any) -> str:
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _render_value(value: Any) -> str:
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_quote(v) for v in value) + "]"
    return _quote(value)


def render_markup(data: dict[str, dict[str, Any]]) -> str:
    """
    Render sections as minimal key-value markup.

    Example:
        render_markup({"summary": {"tests": 2, "name": "a"}})
        # '[summary]\\ntests = 2\\nname = "a"\\n'
    """
    lines = []
    for section, values in data.items():
        lines.append(f"[{section}]")
        for key, value in values.items():
            lines.append(f"{key} = {_render_value(value)}")
        lines.append("")
    return "\n".join(lines)


def write_summary(path: str | Path, summary: RunSummary) -> WriteResult:
    """Render and write the summary document, creating parent directories."""
    path = Path(path)
    try:
        text = render_markup(build_summary_document(summary))
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        return WriteResult.failure(path, e)
    logger.debug(f"Wrote summary to {path}")
    return WriteResult(path=path)
