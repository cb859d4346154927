"""Discover and read saved log windows from the resources directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List

from pydantic import TypeAdapter, ValidationError

from analyzer.models import LogEntry

logger = logging.getLogger(__name__)

_ENTRIES = TypeAdapter(List[LogEntry])


class LogFileError(RuntimeError):
    """A resources file could not be read or is not a JSON array of log entries."""


def find_json_files(resources_dir: str | Path) -> List[Path]:
    """Return ``*.json`` files in ``resources_dir`` sorted by name, creating the dir if missing."""
    root = Path(resources_dir)
    root.mkdir(parents=True, exist_ok=True)
    return sorted(root.glob("*.json"), key=lambda p: p.name)


def read_log_entries(path: str | Path) -> List[LogEntry]:
    p = Path(path)
    try:
        data = p.read_bytes()
    except OSError as e:
        raise LogFileError(f"reading {p}: {e}") from e
    try:
        entries = _ENTRIES.validate_json(data)
    except ValidationError as e:
        raise LogFileError(f"parsing {p}: {e.error_count()} validation error(s), first: {e.errors()[0]['msg']}") from e
    return [entry.model_copy(update={"source": p.name}) for entry in entries]


def read_many(paths: Iterable[str | Path]) -> List[LogEntry]:
    """Concatenate entries of every readable file; unreadable files are logged and skipped."""
    all_entries: List[LogEntry] = []
    for path in paths:
        logger.info("Reading %s", path)
        try:
            entries = read_log_entries(path)
        except LogFileError as e:
            logger.warning("Failed to read %s: %s", path, e)
            continue
        logger.info("Loaded %d entries from %s", len(entries), path)
        all_entries.extend(entries)
    logger.info("Total entries loaded: %d", len(all_entries))
    return all_entries


def extract_date_from_filename(path: str | Path) -> str:
    """``25.12.2025.json`` -> ``25.12.2025``; names without three dot parts are returned as-is."""
    base = Path(path).name
    parts = base.split(".")
    if len(parts) >= 3:
        return ".".join(parts[:3])
    return base


__all__ = [
    "LogFileError",
    "extract_date_from_filename",
    "find_json_files",
    "read_log_entries",
    "read_many",
]
