"""
Pull game service logs from Loki in bounded time windows.

Loki caps ``query_range`` results (1000 lines by default), so the last
``days`` are split into ``chunk_hours`` windows and each window is saved as
its own resources file. Per-window failures are logged and skipped so one
bad window does not lose the rest of the fetch.
"""

from __future__ import annotations

import base64
import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from pydantic import ValidationError

from analyzer.models import LogEntry
from common.config import LokiConfig

logger = logging.getLogger(__name__)

LOKI_CONFIG_FILE = "loki-config.json"


class LokiError(RuntimeError):
    """Loki could not be reached or answered with an error."""


@dataclass(frozen=True)
class TimeRange:
    start: datetime
    end: datetime
    label: str


def load_loki_config(path: str | Path = LOKI_CONFIG_FILE) -> LokiConfig:
    """Read a ``loki-config.json`` file (url, username, password, tenant_id)."""
    p = Path(path)
    try:
        cfg = LokiConfig.model_validate_json(p.read_bytes())
    except OSError as e:
        raise LokiError(f"reading loki config {p}: {e}") from e
    except ValidationError as e:
        raise LokiError(f"parsing loki config {p}: {e}") from e
    if not cfg.url:
        raise LokiError("loki URL is required in config")
    return cfg


def generate_time_ranges(
    now: Optional[datetime] = None,
    days: int = 7,
    chunk_hours: int = 4,
) -> List[TimeRange]:
    """Windows covering the last ``days`` days (today included), oldest first, clipped at ``now``."""
    if now is None:
        now = datetime.now().astimezone()
    if chunk_hours <= 0 or 24 % chunk_hours:
        raise ValueError("chunk_hours must be a positive divisor of 24")

    ranges: List[TimeRange] = []
    for i in range(days - 1, -1, -1):
        day = now - timedelta(days=i)
        for hour in range(0, 24, chunk_hours):
            start = day.replace(hour=hour, minute=0, second=0, microsecond=0)
            if start >= now:
                continue
            end = min(start + timedelta(hours=chunk_hours), now)
            label = f"{start:%Y-%m-%d}_{hour:02d}-{hour + chunk_hours:02d}"
            ranges.append(TimeRange(start=start, end=end, label=label))
    return ranges


def _unix_nanos(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.astimezone()
    delta = dt - datetime(1970, 1, 1, tzinfo=timezone.utc)
    return (delta.days * 86_400 + delta.seconds) * 1_000_000_000 + delta.microseconds * 1_000


def _rfc3339_from_nanos(ns: int) -> str:
    seconds, remainder = divmod(ns, 1_000_000_000)
    dt = datetime.fromtimestamp(seconds, tz=timezone.utc)
    if remainder:
        return f"{dt:%Y-%m-%dT%H:%M:%S}.{remainder:09d}".rstrip("0") + "Z"
    return f"{dt:%Y-%m-%dT%H:%M:%S}Z"


def parse_query_response(body: Dict[str, Any], source: str = "") -> List[LogEntry]:
    """Flatten a ``query_range`` streams response into log entries."""
    status = body.get("status")
    if status != "success":
        raise LokiError(f"loki query failed with status: {status}")

    entries: List[LogEntry] = []
    for stream in (body.get("data") or {}).get("result") or []:
        labels = stream.get("stream") or {}
        for value in stream.get("values") or []:
            if len(value) < 2:
                continue
            try:
                ns = int(value[0])
            except (TypeError, ValueError):
                logger.debug("Dropping value with bad timestamp: %r", value[0])
                continue
            entries.append(
                LogEntry(
                    line=value[1],
                    timestamp=_rfc3339_from_nanos(ns),
                    fields=dict(labels),
                    source=source,
                )
            )
    return entries


class LokiClient:
    """Minimal ``query_range`` client."""

    def __init__(self, config: LokiConfig, opener: Callable[..., Any] = urlopen) -> None:
        if not config.url:
            raise LokiError("loki URL is required in config")
        self.config = config
        self._open = opener

    def _build_request(self, time_range: TimeRange) -> Request:
        params = {
            "query": self.config.query,
            "start": str(_unix_nanos(time_range.start)),
            "end": str(_unix_nanos(time_range.end)),
            "limit": str(self.config.limit),
            "direction": "forward",
        }
        req = Request(f"{self.config.query_range_url}?{urlencode(params)}", method="GET")
        if self.config.username and self.config.password:
            token = base64.b64encode(f"{self.config.username}:{self.config.password}".encode("utf-8"))
            req.add_header("Authorization", "Basic " + token.decode("ascii"))
        if self.config.tenant_id:
            req.add_header("X-Scope-OrgID", self.config.tenant_id)
        return req

    def query_range(self, time_range: TimeRange) -> List[LogEntry]:
        req = self._build_request(time_range)
        try:
            with self._open(req, timeout=self.config.timeout_seconds) as resp:
                status = getattr(resp, "status", 200)
                raw = resp.read()
        except HTTPError as e:
            detail = e.read().decode("utf-8", "replace") if e.fp is not None else ""
            raise LokiError(f"loki returned status {e.code}: {detail}") from e
        except URLError as e:
            raise LokiError(f"executing request: {e.reason}") from e

        if status != 200:
            raise LokiError(f"loki returned status {status}: {raw.decode('utf-8', 'replace')}")
        try:
            body = json.loads(raw)
        except json.JSONDecodeError as e:
            raise LokiError(f"parsing loki response: {e}") from e
        return parse_query_response(body, source=time_range.label)


def save_entries(entries: List[LogEntry], path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    payload = [entry.model_dump(mode="json") for entry in entries]
    p.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return p


def fetch_to_directory(
    client: LokiClient,
    ranges: List[TimeRange],
    out_dir: str | Path,
    sleep: Callable[[float], None] = time.sleep,
) -> List[Path]:
    """Fetch every window and save non-empty ones as ``<label>.json``; returns written files."""
    written: List[Path] = []
    for time_range in ranges:
        logger.info("Fetching logs for %s", time_range.label)
        try:
            entries = client.query_range(time_range)
        except LokiError as e:
            logger.warning("Failed to fetch logs for %s: %s", time_range.label, e)
            continue

        if not entries:
            logger.info("No logs found for %s", time_range.label)
            continue

        filename = Path(out_dir) / f"{time_range.label.replace(' ', '_')}.json"
        try:
            save_entries(entries, filename)
        except OSError as e:
            logger.warning("Failed to save logs for %s: %s", time_range.label, e)
            continue
        logger.info("Saved %d log entries to %s", len(entries), filename)
        written.append(filename)

        if client.config.request_delay_seconds:
            sleep(client.config.request_delay_seconds)
    return written


__all__ = [
    "LOKI_CONFIG_FILE",
    "LokiClient",
    "LokiError",
    "TimeRange",
    "fetch_to_directory",
    "generate_time_ranges",
    "load_loki_config",
    "parse_query_response",
    "save_entries",
]
