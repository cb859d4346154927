from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator


class LokiConfig(BaseModel):
    """Connection settings for the Loki ``query_range`` API."""

    url: str = Field(default="")
    username: str = Field(default="")
    password: str = Field(default="")
    tenant_id: str = Field(default="")

    # LogQL selector for the game service bet/win lines.
    query: str = Field(default='{level="info"} |= "SendBet" or "SendWin"')
    # Loki refuses to return more than this many lines per request by default.
    limit: int = Field(default=1000, ge=1, le=5000)
    timeout_seconds: float = Field(default=30.0, gt=0)
    request_delay_seconds: float = Field(default=0.5, ge=0)

    @field_validator("url", mode="before")
    @classmethod
    def _strip_url(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    @property
    def query_range_url(self) -> str:
        return self.url.rstrip("/") + "/loki/api/v1/query_range"


class AnalysisConfig(BaseModel):
    """
    Knobs for the aggregation and fraud-signal engine.

    The HighRTP rule flags a player when ``total_bets > high_rtp_min_bets``
    and ``rtp > high_rtp_threshold`` (both strict).
    """

    resources_dir: str = Field(default="resources")
    top_n: int = Field(default=5, ge=1, description="Size of the per-player top bets/wins lists.")
    high_rtp_min_bets: int = Field(default=100, ge=0)
    high_rtp_threshold: float = Field(default=150.0, ge=0.0, description="RTP percentage ceiling.")
    skip_invalid: bool = Field(
        default=False,
        description="Skip malformed payloads instead of aborting the whole run.",
    )
    timezone: Optional[str] = Field(
        default=None,
        description="IANA zone used for hour bucketing and time display; local clock when unset.",
    )

    @field_validator("timezone", mode="before")
    @classmethod
    def _validate_timezone(cls, v: object) -> object:
        if v is None:
            return None
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            try:
                ZoneInfo(v)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown timezone: {v!r}") from e
        return v

    def tzinfo(self) -> Optional[ZoneInfo]:
        return ZoneInfo(self.timezone) if self.timezone else None


class ReportConfig(BaseModel):
    default_currency: str = Field(default="NGN")
    top_players: int = Field(default=10, ge=1)


class AppConfig(BaseModel):
    environment: Literal["local", "production"] = Field(default="local")

    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    loki: LokiConfig = Field(default_factory=LokiConfig)

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_environment(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def _validate_environment_requirements(self) -> "AppConfig":
        if self.environment == "production":
            if self.loki.enabled and not self.loki.url.startswith("https://"):
                raise ValueError("In production, LOKI_URL must use https.")
            if self.analysis.skip_invalid:
                raise ValueError("In production, ANALYSIS_SKIP_INVALID must be disabled.")
        return self


def _load_env(env_file: Optional[str]) -> None:
    # Load env file if present; do not override explicit process environment.
    if env_file:
        load_dotenv(env_file, override=False)
        return

    # Search upwards so running from a subdirectory picks up the project `.env`.
    cwd = Path.cwd()
    for base in (cwd, *cwd.parents):
        candidate = base / ".env"
        if candidate.exists():
            load_dotenv(candidate, override=False)
            return

    load_dotenv(".env", override=False)


def _from_env(prefix: str, key: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{prefix}{key}", default)


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() not in {"0", "false", "no"}


def load_config(env_file: Optional[str] = None) -> AppConfig:
    """
    Load configuration from environment variables (and optional env file).

    Env var names are grouped with prefixes:
    - ENVIRONMENT
    - ANALYSIS_*
    - REPORT_*
    - LOKI_*
    """
    _load_env(env_file)

    environment = os.getenv("ENVIRONMENT", "local")

    analysis = AnalysisConfig(
        resources_dir=_from_env("ANALYSIS_", "RESOURCES_DIR", "resources") or "resources",
        top_n=int(_from_env("ANALYSIS_", "TOP_N", "5") or "5"),
        high_rtp_min_bets=int(_from_env("ANALYSIS_", "HIGH_RTP_MIN_BETS", "100") or "100"),
        high_rtp_threshold=float(_from_env("ANALYSIS_", "HIGH_RTP_THRESHOLD", "150") or "150"),
        skip_invalid=_flag(_from_env("ANALYSIS_", "SKIP_INVALID"), False),
        timezone=_from_env("ANALYSIS_", "TIMEZONE", None),
    )

    report = ReportConfig(
        default_currency=_from_env("REPORT_", "DEFAULT_CURRENCY", "NGN") or "NGN",
        top_players=int(_from_env("REPORT_", "TOP_PLAYERS", "10") or "10"),
    )

    loki = LokiConfig(
        url=_from_env("LOKI_", "URL", "") or "",
        username=_from_env("LOKI_", "USERNAME", "") or "",
        password=_from_env("LOKI_", "PASSWORD", "") or "",
        tenant_id=_from_env("LOKI_", "TENANT_ID", "") or "",
        limit=int(_from_env("LOKI_", "LIMIT", "1000") or "1000"),
        timeout_seconds=float(_from_env("LOKI_", "TIMEOUT_SECONDS", "30") or "30"),
        request_delay_seconds=float(_from_env("LOKI_", "REQUEST_DELAY_SECONDS", "0.5") or "0.5"),
    )
    query = _from_env("LOKI_", "QUERY", None)
    if query:
        loki = loki.model_copy(update={"query": query})

    try:
        return AppConfig(
            environment=environment,
            analysis=analysis,
            report=report,
            loki=loki,
        )
    except ValidationError as e:
        # Re-raise with a message that's easier to spot in logs/tests.
        raise ValidationError.from_exception_data(e.title, e.errors()) from e


@lru_cache(maxsize=1)
def get_config(env_file: Optional[str] = None) -> AppConfig:
    """
    Cached config loader. In tests, prefer calling `load_config()` directly
    or clear this cache via `get_config.cache_clear()`.
    """
    return load_config(env_file=env_file)
