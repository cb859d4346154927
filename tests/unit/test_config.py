import os
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from common.config import AnalysisConfig, LokiConfig, get_config, load_config


def test_load_local_config_defaults(minimal_local_env):
    cfg = load_config(env_file=None)
    assert cfg.environment == "local"
    assert cfg.analysis.resources_dir == "resources"
    assert cfg.analysis.top_n == 5
    assert cfg.analysis.high_rtp_min_bets == 100
    assert cfg.analysis.high_rtp_threshold == 150.0
    assert cfg.analysis.skip_invalid is False
    assert cfg.analysis.timezone is None
    assert cfg.report.default_currency == "NGN"
    assert cfg.loki.enabled is False


def test_loki_defaults_and_query_range_url(minimal_local_env, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("LOKI_URL", " https://loki.example.com/ ")
    monkeypatch.setenv("LOKI_TENANT_ID", "tenant-a")

    cfg = load_config(env_file=None)
    assert cfg.loki.enabled is True
    assert cfg.loki.url == "https://loki.example.com/"
    assert cfg.loki.query_range_url == "https://loki.example.com/loki/api/v1/query_range"
    assert cfg.loki.limit == 1000
    assert cfg.loki.timeout_seconds == 30.0
    assert cfg.loki.request_delay_seconds == 0.5
    assert cfg.loki.query == '{level="info"} |= "SendBet" or "SendWin"'


def test_analysis_overrides_from_env(minimal_local_env, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ANALYSIS_TOP_N", "3")
    monkeypatch.setenv("ANALYSIS_HIGH_RTP_MIN_BETS", "10")
    monkeypatch.setenv("ANALYSIS_HIGH_RTP_THRESHOLD", "120.5")
    monkeypatch.setenv("ANALYSIS_SKIP_INVALID", "true")
    monkeypatch.setenv("ANALYSIS_TIMEZONE", "Africa/Lagos")
    monkeypatch.setenv("REPORT_DEFAULT_CURRENCY", "EUR")
    monkeypatch.setenv("LOKI_QUERY", '{app="game"}')

    cfg = load_config(env_file=None)
    assert cfg.analysis.top_n == 3
    assert cfg.analysis.high_rtp_min_bets == 10
    assert cfg.analysis.high_rtp_threshold == 120.5
    assert cfg.analysis.skip_invalid is True
    assert cfg.analysis.tzinfo() == ZoneInfo("Africa/Lagos")
    assert cfg.report.default_currency == "EUR"
    assert cfg.loki.query == '{app="game"}'


def test_env_file_is_loaded(minimal_local_env, monkeypatch: pytest.MonkeyPatch):
    env_file = minimal_local_env / "custom.env"
    env_file.write_text("REPORT_DEFAULT_CURRENCY=KES\nANALYSIS_TOP_N=7\n", encoding="utf-8")
    try:
        cfg = load_config(env_file=str(env_file))
        assert cfg.report.default_currency == "KES"
        assert cfg.analysis.top_n == 7
    finally:
        # load_dotenv writes straight into os.environ.
        os.environ.pop("REPORT_DEFAULT_CURRENCY", None)
        os.environ.pop("ANALYSIS_TOP_N", None)


def test_unknown_timezone_rejected() -> None:
    with pytest.raises(ValidationError):
        AnalysisConfig(timezone="Mars/Olympus_Mons")


def test_blank_timezone_means_local() -> None:
    cfg = AnalysisConfig(timezone="  ")
    assert cfg.timezone is None
    assert cfg.tzinfo() is None


def test_production_requires_https_loki(monkeypatch: pytest.MonkeyPatch, minimal_local_env):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("LOKI_URL", "http://loki.internal:3100")

    with pytest.raises(ValidationError):
        load_config(env_file=None)


def test_production_forbids_skip_invalid(monkeypatch: pytest.MonkeyPatch, minimal_local_env):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("ANALYSIS_SKIP_INVALID", "1")

    with pytest.raises(ValidationError):
        load_config(env_file=None)


def test_production_valid_when_requirements_met(monkeypatch: pytest.MonkeyPatch, minimal_local_env):
    monkeypatch.setenv("ENVIRONMENT", "Production")
    monkeypatch.setenv("LOKI_URL", "https://loki.example.com")

    cfg = load_config(env_file=None)
    assert cfg.environment == "production"
    assert cfg.loki.enabled is True


def test_loki_limit_bounds() -> None:
    with pytest.raises(ValidationError):
        LokiConfig(url="https://loki.example.com", limit=0)


def test_get_config_is_cached(minimal_local_env):
    first = get_config()
    assert get_config() is first
