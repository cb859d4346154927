from __future__ import annotations

import os

import pytest

from common.config import get_config

_ENV_PREFIXES = ("ANALYSIS_", "REPORT_", "LOKI_")


@pytest.fixture
def minimal_local_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Clean environment: no app variables set and no `.env` picked up from the repo."""
    for key in list(os.environ):
        if key == "ENVIRONMENT" or key.startswith(_ENV_PREFIXES):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    get_config.cache_clear()
    yield tmp_path
    get_config.cache_clear()
