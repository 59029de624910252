from __future__ import annotations

import pytest

from core.config import ClientConfig


def test_defaults():
    cfg = ClientConfig.from_env()
    assert cfg.api_url == "http://localhost:8080"
    assert cfg.base_url == "http://localhost:8080/api/v1"
    assert cfg.default_horizon_months == 6
    assert cfg.horizon_options == (6, 12, 24, 36, 60, 120)
    assert cfg.dashboard_horizon_months == 24
    assert cfg.log_level is None


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("FLOW_SIGHT_API_URL", "https://api.example.com/")
    monkeypatch.setenv("FLOW_SIGHT_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("FLOW_SIGHT_DEFAULT_HORIZON", "24")
    monkeypatch.setenv("FLOW_SIGHT_SESSION_TTL", "60")
    monkeypatch.setenv("FLOW_SIGHT_LOG_LEVEL", "DEBUG")

    cfg = ClientConfig.from_env()
    assert cfg.base_url == "https://api.example.com/api/v1"
    assert cfg.request_timeout == 2.5
    assert cfg.default_horizon_months == 24
    assert cfg.session_ttl_seconds == 60
    assert cfg.log_level == "DEBUG"


def test_blank_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("FLOW_SIGHT_REQUEST_TIMEOUT", "  ")
    assert ClientConfig.from_env().request_timeout == 30.0


def test_bad_number_names_the_variable(monkeypatch):
    monkeypatch.setenv("FLOW_SIGHT_DEFAULT_HORIZON", "six")
    with pytest.raises(ValueError, match="FLOW_SIGHT_DEFAULT_HORIZON"):
        ClientConfig.from_env()


def test_horizon_must_be_offered():
    with pytest.raises(ValueError, match="default_horizon_months"):
        ClientConfig(default_horizon_months=7)


@pytest.mark.parametrize("kwargs", [{"request_timeout": 0}, {"session_ttl_seconds": -1}])
def test_non_positive_limits_rejected(kwargs):
    with pytest.raises(ValueError):
        ClientConfig(**kwargs)
