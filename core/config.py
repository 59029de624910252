"""
Client configuration.
Values come from the environment so the same build can point at any backend.
Axis and CSV constants live in core/schema.py.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class ClientConfig:
    api_url: str = "http://localhost:8080"
    api_prefix: str = "/api/v1"
    request_timeout: float = 30.0

    # projection horizons offered by the cashflow page
    default_horizon_months: int = 6
    horizon_options: Tuple[int, ...] = (6, 12, 24, 36, 60, 120)

    # dashboard balance trend always looks two years ahead
    dashboard_horizon_months: int = 24

    session_ttl_seconds: int = 3600  # one hour, same as the token cookie
    log_level: Optional[str] = None

    def __post_init__(self) -> None:
        if self.default_horizon_months not in self.horizon_options:
            raise ValueError(
                f"default_horizon_months={self.default_horizon_months} is not one of "
                f"{list(self.horizon_options)}"
            )
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if self.session_ttl_seconds <= 0:
            raise ValueError("session_ttl_seconds must be positive")

    @property
    def base_url(self) -> str:
        """Backend root joined with the versioned API prefix."""
        return self.api_url.rstrip("/") + self.api_prefix

    @classmethod
    def from_env(cls) -> "ClientConfig":
        return cls(
            api_url=os.getenv("FLOW_SIGHT_API_URL") or cls.api_url,
            request_timeout=_env_float("FLOW_SIGHT_REQUEST_TIMEOUT", cls.request_timeout),
            default_horizon_months=_env_int(
                "FLOW_SIGHT_DEFAULT_HORIZON", cls.default_horizon_months
            ),
            session_ttl_seconds=_env_int("FLOW_SIGHT_SESSION_TTL", cls.session_ttl_seconds),
            log_level=os.getenv("FLOW_SIGHT_LOG_LEVEL"),
        )
