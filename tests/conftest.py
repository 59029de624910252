"""Shared fixtures.

HTTP is never real: ``ApiClient`` gets a ``FakeSession`` (tests/helpers) in
place of ``requests.Session``.
"""

from __future__ import annotations

from typing import List

import pandas as pd
import pytest

from client.api import ApiClient
from data_prep.loader import projections_to_frame
from tests.helpers.fake_http import FakeSession


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests never see the developer's FLOW_SIGHT_* settings."""
    for name in (
        "FLOW_SIGHT_API_URL",
        "FLOW_SIGHT_REQUEST_TIMEOUT",
        "FLOW_SIGHT_DEFAULT_HORIZON",
        "FLOW_SIGHT_SESSION_TTL",
        "FLOW_SIGHT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def api(fake_session: FakeSession) -> ApiClient:
    return ApiClient(
        "http://backend.test/api/v1",
        token_provider=lambda: "tok-123456789",
        timeout=5.0,
        session=fake_session,
    )


@pytest.fixture
def sample_records() -> List[dict]:
    return [
        {"date": "2024-01-05", "income": 300000, "expense": 100000, "balance": 500000},
        {"date": "2024-01-20", "income": 0, "expense": 50000, "balance": 450000},
        {"date": "2024-02-03", "income": 200000, "expense": 0, "balance": 650000},
    ]


@pytest.fixture
def sample_daily(sample_records) -> pd.DataFrame:
    return projections_to_frame(sample_records)
