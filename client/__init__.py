"""
Backend access — REST client, payload models, auth session, projection fetcher.
"""

from .api import ApiClient
from .errors import ApiError, ResponseFormatError, TransportError, UnauthorizedError
from .fetcher import FetchOutcome, ProjectionFetcher
from .models import DailyProjection, DashboardSummary, User
from .session import AuthSession

__all__ = [
    "ApiClient",
    "ApiError",
    "ResponseFormatError",
    "TransportError",
    "UnauthorizedError",
    "FetchOutcome",
    "ProjectionFetcher",
    "DailyProjection",
    "DashboardSummary",
    "User",
    "AuthSession",
]
