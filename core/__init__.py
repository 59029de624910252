"""
Core package — configuration, schema constants, logging, and shared helpers.
No business logic lives here.
"""

from .schema import CSV_HEADER, MONTHLY_COLUMNS, PROJECTION_COLUMNS
from .config import ClientConfig
from .logging_setup import configure_logging, get_logger
from .utils import (
    format_currency,
    format_date,
    format_year_month,
    minor_to_major_text,
    require_columns,
    year_month_key,
)

__all__ = [
    "CSV_HEADER",
    "MONTHLY_COLUMNS",
    "PROJECTION_COLUMNS",
    "ClientConfig",
    "configure_logging",
    "get_logger",
    "format_currency",
    "format_date",
    "format_year_month",
    "minor_to_major_text",
    "require_columns",
    "year_month_key",
]
