"""
Data preparation — turning backend payloads into frames, and validating them.
"""

from .loader import empty_projection_frame, projections_to_frame
from .validators import ValidationResult, validate_projections, validate_year_month

__all__ = [
    "empty_projection_frame",
    "projections_to_frame",
    "ValidationResult",
    "validate_projections",
    "validate_year_month",
]
