"""
Data models for the SOP writer pipeline.
"""

from .application import (
    CSV_HEADERS,
    FAILED_MISSING_PROMPT,
    FAILED_PROCESSING,
    ApplicationRecord,
    CourseMetadata,
    FieldState,
    field_state,
    needs_prompt,
    needs_sop,
)

__all__ = [
    "CSV_HEADERS",
    "FAILED_MISSING_PROMPT",
    "FAILED_PROCESSING",
    "ApplicationRecord",
    "CourseMetadata",
    "FieldState",
    "field_state",
    "needs_prompt",
    "needs_sop",
]
