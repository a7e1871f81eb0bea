"""Common utility functions for dupguard.

This module consolidates shared utility functions used across the codebase,
including timestamps and text/URL normalization.
"""

from dupguard.utils.text import (
    TRACKING_PARAMS,
    extract_host,
    normalize_title,
    normalize_url,
)
from dupguard.utils.timestamps import current_year, get_iso_timestamp

__all__ = [
    "get_iso_timestamp",
    "current_year",
    "TRACKING_PARAMS",
    "normalize_title",
    "normalize_url",
    "extract_host",
]
