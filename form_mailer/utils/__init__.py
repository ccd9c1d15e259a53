"""Utility functions for time handling and text previews."""

from .text import preview_text
from .timestamps import ensure_utc, format_for_display, isoformat_utc, utc_now

__all__ = [
    # Timestamps
    "utc_now",
    "ensure_utc",
    "isoformat_utc",
    "format_for_display",
    # Text
    "preview_text",
]
