"""Test helper constants and utilities for form mailer tests."""

import re
from datetime import datetime, timezone

FORM_ID = "1FAIpQLSdTestForm"
SHEET_ID = "1BxiMVs0XRA5nFMdKvBdBZjgmUUqptlbs74OgvE2upms"
FIXED_NOW = datetime(2025, 11, 4, 16, 0, 0, tzinfo=timezone.utc)

_DATA_ROW = re.compile(r"<tr><td[^>]*>(.*?)</td><td[^>]*>(.*?)</td></tr>")


def data_rows(html):
    """Return the (question, answer) cells of every data row in a rendered body."""
    return _DATA_ROW.findall(html)


__all__ = ["FORM_ID", "SHEET_ID", "FIXED_NOW", "data_rows"]
