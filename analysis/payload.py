"""Encode and decode the monthly report wire format.

Wire shape::

    {"Months": [{"Year": 2024, "Month": "January",
                 "FeatureSeconds": 3600.0, "BugSeconds": 1800.0}, ...]}

`Year` is optional on input. Missing seconds fields decode as 0.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from .dto import MonthlyRecord


class ReportDecodeError(ValueError):
    """Raised when a payload does not match the monthly report shape."""


def encode_monthly_report(records: Iterable[MonthlyRecord]) -> dict[str, list[dict[str, Any]]]:
    """Return the JSON-serializable wire payload for `records`."""

    months: list[dict[str, Any]] = []
    for record in records:
        months.append(
            {
                "Year": record.year,
                "Month": record.month,
                "BugSeconds": record.bug_seconds,
                "FeatureSeconds": record.feature_seconds,
            }
        )
    return {"Months": months}


def decode_monthly_report(payload: object) -> tuple[MonthlyRecord, ...]:
    """Validate a decoded JSON payload and convert it into MonthlyRecord values.

    Args:
        payload: Result of `json.loads` on a report response body.

    Returns:
        Records in payload order.

    Raises:
        ReportDecodeError: When the payload shape or any value is invalid.
    """

    if not isinstance(payload, Mapping):
        raise ReportDecodeError("Report payload must be a JSON object.")
    months = payload.get("Months")
    if not isinstance(months, list):
        raise ReportDecodeError("Report payload is missing the `Months` list.")

    records: list[MonthlyRecord] = []
    for index, entry in enumerate(months):
        if not isinstance(entry, Mapping):
            raise ReportDecodeError(f"Months[{index}] must be an object.")
        month = entry.get("Month")
        if not isinstance(month, str):
            raise ReportDecodeError(f"Months[{index}].Month must be a string.")
        records.append(
            MonthlyRecord(
                month=month,
                feature_seconds=_seconds(entry, "FeatureSeconds", index=index),
                bug_seconds=_seconds(entry, "BugSeconds", index=index),
                year=_year(entry, index=index),
            )
        )
    return tuple(records)


def _seconds(entry: Mapping[str, Any], key: str, *, index: int) -> float:
    value = entry.get(key, 0)
    # bool is an int subclass; `true` is not a duration.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ReportDecodeError(f"Months[{index}].{key} must be a number.")
    try:
        seconds = float(value)
    except OverflowError:
        raise ReportDecodeError(f"Months[{index}].{key} is too large.") from None
    # json.loads accepts NaN and Infinity literals.
    if not math.isfinite(seconds):
        raise ReportDecodeError(f"Months[{index}].{key} must be finite.")
    if seconds < 0:
        raise ReportDecodeError(f"Months[{index}].{key} must not be negative.")
    return seconds


def _year(entry: Mapping[str, Any], *, index: int) -> int | None:
    value = entry.get("Year")
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ReportDecodeError(f"Months[{index}].Year must be an integer.")
    return value
