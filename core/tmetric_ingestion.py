"""Import booked time from TMetric detailed CSV reports.

TMetric reports summarize time per task, so the import works one local day at
a time and only knows durations. Every task is booked as if it started at
01:00 on its day.

Sample export::

    Day,User,Project,Project Code,Client,Time Entry,Tags,Time,Issue Id,Link
    2017-10-30,ben,Team Infrastructure,,,Implement theme query API,,4:01:00,TI-2362,...

Older exports name the task column `Task` instead of `Time Entry`.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode

from analysis.durations import parse_hms
from core.ingestion_http import fetch_bytes
from timedb.models import SYSTEM_TMETRIC
from timedb.services import TimeRecord, insert_times

logger = logging.getLogger(__name__)

REPORT_URL = "https://app.tmetric.com/api/reports/detailed/csv"
API_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S.000Z"
TASK_START_HOUR = 1
UTF8_BOM = b"\xef\xbb\xbf"

Fetch = Callable[[str], bytes]


class TMetricFormatError(ValueError):
    """Raised when a CSV export or one of its rows lacks the columns the import needs."""


@dataclass(frozen=True, slots=True)
class TMetricConfig:
    """Account details for TMetric report exports.

    Attributes:
        account_id: TMetric account id.
        email_suffix: Appended to the report's user name to form an email.
        cookies: Session cookies captured from a logged-in browser.
    """

    account_id: str
    email_suffix: str = ""
    cookies: Mapping[str, str] = field(default_factory=dict)


def round_down_to_day(value: datetime) -> datetime:
    """Return local midnight of the day containing `value`."""

    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def day_windows(start: datetime, end: datetime) -> Iterator[tuple[datetime, datetime]]:
    """Split `[start, end)` into windows of at most one day, aligned to midnight."""

    pos = round_down_to_day(start)
    while pos < end:
        nxt = min(pos + timedelta(days=1), end)
        yield pos, nxt
        pos = nxt


def report_url(config: TMetricConfig, *, start: datetime, end: datetime) -> str:
    """Build the detailed CSV report URL for a window."""

    query = urlencode(
        [
            ("accountId", config.account_id),
            ("activeProjectsOnly", "false"),
            ("budget", "false"),
            ("endDate", _api_date(end)),
            ("groupColumnNames", "project"),
            ("groupColumnNames", "user"),
            ("noRounding", "false"),
            ("startDate", _api_date(start)),
        ]
    )
    return f"{REPORT_URL}?{query}"


def _api_date(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(API_DATE_FORMAT)


def parse_detailed_csv(raw: bytes, *, day: datetime, email_suffix: str = "") -> tuple[TimeRecord, ...]:
    """Parse a detailed report export into TimeRecord values.

    Args:
        raw: CSV body, optionally prefixed by a UTF-8 BOM.
        day: Any moment on the reported day; tasks start at 01:00 that day.
        email_suffix: Appended to each user name.

    Returns:
        One TimeRecord per data row.

    Raises:
        TMetricFormatError: When a required column is missing or a row is too short.
        ValueError: When a duration cannot be parsed.
    """

    if raw.startswith(UTF8_BOM):
        raw = raw[len(UTF8_BOM):]
    rows = list(csv.reader(io.StringIO(raw.decode("utf-8"))))
    if not rows:
        return ()

    header = rows[0]
    user_pos = _column(header, "User")
    task_pos = _column(header, "Time Entry", "Task")
    time_pos = _column(header, "Time")

    task_start = round_down_to_day(day) + timedelta(hours=TASK_START_HOUR)
    records: list[TimeRecord] = []
    required = max(user_pos, task_pos, time_pos) + 1
    for row in rows[1:]:
        if not any(cell.strip() for cell in row):
            continue
        if len(row) < required:
            raise TMetricFormatError(f"Row has {len(row)} columns; expected at least {required}: {row!r}")
        duration = timedelta(seconds=parse_hms(row[time_pos]))
        records.append(
            TimeRecord(
                system=SYSTEM_TMETRIC,
                email=row[user_pos] + email_suffix,
                task_title=row[task_pos],
                start=task_start,
                end=task_start + duration,
            )
        )
    return tuple(records)


def _column(header: list[str], *names: str) -> int:
    for name in names:
        if name in header:
            return header.index(name)
    raise TMetricFormatError(
        f"Unable to find {names[0]} field in CSV. First line = {','.join(header)!r}"
    )


class TMetricFetcher:
    """Fetch TMetric time reports day by day and store them as time entries."""

    name = "TMetric"

    def __init__(self, config: TMetricConfig, *, timeout: int = 30, fetch: Fetch | None = None) -> None:
        self.config = config
        self.timeout = timeout
        self._fetch = fetch or self._fetch_url

    def fetch(self, *, start: datetime, end: datetime) -> int:
        """Upsert time for every day in the window; return the record count."""

        total = 0
        for window_start, window_end in day_windows(start, end):
            logger.info("Fetching TMetric from %s to %s", window_start.isoformat(), window_end.isoformat())
            raw = self._fetch(report_url(self.config, start=window_start, end=window_end))
            records = parse_detailed_csv(raw, day=window_start, email_suffix=self.config.email_suffix)
            insert_times(records)
            total += len(records)
        return total

    def _fetch_url(self, url: str) -> bytes:
        headers = {
            "Accept": "text/html, application/xhtml+xml, */*",
            "Referer": "https://app.tmetric.com/",
        }
        if self.config.cookies:
            headers["Cookie"] = "; ".join(f"{k}={v}" for k, v in self.config.cookies.items())
        return fetch_bytes(url, headers=headers, timeout=self.timeout)
