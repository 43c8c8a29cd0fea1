"""Import JIRA issues as tickets.

Issues are fetched through the JIRA REST search API, one page at a time, for
a creation-date window. Each issue becomes an `IssueRecord` that is upserted
into the time database.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any
from urllib.parse import quote

from core.ingestion_http import IngestionFetchError, basic_auth_header, fetch_bytes
from timedb.models import (
    SYSTEM_JIRA,
    TICKET_TYPE_BAU,
    TICKET_TYPE_BUG,
    TICKET_TYPE_EPIC,
    TICKET_TYPE_FEATURE,
    TICKET_TYPE_INTERRUPT,
    TICKET_TYPE_OTHER,
    TICKET_TYPE_SPIKE,
    TICKET_TYPE_TEST,
)
from timedb.services import IssueRecord, insert_issues

logger = logging.getLogger(__name__)

STORY_POINTS_FIELD = "customfield_10004"
JIRA_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"

ISSUE_TYPE_MAP: dict[str, str] = {
    "Story": TICKET_TYPE_FEATURE,
    "Bug": TICKET_TYPE_BUG,
    "BAU": TICKET_TYPE_BAU,
    "Test": TICKET_TYPE_TEST,
    "Interrupt": TICKET_TYPE_INTERRUPT,
    "Spike": TICKET_TYPE_SPIKE,
    "Epic": TICKET_TYPE_EPIC,
}

Fetch = Callable[[str], bytes]


@dataclass(frozen=True, slots=True)
class JiraConfig:
    """Connection details for a JIRA instance.

    Attributes:
        url: Base URL, e.g. `https://example.atlassian.net`.
        username: Basic auth username.
        password: Basic auth password or API token.
    """

    url: str
    username: str
    password: str


def parse_issue_type(name: str) -> str:
    """Map a JIRA issue type name onto a ticket type code."""

    ticket_type = ISSUE_TYPE_MAP.get(name)
    if ticket_type is None:
        logger.warning("Unrecognized JIRA issue type %r", name)
        return TICKET_TYPE_OTHER
    return ticket_type


def parse_jira_time(raw: str | None) -> datetime | None:
    """Parse a JIRA timestamp like `2016-12-05T09:55:24.000+0200`."""

    if not raw:
        return None
    try:
        return datetime.strptime(raw, JIRA_TIME_FORMAT)
    except ValueError:
        return None


def search_url(config: JiraConfig, *, start: date, end: date, offset: int) -> str:
    """Build the search URL for issues created in `[start, end]`."""

    jql = f'created>="{start.isoformat()}" AND created<="{end.isoformat()}"'
    return f"{config.url.rstrip('/')}/rest/api/2/search?startAt={offset}&jql={quote(jql)}"


def parse_search_page(payload: Mapping[str, Any]) -> tuple[IssueRecord, ...]:
    """Convert one search response page into IssueRecord values."""

    issues: list[IssueRecord] = []
    for issue in payload.get("issues") or []:
        fields = issue.get("fields") or {}
        issue_type = (fields.get("issuetype") or {}).get("name") or ""
        story_points = fields.get(STORY_POINTS_FIELD) or 0
        issues.append(
            IssueRecord(
                system=SYSTEM_JIRA,
                system_id=str(issue["id"]),
                title=fields.get("summary") or "",
                ticket_type=parse_issue_type(issue_type),
                story_points=int(story_points),
                create_time=parse_jira_time(fields.get("created")),
            )
        )
    return tuple(issues)


class JiraFetcher:
    """Fetch JIRA issues for a date window and store them as tickets."""

    name = "JIRA"

    def __init__(self, config: JiraConfig, *, timeout: int = 30, fetch: Fetch | None = None) -> None:
        self.config = config
        self.timeout = timeout
        self._fetch = fetch or self._fetch_url

    def iter_pages(self, *, start: date, end: date) -> Iterator[tuple[IssueRecord, ...]]:
        """Yield non-empty pages of issues until the search is exhausted."""

        offset = 0
        while True:
            body = self._fetch(search_url(self.config, start=start, end=end, offset=offset))
            try:
                payload = json.loads(body)
            except ValueError as exc:
                raise IngestionFetchError(f"JIRA returned invalid JSON at offset {offset}") from exc
            logger.info("Fetching JIRA issues %s/%s", offset, payload.get("total"))
            page = parse_search_page(payload)
            if not page:
                return
            yield page
            offset += len(page)

    def fetch(self, *, start: datetime, end: datetime) -> int:
        """Upsert every issue created in the window; return the issue count."""

        total = 0
        for page in self.iter_pages(start=start.date(), end=end.date()):
            insert_issues(page)
            total += len(page)
        return total

    def _fetch_url(self, url: str) -> bytes:
        headers = {
            "Authorization": basic_auth_header(self.config.username, self.config.password),
            "Accept": "application/json",
        }
        return fetch_bytes(url, headers=headers, timeout=self.timeout)
