"""Async HTTP client for the monthly report endpoints.

Calls never raise for expected failures. They return a `ReportResult` holding
either the decoded report or one of the error kinds below, each carrying a
message suitable for showing to the user.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from analysis.dto import MonthlyRecord
from analysis.payload import ReportDecodeError, decode_monthly_report

logger = logging.getLogger(__name__)


class ReportError(Exception):
    """Base class for report fetch failures."""

    user_message = "Unable to load the report."

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NetworkError(ReportError):
    """The request failed in transport or returned a non-success status."""

    user_message = "Unable to reach the report server."


class DecodeError(ReportError):
    """The response body is not a valid monthly report."""

    user_message = "The report server returned an unreadable report."


class EmptyReport(ReportError):
    """The report decoded fine but contains no months."""

    user_message = "No time has been booked for this selection."


@dataclass(frozen=True, slots=True)
class ReportResult:
    """Outcome of a report fetch: a report, or an error."""

    report: tuple[MonthlyRecord, ...] = ()
    error: ReportError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ReportClient:
    """Fetch monthly reports from a report server.

    Args:
        base_url: Server root, e.g. `http://localhost:8000`.
        client: Optional shared `httpx.AsyncClient`. When omitted, each call
            opens and closes its own client.
        timeout: Request timeout in seconds for owned clients.
    """

    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client
        self.timeout = timeout

    async def fetch_user_report(self, user_id: str | int) -> ReportResult:
        """GET `/user?userid=<id>`."""

        return await self._fetch("/user", {"userid": str(user_id)})

    async def fetch_monthly_report(
        self,
        *,
        user_id: str | int | None = None,
        team: str | None = None,
    ) -> ReportResult:
        """GET `/monthly` for exactly one of a user id or a team name."""

        if (user_id is None) == (team is None):
            raise ValueError("Pass exactly one of user_id or team.")
        params = {"userid": str(user_id)} if user_id is not None else {"team": str(team)}
        return await self._fetch("/monthly", params)

    async def _fetch(self, path: str, params: dict[str, str]) -> ReportResult:
        url = f"{self.base_url}{path}"
        try:
            if self._client is not None:
                response = await self._client.get(url, params=params)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning("Report request %s failed with HTTP %s", url, exc.response.status_code)
            return ReportResult(error=NetworkError(f"HTTP {exc.response.status_code} from {url}"))
        except httpx.HTTPError as exc:
            logger.warning("Report request %s failed: %s", url, exc)
            return ReportResult(error=NetworkError(f"{type(exc).__name__}: {exc}"))

        try:
            report = decode_monthly_report(response.json())
        except ValueError as exc:
            # json.JSONDecodeError and ReportDecodeError are both ValueErrors.
            detail = str(exc) if isinstance(exc, ReportDecodeError) else "Response body is not JSON."
            return ReportResult(error=DecodeError(detail))

        if not report:
            return ReportResult(error=EmptyReport("Report contains no months."))
        return ReportResult(report=report)
