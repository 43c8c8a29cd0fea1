"""Fetch tickets and booked time from the configured trackers.

JIRA issues are fetched first so TMetric time can be matched to real tickets
by title. A failed JIRA fetch stops the run; otherwise TMetric would file all
of its time under freshly created anonymous tasks.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from core.ingestion_http import IngestionFetchError
from core.jira_ingestion import JiraConfig, JiraFetcher
from core.tmetric_ingestion import TMetricConfig, TMetricFetcher


def fetch_window(days: int, *, now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return `(start, end)` ending just before local midnight tonight."""

    now = timezone.localtime(now)
    end = now.replace(hour=23, minute=59, second=59, microsecond=0)
    return end - timedelta(days=days), end


class Command(BaseCommand):
    """Fetch JIRA issues and TMetric time into the time database."""

    help = "Fetch JIRA issues and TMetric booked time for the last N days."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument(
            "--days",
            type=int,
            default=0,
            help="Number of days of history to fetch.",
        )
        parser.add_argument(
            "--no-jira",
            action="store_true",
            help="Skip fetching JIRA issues.",
        )
        parser.add_argument(
            "--no-tmetric",
            action="store_true",
            help="Skip fetching TMetric time.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        days: int = options["days"]
        if days <= 0:
            self.stdout.write("days is less than 1. Not doing anything")
            return None

        fetchers: list[JiraFetcher | TMetricFetcher] = []
        if not options["no_jira"]:
            if not settings.JIRA_URL:
                raise CommandError("JIRA_URL is not configured; pass --no-jira to skip JIRA.")
            self.stdout.write("JIRA enabled")
            fetchers.append(
                JiraFetcher(
                    JiraConfig(
                        url=settings.JIRA_URL,
                        username=settings.JIRA_USERNAME,
                        password=settings.JIRA_PASSWORD,
                    ),
                    timeout=settings.INGESTION_HTTP_TIMEOUT,
                )
            )
        if not options["no_tmetric"]:
            if not settings.TMETRIC_ACCOUNT_ID:
                raise CommandError("TMETRIC_ACCOUNT_ID is not configured; pass --no-tmetric to skip TMetric.")
            self.stdout.write("TMetric enabled")
            fetchers.append(
                TMetricFetcher(
                    TMetricConfig(
                        account_id=settings.TMETRIC_ACCOUNT_ID,
                        email_suffix=settings.TMETRIC_EMAIL_SUFFIX,
                        cookies=settings.TMETRIC_COOKIES,
                    ),
                    timeout=settings.INGESTION_HTTP_TIMEOUT,
                )
            )

        start, end = fetch_window(days)
        for fetcher in fetchers:
            try:
                count = fetcher.fetch(start=start, end=end)
            except (IngestionFetchError, ValueError) as exc:
                raise CommandError(f"Error fetching from {fetcher.name}: {exc}") from exc
            self.stdout.write(f"{fetcher.name}: {count} records")

        self.stdout.write(self.style.SUCCESS("Finished successfully"))
        return None
