"""Build monthly time reports from the time database.

This module coordinates ORM queries with the pure aggregation in
`analysis.monthly`.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from django.conf import settings
from django.utils import timezone

from analysis.dto import MonthlyRecord, TimeSpan
from analysis.monthly import aggregate_monthly
from core.teams import TeamConfig, engineer_ids_for_team, load_teams
from timedb.models import Engineer, TimeEntry


def history_start(now: datetime | None = None) -> datetime:
    """Return the earliest start time included in reports."""

    now = now or timezone.now()
    return now - timedelta(days=settings.HISTORY_DAYS)


def configured_teams() -> tuple[TeamConfig, ...]:
    """Load teams from the configured YAML file."""

    return load_teams(settings.TEAMS_CONFIG_PATH)


def email_to_engineer_id() -> dict[str, int]:
    """Return a lower-cased email to engineer id mapping."""

    return {email.lower(): pk for pk, email in Engineer.objects.values_list("id", "email")}


def build_monthly_report(engineer_ids: Iterable[int], *, since: datetime) -> tuple[MonthlyRecord, ...]:
    """Aggregate booked time for engineers into monthly records.

    Args:
        engineer_ids: Engineers to include. An empty iterable yields no records.
        since: Only entries starting after this moment are included.

    Returns:
        MonthlyRecord entries in chronological order, bucketed by local month.
    """

    ids = list(engineer_ids)
    if not ids:
        return ()
    rows = (
        TimeEntry.objects.filter(engineer_id__in=ids, start_time__gt=since)
        .order_by("start_time")
        .values_list("start_time", "end_time", "ticket__ticket_type")
    )
    spans = (
        TimeSpan(
            start=timezone.localtime(start),
            end=timezone.localtime(end),
            ticket_type=ticket_type,
        )
        for start, end, ticket_type in rows.iterator()
    )
    return aggregate_monthly(spans)


def user_monthly_report(engineer_id: int, *, now: datetime | None = None) -> tuple[MonthlyRecord, ...]:
    """Return the monthly report for a single engineer."""

    return build_monthly_report([engineer_id], since=history_start(now))


def team_monthly_report(
    team_name: str,
    *,
    teams: Iterable[TeamConfig],
    now: datetime | None = None,
) -> tuple[MonthlyRecord, ...]:
    """Return the monthly report covering every known member of a team."""

    ids = engineer_ids_for_team(team_name, teams, email_to_engineer_id())
    return build_monthly_report(ids, since=history_start(now))
