"""Service-layer functions for the time database.

Fetchers hand over plain records; these functions resolve engineers and
tickets and upsert rows keyed by `(system, system_id)`. Each batch runs in a
single transaction so a failed import leaves no partial state behind.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from django.db import transaction
from django.db.models import F

from timedb.models import SYSTEM_ANON, TICKET_TYPE_ANON, Engineer, Ticket, TimeEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IssueRecord:
    """A tracker issue as delivered by an ingestion fetcher."""

    system: str
    system_id: str
    title: str
    ticket_type: str
    story_points: int = 0
    create_time: datetime | None = None


@dataclass(frozen=True, slots=True)
class TimeRecord:
    """A booked time interval referencing a task by title.

    Sources that only report per-day summaries produce at most one record per
    task per day; the synthesized system id relies on that.
    """

    system: str
    email: str
    task_title: str
    start: datetime
    end: datetime


@dataclass
class _Caches:
    title_to_ticket: dict[str, int | None] = field(default_factory=dict)
    email_to_engineer: dict[str, int] = field(default_factory=dict)


def insert_issues(issues: Iterable[IssueRecord]) -> tuple[int, int]:
    """Create or update tickets for a batch of tracker issues.

    Args:
        issues: Issue records to upsert.

    Returns:
        `(created, updated)` counts.
    """

    created = 0
    updated = 0
    with transaction.atomic():
        for issue in issues:
            affected = Ticket.objects.filter(system=issue.system, system_id=issue.system_id).update(
                title=issue.title,
                ticket_type=issue.ticket_type,
                story_points=issue.story_points,
            )
            if affected:
                updated += 1
                continue
            Ticket.objects.create(
                system=issue.system,
                system_id=issue.system_id,
                title=issue.title,
                ticket_type=issue.ticket_type,
                story_points=issue.story_points,
                create_time=issue.create_time,
            )
            created += 1
    return created, updated


def insert_times(times: Iterable[TimeRecord]) -> tuple[int, int]:
    """Create or update time entries for a batch of booked intervals.

    Engineers are created on first sight. Titles that match no ticket get an
    anonymous ticket owned by the engineer.

    Args:
        times: Time records to upsert.

    Returns:
        `(created, updated)` counts.
    """

    caches = _Caches()
    created = 0
    updated = 0
    with transaction.atomic():
        for record in times:
            engineer_id = _engineer_for_email(record.email, caches=caches)
            ticket_id = _ticket_for_title(record.task_title, engineer_id=engineer_id, caches=caches)
            system_id = time_system_id_for_day(ticket_id, record.start)
            affected = TimeEntry.objects.filter(system=record.system, system_id=system_id).update(
                start_time=record.start,
                end_time=record.end,
            )
            if affected:
                updated += 1
                continue
            TimeEntry.objects.create(
                engineer_id=engineer_id,
                system=record.system,
                system_id=system_id,
                start_time=record.start,
                end_time=record.end,
                ticket_id=ticket_id,
            )
            created += 1
    return created, updated


def anonymous_task_title(engineer_id: int, title: str) -> str:
    """Return the title used for an engineer's anonymous copy of a task."""

    return f"anon({engineer_id}): {title}"


def time_system_id_for_day(ticket_id: int, start: datetime) -> str:
    """Synthesize a stable time entry id for one ticket on one day.

    If a user later rewrites history so a task no longer appears on a day at
    all, the old entry survives and the day reports extra hours.
    """

    return f"{ticket_id}:{start.date().isoformat()}"


def _engineer_for_email(email: str, *, caches: _Caches) -> int:
    if email in caches.email_to_engineer:
        return caches.email_to_engineer[email]
    engineer = Engineer.objects.filter(email__iexact=email).first()
    if engineer is None:
        engineer = Engineer.objects.create(email=email.lower())
    caches.email_to_engineer[email] = engineer.pk
    return engineer.pk


def _ticket_for_title(title: str, *, engineer_id: int, caches: _Caches) -> int:
    ticket_id = _ticket_id_by_title(title, caches=caches)
    if ticket_id is not None:
        return ticket_id
    anon_title = anonymous_task_title(engineer_id, title)
    ticket_id = _ticket_id_by_title(anon_title, caches=caches)
    if ticket_id is not None:
        return ticket_id

    logger.info(
        "Unable to find ticket %r for engineer %s; creating an anonymous task",
        title,
        engineer_id,
    )
    ticket = Ticket.objects.create(
        system=SYSTEM_ANON,
        title=anon_title,
        ticket_type=TICKET_TYPE_ANON,
        engineer_id=engineer_id,
    )
    caches.title_to_ticket[anon_title] = ticket.pk
    return ticket.pk


def _ticket_id_by_title(title: str, *, caches: _Caches) -> int | None:
    if title in caches.title_to_ticket:
        return caches.title_to_ticket[title]
    ticket_id = (
        Ticket.objects.filter(title=title)
        .order_by(F("create_time").desc(nulls_last=True), "-id")
        .values_list("id", flat=True)
        .first()
    )
    caches.title_to_ticket[title] = ticket_id
    return ticket_id
