"""Pytest fixtures shared across Django integration tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from timedb.models import SYSTEM_JIRA, SYSTEM_TMETRIC, Engineer, Ticket, TimeEntry

TEAMS_YAML = """\
teams:
  - name: Platform
    members:
      - Alice@example.com
      - bob@example.com
      - ghost@example.com
  - name: Empty
    members:
      - nobody@example.com
"""


@pytest.fixture
def engineer(db) -> Engineer:
    """Return an engineer with no booked time."""

    return Engineer.objects.create(email="alice@example.com")


@pytest.fixture
def teams_file(tmp_path: Path, settings) -> Path:
    """Write a teams YAML file and point settings at it."""

    path = tmp_path / "teams.yaml"
    path.write_text(TEAMS_YAML, encoding="utf-8")
    settings.TEAMS_CONFIG_PATH = path
    return path


@pytest.fixture
def book_time(db) -> Callable[..., TimeEntry]:
    """Return a factory that books `hours` on a ticket of `ticket_type`."""

    counter = {"n": 0}

    def _book(engineer: Engineer, *, start: datetime, hours: float, ticket_type: str) -> TimeEntry:
        counter["n"] += 1
        ticket = Ticket.objects.create(
            system=SYSTEM_JIRA,
            system_id=f"T-{counter['n']}",
            title=f"Ticket {counter['n']}",
            ticket_type=ticket_type,
        )
        return TimeEntry.objects.create(
            engineer=engineer,
            system=SYSTEM_TMETRIC,
            system_id=f"{ticket.pk}:{start.date().isoformat()}",
            start_time=start,
            end_time=start + timedelta(hours=hours),
            ticket=ticket,
        )

    return _book


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    The suite is runnable by intent:
    - `unit`: pure, fast tests with no database access.
    - `integration`: tests touching Django, database, views, commands, or IO.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
