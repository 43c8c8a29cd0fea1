"""Team membership configuration.

Teams are declared in a YAML file::

    teams:
      - name: Platform
        members:
          - alice@example.com
          - bob@example.com

Members are matched to engineers by case-insensitive email.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

ALL_TEAMS = "all teams"


class TeamConfigError(ValueError):
    """Raised when the teams file cannot be interpreted."""


@dataclass(frozen=True, slots=True)
class TeamConfig:
    """A configured team and its member email addresses."""

    name: str
    members: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class TeamOption:
    """A team entry for the selector on the home page.

    Attributes:
        name: Team name, used as the selector value.
        members_with_no_data: Configured members without any booked time.
    """

    name: str
    members_with_no_data: tuple[str, ...] = ()

    @property
    def html_title(self) -> str:
        """Return the selector label, naming members that have no data."""

        if self.members_with_no_data:
            return f"{self.name}(no data for: {', '.join(self.members_with_no_data)})"
        return self.name


def parse_teams(payload: object) -> tuple[TeamConfig, ...]:
    """Validate a decoded teams document.

    Args:
        payload: Result of `yaml.safe_load` on the teams file.

    Returns:
        TeamConfig entries in file order.

    Raises:
        TeamConfigError: When the document shape is invalid.
    """

    if payload is None:
        return ()
    if not isinstance(payload, Mapping):
        raise TeamConfigError("Teams file must contain a mapping with a `teams` list.")
    entries = payload.get("teams") or []
    if not isinstance(entries, list):
        raise TeamConfigError("`teams` must be a list.")

    teams: list[TeamConfig] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping) or not isinstance(entry.get("name"), str):
            raise TeamConfigError(f"teams[{index}] must have a string `name`.")
        members = entry.get("members") or []
        if not isinstance(members, list) or not all(isinstance(m, str) for m in members):
            raise TeamConfigError(f"teams[{index}].members must be a list of emails.")
        teams.append(TeamConfig(name=entry["name"].strip(), members=tuple(m.strip() for m in members)))
    return tuple(teams)


def load_teams(path: Path) -> tuple[TeamConfig, ...]:
    """Load team configuration from `path`; a missing file means no teams."""

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning("Teams config %s not found; no teams configured", path)
        return ()
    try:
        payload = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise TeamConfigError(f"Invalid YAML in {path}") from exc
    return parse_teams(payload)


def team_names(teams: Iterable[TeamConfig]) -> set[str]:
    """Return every selectable team name, including the all-teams pseudo team."""

    return {ALL_TEAMS} | {team.name for team in teams}


def engineer_ids_for_team(
    team_name: str,
    teams: Iterable[TeamConfig],
    email_to_id: Mapping[str, int],
) -> list[int]:
    """Resolve a team name to engineer ids.

    Args:
        team_name: A configured team name or `ALL_TEAMS`.
        teams: Configured teams.
        email_to_id: Mapping of lower-cased email to engineer id.

    Returns:
        Ids of members with a known engineer row, without duplicates.
    """

    ids: list[int] = []
    for team in teams:
        if team_name != ALL_TEAMS and team.name != team_name:
            continue
        for email in team.members:
            engineer_id = email_to_id.get(email.lower())
            if engineer_id is not None and engineer_id not in ids:
                ids.append(engineer_id)
    return ids


def team_options(teams: Iterable[TeamConfig], email_to_id: Mapping[str, int]) -> list[TeamOption]:
    """Build selector options: the all-teams entry first, then each team."""

    options = [TeamOption(name=ALL_TEAMS)]
    for team in teams:
        missing = tuple(email for email in team.members if email.lower() not in email_to_id)
        options.append(TeamOption(name=team.name, members_with_no_data=missing))
    return options
