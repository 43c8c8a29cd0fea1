"""Views for the time report page and its JSON endpoints."""

from __future__ import annotations

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import render
from django.views.decorators.http import require_GET

from analysis.dto import MonthlyRecord
from analysis.payload import encode_monthly_report
from analysis.report_transform import ReportTransformer
from core.charting.render import ChartOptions, build_bar_chart
from core.reports import (
    configured_teams,
    email_to_engineer_id,
    team_monthly_report,
    user_monthly_report,
)
from core.teams import team_names, team_options
from timedb.models import Engineer

_TRUTHY = {"1", "true", "yes", "on"}


class SelectionError(Exception):
    """A report request named no valid user or team."""

    def __init__(self, message: str, *, status: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


@require_GET
def home(request: HttpRequest) -> HttpResponse:
    """Render the report page with the user and team selectors."""

    teams = configured_teams()
    show_users = settings.SHOW_USERS or (request.GET.get("show_users") or "").lower() in _TRUTHY
    return render(
        request,
        "core/home.html",
        {
            "users": Engineer.objects.all(),
            "teams": team_options(teams, email_to_engineer_id()),
            "show_users": show_users,
            "chart_options": ChartOptions(),
        },
    )


@require_GET
def user_report(request: HttpRequest) -> JsonResponse:
    """Return the monthly report for `?userid=<id>`."""

    try:
        records = _report_for_selection(request, allow_team=False)
    except SelectionError as exc:
        return JsonResponse({"ok": False, "error": exc.message}, status=exc.status)
    return JsonResponse(encode_monthly_report(records))


@require_GET
def monthly_report(request: HttpRequest) -> JsonResponse:
    """Return the monthly report for `?userid=<id>` or `?team=<name>`."""

    try:
        records = _report_for_selection(request, allow_team=True)
    except SelectionError as exc:
        return JsonResponse({"ok": False, "error": exc.message}, status=exc.status)
    return JsonResponse(encode_monthly_report(records))


@require_GET
def monthly_chart(request: HttpRequest) -> JsonResponse:
    """Return chart-ready series for the same selection as `monthly_report`.

    `?annotate=1` appends the bug percentage to each month label.
    """

    try:
        records = _report_for_selection(request, allow_team=True)
    except SelectionError as exc:
        return JsonResponse({"ok": False, "error": exc.message}, status=exc.status)

    annotate = (request.GET.get("annotate") or "").lower() in _TRUTHY
    series = ReportTransformer().transform(records, annotate)
    return JsonResponse(
        {
            "ok": True,
            **series.as_json(),
            "chart": build_bar_chart(series),
        }
    )


def _report_for_selection(request: HttpRequest, *, allow_team: bool) -> tuple[MonthlyRecord, ...]:
    raw_user = (request.GET.get("userid") or "").strip()
    team = (request.GET.get("team") or "").strip()

    if raw_user and team:
        raise SelectionError("Pass either userid or team, not both.")
    if raw_user:
        return user_monthly_report(_parse_user_id(raw_user))
    if team and allow_team:
        teams = configured_teams()
        if team not in team_names(teams):
            raise SelectionError(f"Unknown team: {team}", status=404)
        return team_monthly_report(team, teams=teams)
    if allow_team:
        raise SelectionError("No team or userid specified.")
    raise SelectionError("No userid specified.")


def _parse_user_id(raw: str) -> int:
    try:
        user_id = int(raw)
    except ValueError:
        raise SelectionError(f"Invalid userid: {raw}") from None
    if user_id <= 0:
        raise SelectionError(f"Invalid userid: {raw}")
    if not Engineer.objects.filter(pk=user_id).exists():
        raise SelectionError(f"Unknown userid: {user_id}", status=404)
    return user_id
