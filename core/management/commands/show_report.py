"""Fetch a report from a running server and print the rendered chart payload."""

from __future__ import annotations

import asyncio
import json

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from core.charting.render import ChartJsSink, ChartOptions
from core.client import ReportClient
from core.selection import ReportDashboard, ReportSelector, SelectionKind


class Command(BaseCommand):
    """Run the selection -> fetch -> transform -> render pipeline once."""

    help = "Fetch a monthly report over HTTP and print its Chart.js payload as JSON."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("--base-url", default="http://localhost:8000", help="Report server root URL.")
        target = parser.add_mutually_exclusive_group(required=True)
        target.add_argument("--user", help="Engineer id to report on.")
        target.add_argument("--team", help="Team name to report on.")
        parser.add_argument("--annotate", action="store_true", help="Append the bug percentage to labels.")
        parser.add_argument("--width", type=int, default=ChartOptions().width, help="Chart width in pixels.")
        parser.add_argument("--height", type=int, default=ChartOptions().height, help="Chart height in pixels.")

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        sink = ChartJsSink()
        dashboard = ReportDashboard(
            ReportClient(options["base_url"], timeout=settings.REPORT_CLIENT_TIMEOUT),
            sink,
            options=ChartOptions(width=options["width"], height=options["height"]),
            annotate_bug_percent=options["annotate"],
        )
        selector = ReportSelector()
        dashboard.attach(selector)

        if options["user"] is not None:
            asyncio.run(selector.select(SelectionKind.user, options["user"]))
        else:
            asyncio.run(selector.select(SelectionKind.team, options["team"]))

        panel = sink.panels[dashboard.target]
        if panel.error is not None:
            raise CommandError(panel.error)
        self.stdout.write(json.dumps(panel.as_json(), indent=2))
        return None
