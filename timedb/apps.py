"""Django app configuration for the time database."""

from __future__ import annotations

from django.apps import AppConfig


class TimeDBConfig(AppConfig):
    """AppConfig for engineers, tickets and booked time."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "timedb"
    verbose_name = "Time database"
