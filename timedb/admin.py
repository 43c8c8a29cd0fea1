"""Admin registrations for time database models."""

from __future__ import annotations

from django.contrib import admin

from timedb.models import Engineer, Ticket, TimeEntry


@admin.register(Engineer)
class EngineerAdmin(admin.ModelAdmin):
    list_display = ("id", "email")
    search_fields = ("email",)


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ("id", "system", "system_id", "ticket_type", "title", "story_points", "create_time")
    list_filter = ("system", "ticket_type")
    search_fields = ("title", "system_id")


@admin.register(TimeEntry)
class TimeEntryAdmin(admin.ModelAdmin):
    """Booked time, newest first."""

    list_display = ("id", "engineer", "ticket", "start_time", "end_time", "system")
    list_filter = ("system",)
    list_select_related = ("engineer", "ticket")
    ordering = ("-start_time",)
