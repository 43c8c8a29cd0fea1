"""Database models for engineers, tickets and booked time."""

from __future__ import annotations

from django.db import models
from django.db.models.functions import Lower

SYSTEM_ANON = "anon"
SYSTEM_JIRA = "jira"
SYSTEM_TMETRIC = "tmet"

TICKET_TYPE_BUG = "bug"
TICKET_TYPE_FEATURE = "feat"
TICKET_TYPE_BAU = "bau"  # business as usual
TICKET_TYPE_TEST = "test"
TICKET_TYPE_INTERRUPT = "intr"
TICKET_TYPE_EPIC = "epic"
TICKET_TYPE_SPIKE = "spike"
TICKET_TYPE_OTHER = "other"
TICKET_TYPE_ANON = "anon"


class Engineer(models.Model):
    """A person that books time, identified by a lower-cased email address."""

    email = models.CharField(max_length=254)

    class Meta:
        verbose_name = "Engineer"
        verbose_name_plural = "Engineers"
        ordering = [Lower("email")]
        constraints = [
            models.UniqueConstraint(Lower("email"), name="uniq_engineer_email_ci"),
        ]

    def __str__(self) -> str:
        """Return the email address for admin/debug usage."""

        return self.email


class Ticket(models.Model):
    """A unit of work from an issue tracker, or an anonymous task.

    Anonymous tickets are created when booked time references a title that no
    tracker ticket carries; only those tickets have an `engineer`.
    """

    system = models.CharField(max_length=8)
    system_id = models.CharField(max_length=64, null=True, blank=True)
    title = models.CharField(max_length=512, db_index=True)
    ticket_type = models.CharField(max_length=8)
    story_points = models.IntegerField(default=0)
    engineer = models.ForeignKey(
        Engineer,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="anonymous_tickets",
    )
    create_time = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = "Ticket"
        verbose_name_plural = "Tickets"
        constraints = [
            models.UniqueConstraint(fields=["system", "system_id"], name="uniq_ticket_system_id"),
        ]

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"Ticket({self.system}:{self.system_id or '-'}, {self.ticket_type}, {self.title[:40]})"


class TimeEntry(models.Model):
    """An interval of time an engineer booked against a ticket."""

    engineer = models.ForeignKey(Engineer, on_delete=models.CASCADE, related_name="time_entries")
    system = models.CharField(max_length=8)
    system_id = models.CharField(max_length=64)
    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField()
    ticket = models.ForeignKey(Ticket, on_delete=models.CASCADE, related_name="time_entries")

    class Meta:
        verbose_name = "Time Entry"
        verbose_name_plural = "Time Entries"
        constraints = [
            models.UniqueConstraint(fields=["system", "system_id"], name="uniq_time_entry_system_id"),
        ]

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return (
            "TimeEntry("
            f"engineer={self.engineer_id}, ticket={self.ticket_id}, start={self.start_time.isoformat()}"
            ")"
        )
