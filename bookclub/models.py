"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
Member, Purchase, Session and SessionAttendee store the aggregates;
PlannedSession and SessionAttendance store the session read model.
"""

from django.db import models


class Member(models.Model):
    """Persistence model for members."""

    member_id = models.CharField(primary_key=True, max_length=64)
    email_address = models.EmailField(max_length=255)
    time_zone = models.CharField(max_length=64)
    requested_access_at = models.DateTimeField()
    was_granted_access = models.BooleanField(default=False)
    access_token = models.CharField(max_length=64, unique=True, blank=True, null=True)

    class Meta:
        ordering = ["requested_access_at"]

    def __str__(self) -> str:
        return f"{self.member_id} <{self.email_address}>"


class Purchase(models.Model):
    """Persistence model for imported Leanpub purchases."""

    purchase_id = models.CharField(primary_key=True, max_length=64)
    claimed_by = models.CharField(max_length=64, blank=True, null=True)
    imported_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-imported_at"]

    def __str__(self) -> str:
        return self.purchase_id


class Session(models.Model):
    """Persistence model for sessions."""

    session_id = models.UUIDField(primary_key=True, editable=False)
    date = models.DateTimeField()
    description = models.TextField()
    maximum_number_of_attendees = models.PositiveIntegerField()

    class Meta:
        ordering = ["date"]

    def __str__(self) -> str:
        return f"{self.description} - {self.date}"


class SessionAttendee(models.Model):
    """Persistence model for the members registered for a session."""

    session = models.ForeignKey(Session, on_delete=models.CASCADE, related_name="attendees")
    member_id = models.CharField(max_length=64)
    registered_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["registered_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["session", "member_id"], name="unique_session_attendee"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.member_id} @ {self.session_id}"


class PlannedSession(models.Model):
    """Read model: a planned session, as projected from SessionWasPlanned."""

    session_id = models.UUIDField(primary_key=True, editable=False)
    date = models.DateTimeField()
    description = models.TextField()
    maximum_number_of_attendees = models.PositiveIntegerField()

    class Meta:
        ordering = ["date"]
        indexes = [
            models.Index(fields=["date"]),
        ]

    def __str__(self) -> str:
        return f"{self.description} - {self.date}"


class SessionAttendance(models.Model):
    """Read model: whether a member currently attends a session."""

    session_id = models.UUIDField()
    member_id = models.CharField(max_length=64)
    is_attending = models.BooleanField(default=False)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["session_id", "member_id"], name="unique_session_attendance"
            ),
        ]
        indexes = [
            models.Index(fields=["member_id", "is_attending"]),
        ]

    def __str__(self) -> str:
        return f"{self.member_id} @ {self.session_id}: {self.is_attending}"
