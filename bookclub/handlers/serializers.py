"""Serializers for request input and read-model responses."""

from zoneinfo import ZoneInfo

from django.conf import settings
from rest_framework import serializers


class AccessRequestSerializer(serializers.Serializer):
    """Input for POST /api/access-requests."""

    invoice_id = serializers.CharField(max_length=64)
    email_address = serializers.EmailField()
    time_zone = serializers.CharField(max_length=64)


class PlanSessionSerializer(serializers.Serializer):
    """Input for POST /api/admin/sessions.

    Dates without an offset are read in the author's time zone.
    """

    date = serializers.DateTimeField(default_timezone=ZoneInfo(settings.BOOKCLUB_AUTHOR_TIME_ZONE))
    description = serializers.CharField()
    maximum_number_of_attendees = serializers.IntegerField(min_value=1)


class UpcomingSessionSerializer(serializers.Serializer):
    """Serializer for UpcomingSession read models."""

    session_id = serializers.CharField()
    date = serializers.DateTimeField()
    description = serializers.CharField()
    member_is_registered_as_attendee = serializers.BooleanField()


class SessionForAdministratorSerializer(serializers.Serializer):
    """Serializer for SessionForAdministrator read models."""

    session_id = serializers.CharField()
    date = serializers.DateTimeField()
    description = serializers.CharField()
    maximum_number_of_attendees = serializers.IntegerField()
    number_of_attendees = serializers.IntegerField()


class BookSummarySerializer(serializers.Serializer):
    title = serializers.CharField()
    subtitle = serializers.CharField(allow_blank=True)
    url = serializers.URLField()
    cover_image_url = serializers.CharField()
