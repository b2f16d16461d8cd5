from django.contrib import admin

from bookclub.models import Member, PlannedSession, Purchase, Session, SessionAttendance, SessionAttendee


class SessionAttendeeInline(admin.TabularInline):
    model = SessionAttendee
    extra = 0


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display = ["member_id", "email_address", "was_granted_access", "requested_access_at"]
    search_fields = ["member_id", "email_address"]
    list_filter = ["was_granted_access"]
    exclude = ["access_token"]


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = ["purchase_id", "claimed_by", "imported_at"]
    search_fields = ["purchase_id", "claimed_by"]


@admin.register(Session)
class SessionAdmin(admin.ModelAdmin):
    list_display = ["description", "date", "maximum_number_of_attendees"]
    inlines = [SessionAttendeeInline]


@admin.register(PlannedSession)
class PlannedSessionAdmin(admin.ModelAdmin):
    list_display = ["description", "date", "maximum_number_of_attendees"]


@admin.register(SessionAttendance)
class SessionAttendanceAdmin(admin.ModelAdmin):
    list_display = ["session_id", "member_id", "is_attending"]
    list_filter = ["is_attending"]
