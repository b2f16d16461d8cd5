from django.urls import path

from bookclub.handlers import (
    AccessRequestView,
    AdministratorSessionDetailView,
    AdministratorSessionListView,
    AttendanceView,
    BookSummaryView,
    ImportPurchasesView,
    SessionCallUrlView,
    UpcomingSessionListView,
)

urlpatterns = [
    path("access-requests", AccessRequestView.as_view(), name="access-request"),
    path("sessions", UpcomingSessionListView.as_view(), name="upcoming-session-list"),
    path(
        "sessions/<str:session_id>/attendance",
        AttendanceView.as_view(),
        name="session-attendance",
    ),
    path(
        "sessions/<str:session_id>/call-url",
        SessionCallUrlView.as_view(),
        name="session-call-url",
    ),
    path("book", BookSummaryView.as_view(), name="book-summary"),
    path("admin/sessions", AdministratorSessionListView.as_view(), name="admin-session-list"),
    path(
        "admin/sessions/<str:session_id>",
        AdministratorSessionDetailView.as_view(),
        name="admin-session-detail",
    ),
    path("admin/purchases/import", ImportPurchasesView.as_view(), name="admin-purchase-import"),
]
