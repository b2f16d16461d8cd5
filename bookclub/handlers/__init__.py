from bookclub.handlers.views import (
    AccessRequestView,
    AdministratorSessionDetailView,
    AdministratorSessionListView,
    AttendanceView,
    BookSummaryView,
    ImportPurchasesView,
    SessionCallUrlView,
    UpcomingSessionListView,
)

__all__ = [
    "AccessRequestView",
    "AdministratorSessionDetailView",
    "AdministratorSessionListView",
    "AttendanceView",
    "BookSummaryView",
    "ImportPurchasesView",
    "SessionCallUrlView",
    "UpcomingSessionListView",
]
