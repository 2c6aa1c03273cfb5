"""Domain layer for tutordesk application."""

# Services are imported lazily: the database mappers import the entities
# from this package, and the services import the mappers.
_SERVICES = {
    "BillingService": "tutordesk.domain.billing",
    "ClientService": "tutordesk.domain.clients",
    "LedgerService": "tutordesk.domain.ledger",
    "NoticeService": "tutordesk.domain.notices",
    "ReportService": "tutordesk.domain.reports",
    "ScheduleService": "tutordesk.domain.schedule",
    "SessionManager": "tutordesk.domain.session",
    "StaffService": "tutordesk.domain.staff",
    "TaskService": "tutordesk.domain.tasks",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
