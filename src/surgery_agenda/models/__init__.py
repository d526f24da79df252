"""Data models for surgeries, catalog entries, filters and reports."""

from surgery_agenda.models.domain import CatalogEntry, Doctor, Hospital, InsurancePlan, Surgery
from surgery_agenda.models.enums import AuthStatus, NotificationType, SurgeryStatus, ViewMode
from surgery_agenda.models.filters import DateRange, StatusFilters
from surgery_agenda.models.reports import DashboardSummary, LabelValue, ReportSummary, WorkflowProgress

__all__ = [
    "AuthStatus",
    "CatalogEntry",
    "DashboardSummary",
    "DateRange",
    "Doctor",
    "Hospital",
    "InsurancePlan",
    "LabelValue",
    "NotificationType",
    "ReportSummary",
    "StatusFilters",
    "Surgery",
    "SurgeryStatus",
    "ViewMode",
    "WorkflowProgress",
]
