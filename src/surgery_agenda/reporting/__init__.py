"""Reports, dashboard figures, labels and export."""

from surgery_agenda.reporting.aggregation import aggregate, filter_for_report, within_range
from surgery_agenda.reporting.dashboard import dashboard_summary, workflow_progress
from surgery_agenda.reporting.export import export_csv
from surgery_agenda.reporting.formatting import format_brl
from surgery_agenda.reporting.labels import name_of, surgery_tooltip

__all__ = [
    "aggregate",
    "dashboard_summary",
    "export_csv",
    "filter_for_report",
    "format_brl",
    "name_of",
    "surgery_tooltip",
    "within_range",
    "workflow_progress",
]
