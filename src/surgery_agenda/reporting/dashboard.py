"""Home dashboard figures and the per-surgery workflow tracker."""

from collections.abc import Iterable
from datetime import date

from surgery_agenda.models.domain import Surgery
from surgery_agenda.models.enums import AuthStatus, SurgeryStatus
from surgery_agenda.models.reports import DashboardSummary, WorkflowProgress
from surgery_agenda.scheduling.bucketing import local_date, surgeries_on

WORKFLOW_STEPS = ("Scheduled", "Authorized", "Completed", "Post-op")


def workflow_progress(surgery: Surgery) -> WorkflowProgress:
    """Which workflow steps are done and which one needs attention next.

    Steps: Scheduled, Authorized (payer approved), Completed, Post-op
    (post-operative attachment uploaded). Cancelled surgeries have no active
    step.
    """
    if surgery.status == SurgeryStatus.CANCELLED:
        return WorkflowProgress(surgery_id=surgery.id, cancelled=True)

    done = {
        "Scheduled": surgery.is_scheduled,
        "Authorized": surgery.auth_status == AuthStatus.APPROVED,
        "Completed": surgery.status == SurgeryStatus.COMPLETED,
        "Post-op": surgery.post_op_attachment is not None,
    }
    completed_steps = tuple(step for step in WORKFLOW_STEPS if done[step])
    active_step = next((step for step in WORKFLOW_STEPS if not done[step]), None)
    return WorkflowProgress(surgery_id=surgery.id, completed_steps=completed_steps, active_step=active_step)


def month_revenue(surgeries: Iterable[Surgery], today: date, tz: str = "UTC") -> float:
    """Fees of Completed surgeries dated in the month of ``today``."""
    total = 0.0
    for surgery in surgeries:
        if surgery.status != SurgeryStatus.COMPLETED:
            continue
        day = local_date(surgery, tz)
        if day is not None and (day.year, day.month) == (today.year, today.month):
            total += surgery.total_fees
    return total


def dashboard_summary(surgeries: Iterable[Surgery], today: date, tz: str = "UTC") -> DashboardSummary:
    surgeries = list(surgeries)
    todays = surgeries_on(surgeries, today, tz)
    return DashboardSummary(
        surgeries_today=todays,
        pending_auth_count=sum(1 for s in surgeries if s.auth_status == AuthStatus.PENDING),
        month_revenue=month_revenue(surgeries, today, tz),
        workflows=[workflow_progress(s) for s in todays],
    )
