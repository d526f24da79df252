"""CSV export of surgeries for the reports view."""

import csv
import io
from collections.abc import Iterable

from surgery_agenda.models.domain import Doctor, Hospital, InsurancePlan, Surgery
from surgery_agenda.reporting.labels import format_local, name_of, team_names
from surgery_agenda.scheduling.bucketing import sort_by_time

CSV_COLUMNS = (
    "Data",
    "Paciente",
    "Hospital",
    "Convênio",
    "Cirurgião Principal",
    "Equipe",
    "Status Autorização",
    "Status Cirurgia",
    "Honorários",
    "Custos Adicionais",
    "Valor Total",
)


def export_csv(
    surgeries: Iterable[Surgery],
    doctors: Iterable[Doctor],
    hospitals: Iterable[Hospital],
    insurance_plans: Iterable[InsurancePlan],
    tz: str = "UTC",
) -> str:
    """Render surgeries as CSV text.

    Scheduled surgeries come first in time order, followed by unscheduled ones
    in input order. Amounts are written as plain numbers with two decimals.
    """
    surgeries = list(surgeries)
    doctors, hospitals, insurance_plans = list(doctors), list(hospitals), list(insurance_plans)
    ordered = sort_by_time(surgeries) + [s for s in surgeries if s.scheduled_at is None]

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for surgery in ordered:
        writer.writerow(
            [
                format_local(surgery, tz),
                surgery.patient_name,
                name_of(hospitals, surgery.hospital_id),
                name_of(insurance_plans, surgery.insurance_id),
                name_of(doctors, surgery.main_surgeon_id),
                "; ".join(team_names(surgery, doctors)),
                surgery.auth_status.value,
                surgery.status.value,
                f"{surgery.total_fees:.2f}",
                f"{surgery.auxiliary_costs:.2f}",
                f"{surgery.total_cost:.2f}",
            ]
        )
    return buffer.getvalue()
