"""Enums for surgery records.

Authorization and lifecycle are independent axes: a surgery can be Scheduled
while its authorization is still Pending.
"""

from enum import StrEnum


class AuthStatus(StrEnum):
    """Authorization state granted by the payer."""

    PENDING = "Pending"
    APPROVED = "Approved"
    DENIED = "Denied"

    @classmethod
    def _missing_(cls, value):
        # Labels stored by the legacy dashboard
        legacy = {"pendente": cls.PENDING, "liberado": cls.APPROVED, "recusado": cls.DENIED}
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
            return legacy.get(lowered)
        return None


class SurgeryStatus(StrEnum):
    """Lifecycle state of a surgery.

    The legacy three-state variant (Agendada, Realizada, Cancelada) maps onto
    Scheduled, Completed and Cancelled.
    """

    REQUESTED = "Requested"
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @classmethod
    def _missing_(cls, value):
        legacy = {
            "solicitada": cls.REQUESTED,
            "agendada": cls.SCHEDULED,
            "realizada": cls.COMPLETED,
            "cancelada": cls.CANCELLED,
        }
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
            return legacy.get(lowered)
        return None


class ViewMode(StrEnum):
    """Calendar layout."""

    MONTH = "month"
    WEEK = "week"


class NotificationType(StrEnum):
    """Kind of user-visible notification."""

    SUCCESS = "success"
    ERROR = "error"
