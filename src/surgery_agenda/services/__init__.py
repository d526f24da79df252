"""Services that read and write surgeries and catalog data."""

from surgery_agenda.services.catalog_service import CatalogService
from surgery_agenda.services.notifications import Notification, NotificationCenter
from surgery_agenda.services.scheduling_service import SchedulingService
from surgery_agenda.services.validation import validate_surgery

__all__ = [
    "CatalogService",
    "Notification",
    "NotificationCenter",
    "SchedulingService",
    "validate_surgery",
]
