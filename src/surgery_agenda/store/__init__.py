"""Persistence boundary: capability interfaces, deltas, the in-memory mirror and stores."""

from surgery_agenda.store.attachments import LocalAttachmentStore, attachment_path
from surgery_agenda.store.collection import SurgeryCollection, fold_delta
from surgery_agenda.store.deltas import DELTA_TYPES, SurgeryDelta, SurgeryDeleted, SurgeryInserted, SurgeryUpdated
from surgery_agenda.store.interface import AttachmentStore, StoreSnapshot, SurgeryStore
from surgery_agenda.store.memory import InMemorySurgeryStore

__all__ = [
    "DELTA_TYPES",
    "AttachmentStore",
    "InMemorySurgeryStore",
    "LocalAttachmentStore",
    "StoreSnapshot",
    "SurgeryCollection",
    "SurgeryDelta",
    "SurgeryDeleted",
    "SurgeryInserted",
    "SurgeryStore",
    "SurgeryUpdated",
    "attachment_path",
    "fold_delta",
]
