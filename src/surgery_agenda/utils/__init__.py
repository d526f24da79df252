"""Utility functions for the scheduling engine."""

from surgery_agenda.utils.id_generator import generate_record_id, to_base36
from surgery_agenda.utils.text import fold_accents, sanitize_filename

__all__ = [
    "fold_accents",
    "generate_record_id",
    "sanitize_filename",
    "to_base36",
]
