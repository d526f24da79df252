"""Global constants for the scheduling engine.

This module defines constants used throughout the package to avoid
hardcoded strings and make the codebase more maintainable.
"""

# Filter value that disables a predicate
FILTER_ALL = "all"

# Fallback labels for references that no longer resolve
UNKNOWN_LABEL = "Unknown"
NOT_AVAILABLE_LABEL = "N/A"

# Calendar headers, Sunday first
WEEKDAY_LABELS = ("Dom", "Seg", "Ter", "Qua", "Qui", "Sex", "Sáb")
WEEKDAY_NAMES = ("domingo", "segunda-feira", "terça-feira", "quarta-feira", "quinta-feira", "sexta-feira", "sábado")
MONTH_NAMES = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)

# Default clock time for surgeries created from a calendar day
DEFAULT_SURGERY_HOUR = 10

# Attachment slots on a surgery record
ATTACHMENT_SLOTS = ("pre_op_attachment", "post_op_attachment")
