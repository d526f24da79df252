"""Surgery scheduling and reporting engine."""

from .settings import Settings, get_settings  # noqa: F401

__all__ = ["get_settings", "Settings"]
