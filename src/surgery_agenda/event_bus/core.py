"""Event bus exceptions.

They are framework-agnostic and carry no knowledge of surgeries.
"""


class EventBusError(Exception):
    """Base exception for all event bus related errors."""


class HandlerRegistrationError(EventBusError):
    """Raised when handler registration fails.

    This occurs when:
    - The event type is not a Pydantic BaseModel
    - The handler is not callable
    """


class EventEmissionError(EventBusError):
    """Raised when the emitted object is not a Pydantic BaseModel instance."""
