"""Event Bus Implementation.

The bus carries change-feed deltas from a store to whoever mirrors it. Events
are delivered one at a time in the order they are emitted; the handlers of a
single event run concurrently and are isolated from each other's failures.

## Usage

```python
from surgery_agenda.event_bus import EventBus
from surgery_agenda.store.deltas import SurgeryDeleted, SurgeryInserted, SurgeryUpdated

bus = EventBus()

with bus.subscribe((SurgeryInserted, SurgeryUpdated, SurgeryDeleted), collection.apply):
    bus.emit_sync(SurgeryDeleted(surgery_id="abc"))
# Leaving the block releases the handler
```

"""

import asyncio
import concurrent.futures
import inspect
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel

from .core import EventEmissionError, HandlerRegistrationError

T_Event = TypeVar("T_Event", bound=BaseModel)
T_Handler = Callable[..., Any]


class Subscription:
    """Scoped registration of one handler for one or more event types.

    ``close()`` (or leaving the ``with`` block) removes the handler; closing
    twice is harmless.
    """

    def __init__(self, bus: "EventBus", event_types: tuple[type[BaseModel], ...], handler: T_Handler) -> None:
        self._bus = bus
        self._event_types = event_types
        self._handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    @property
    def event_types(self) -> tuple[type[BaseModel], ...]:
        return self._event_types

    def close(self) -> None:
        if not self._active:
            return
        for event_type in self._event_types:
            self._bus.remove_handler(event_type, self._handler)
        self._active = False
        logger.debug(f"Subscription closed for {[t.__name__ for t in self._event_types]}")

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class EventBus:
    """Framework-agnostic event bus for the change feed.

    Handlers may be plain functions or coroutine functions.

    Example:
        ```python
        bus = EventBus()
        bus.on(SurgeryUpdated, collection.apply)
        bus.emit_sync(SurgeryUpdated(surgery=surgery))
        ```
    """

    def __init__(self) -> None:
        self._handlers: dict[type[BaseModel], list[T_Handler]] = {}
        self._sync_executor: concurrent.futures.ThreadPoolExecutor | None = None
        logger.debug("EventBus initialized")

    def on(self, event_type: type[T_Event], handler: T_Handler) -> None:
        """Register a handler for an event type.

        Raises:
            HandlerRegistrationError: If event_type is not BaseModel or handler is not callable
        """
        if not (isinstance(event_type, type) and issubclass(event_type, BaseModel)):
            raise HandlerRegistrationError(f"Event type must be a Pydantic BaseModel subclass, got: {event_type}")

        if not callable(handler):
            raise HandlerRegistrationError(f"Handler must be callable: {handler}")

        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Registered handler for {event_type.__name__}: {handler}")

    def subscribe(self, event_types: type[BaseModel] | Iterable[type[BaseModel]], handler: T_Handler) -> Subscription:
        """Register ``handler`` for every event type and return the handle releasing it."""
        if isinstance(event_types, type):
            event_types = (event_types,)
        event_types = tuple(event_types)
        for event_type in event_types:
            self.on(event_type, handler)
        return Subscription(self, event_types, handler)

    def remove_handler(self, event_type: type[T_Event], handler: T_Handler) -> bool:
        """Remove a specific handler for an event type."""
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Removed handler for {event_type.__name__}: {handler}")
                return True
            except ValueError:
                pass
        return False

    def get_handler_count(self, event_type: type[T_Event]) -> int:
        """Get the number of handlers registered for an event type."""
        return len(self._handlers.get(event_type, []))

    def emit_sync(self, event: T_Event) -> list[Any]:
        """Emit an event from synchronous code and wait for all handlers.

        Stores call this after each acknowledged write so deltas reach
        subscribers in write order.

        Returns:
            List of results from all handlers (including exceptions)
        """
        try:
            asyncio.get_running_loop()
            # Inside an async context - run the coroutine on a helper thread
            if self._sync_executor is None:
                self._sync_executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
                logger.debug("Created sync executor for EventBus")
            future = self._sync_executor.submit(asyncio.run, self.emit_and_wait(event))
            return future.result()
        except RuntimeError:
            return asyncio.run(self.emit_and_wait(event))

    def shutdown(self) -> None:
        """Release the thread pool used for synchronous emission."""
        if self._sync_executor is not None:
            logger.debug("Shutting down EventBus sync executor")
            self._sync_executor.shutdown(wait=True)
            self._sync_executor = None
        logger.debug("EventBus shutdown complete")

    async def emit_and_wait(self, event: T_Event) -> list[Any]:
        """Emit an event and wait for all handlers to complete.

        Returns:
            List of results from all handlers (including exceptions)

        Raises:
            EventEmissionError: If event is not a BaseModel instance
        """
        if not isinstance(event, BaseModel):
            raise EventEmissionError(f"Event must be a BaseModel instance, got: {type(event).__name__}")

        event_type = type(event)
        # Snapshot: a handler may close its own subscription while running
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logger.debug(f"No handlers registered for {event_type.__name__}")
            return []

        logger.debug(f"Emitting {event_type.__name__} to {len(handlers)} handlers")

        results = await asyncio.gather(*(self._execute_handler(h, event) for h in handlers), return_exceptions=True)

        successful = sum(1 for r in results if not isinstance(r, Exception))
        failed = len(results) - successful
        if failed > 0:
            logger.warning(f"Event {event_type.__name__}: {successful} successful, {failed} failed handlers")
        logger.trace(f"Event {event_type.__name__} results: {results}")

        return results

    async def _execute_handler(self, handler: T_Handler, event: T_Event) -> Any:
        """Execute a single handler, returning its result or the exception it raised."""
        try:
            result = handler(event)
            if inspect.isawaitable(result):
                result = await result
            logger.trace(f"Handler {handler} completed successfully")
            return result

        except (ValueError, TypeError, KeyError, RuntimeError, AttributeError) as e:
            logger.error(f"Handler {handler} failed: {e}")
            return e
