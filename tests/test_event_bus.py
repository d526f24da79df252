"""Tests for the event bus system."""

from typing import Any

import pytest
from pydantic import BaseModel, Field

from surgery_agenda.event_bus import EventBus, Subscription
from surgery_agenda.event_bus.core import EventEmissionError, HandlerRegistrationError


# Test event models (don't start with "Test" to avoid pytest collection)
class SampleEvent(BaseModel):
    """Simple test event."""

    message: str = Field(..., description="Test message")
    value: int = Field(default=42, description="Test value")


class OtherSampleEvent(BaseModel):
    """Second event type."""

    data: dict[str, Any] = Field(..., description="Complex data")


async def simple_handler(event: SampleEvent) -> str:
    """Simple coroutine handler."""
    return f"processed: {event.message}"


def sync_handler(event: SampleEvent) -> str:
    """Plain function handler."""
    return f"sync: {event.message}"


async def failing_handler(event: SampleEvent) -> str:
    """Handler that always fails."""
    raise ValueError("Test handler failure")


class TestEventBus:
    """Test cases for EventBus."""

    def test_event_bus_initialization(self):
        bus = EventBus()
        assert bus.get_handler_count(SampleEvent) == 0

    def test_register_function_handler(self):
        bus = EventBus()
        bus.on(SampleEvent, simple_handler)

        assert bus.get_handler_count(SampleEvent) == 1
        assert bus.get_handler_count(OtherSampleEvent) == 0

    def test_register_handler_invalid_event_type(self):
        bus = EventBus()

        with pytest.raises(HandlerRegistrationError):
            bus.on(str, simple_handler)  # str is not a BaseModel

    def test_register_handler_invalid_handler(self):
        bus = EventBus()

        with pytest.raises(HandlerRegistrationError):
            bus.on(SampleEvent, "not_callable")

    def test_remove_handler(self):
        bus = EventBus()
        bus.on(SampleEvent, simple_handler)

        assert bus.remove_handler(SampleEvent, simple_handler) is True
        assert bus.get_handler_count(SampleEvent) == 0
        assert bus.remove_handler(SampleEvent, simple_handler) is False

    @pytest.mark.asyncio
    async def test_emit_and_wait_no_handlers(self):
        bus = EventBus()
        assert await bus.emit_and_wait(SampleEvent(message="test")) == []

    @pytest.mark.asyncio
    async def test_emit_and_wait_mixed_handlers(self):
        """Coroutines and plain functions both run, in registration order."""
        bus = EventBus()
        bus.on(SampleEvent, simple_handler)
        bus.on(SampleEvent, sync_handler)

        results = await bus.emit_and_wait(SampleEvent(message="test"))

        assert results == ["processed: test", "sync: test"]

    @pytest.mark.asyncio
    async def test_error_isolation(self):
        """A failing handler does not affect the others."""
        bus = EventBus()
        bus.on(SampleEvent, simple_handler)
        bus.on(SampleEvent, failing_handler)
        bus.on(SampleEvent, sync_handler)

        results = await bus.emit_and_wait(SampleEvent(message="test"))

        assert results[0] == "processed: test"
        assert isinstance(results[1], ValueError)
        assert str(results[1]) == "Test handler failure"
        assert results[2] == "sync: test"

    @pytest.mark.asyncio
    async def test_emit_and_wait_invalid_event_type(self):
        bus = EventBus()

        with pytest.raises(EventEmissionError):
            await bus.emit_and_wait("not_a_model")


class TestEmitSync:
    """Synchronous emission used by stores."""

    def test_emit_sync_outside_loop(self):
        bus = EventBus()
        bus.on(SampleEvent, sync_handler)

        assert bus.emit_sync(SampleEvent(message="a")) == ["sync: a"]

    def test_emit_sync_preserves_order(self):
        bus = EventBus()
        seen = []
        bus.on(SampleEvent, lambda e: seen.append(e.value))

        for value in range(5):
            bus.emit_sync(SampleEvent(message="m", value=value))

        assert seen == [0, 1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_emit_sync_inside_running_loop(self):
        bus = EventBus()
        bus.on(SampleEvent, simple_handler)

        assert bus.emit_sync(SampleEvent(message="loop")) == ["processed: loop"]
        bus.shutdown()


class TestSubscription:
    """Scoped handler registration."""

    def test_subscribe_multiple_types(self):
        bus = EventBus()
        seen = []
        subscription = bus.subscribe((SampleEvent, OtherSampleEvent), seen.append)

        assert isinstance(subscription, Subscription)
        assert subscription.active
        bus.emit_sync(SampleEvent(message="a"))
        bus.emit_sync(OtherSampleEvent(data={}))
        assert len(seen) == 2

    def test_close_stops_delivery(self):
        bus = EventBus()
        seen = []
        subscription = bus.subscribe(SampleEvent, seen.append)

        subscription.close()
        bus.emit_sync(SampleEvent(message="ignored"))

        assert seen == []
        assert not subscription.active
        assert bus.get_handler_count(SampleEvent) == 0

    def test_close_is_idempotent(self):
        bus = EventBus()
        subscription = bus.subscribe(SampleEvent, sync_handler)
        other = bus.subscribe(SampleEvent, sync_handler)

        subscription.close()
        subscription.close()

        # The second registration of the same function is untouched
        assert other.active
        assert bus.get_handler_count(SampleEvent) == 1

    def test_context_manager_releases_handler(self):
        bus = EventBus()
        with bus.subscribe(SampleEvent, sync_handler) as subscription:
            assert bus.get_handler_count(SampleEvent) == 1
        assert bus.get_handler_count(SampleEvent) == 0
        assert not subscription.active

    def test_handler_may_close_own_subscription(self):
        bus = EventBus()
        calls = []
        holder: dict[str, Subscription] = {}

        def once(event: SampleEvent) -> None:
            calls.append(event.message)
            holder["sub"].close()

        holder["sub"] = bus.subscribe(SampleEvent, once)
        bus.emit_sync(SampleEvent(message="first"))
        bus.emit_sync(SampleEvent(message="second"))

        assert calls == ["first"]
