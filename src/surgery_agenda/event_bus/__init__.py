"""Event bus used as the in-process change feed.

Stores publish insert/update/delete deltas on a bus; the in-memory surgery
collection subscribes to them. Subscriptions are scoped handles that release
their handlers on ``close()``.

- **Pydantic Event Models**: deltas are BaseModel instances
- **Sync or Async Handlers**: plain functions and coroutines are both accepted
- **Error Isolation**: a failing handler doesn't affect the others
- **Ordered Delivery**: ``emit_sync`` returns only after every handler ran
"""

from .bus import EventBus, Subscription
from .core import EventBusError

__all__ = [
    "EventBus",
    "EventBusError",
    "Subscription",
]
