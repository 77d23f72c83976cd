"""Event Bus Implementation.

This module provides the EventBus class that fans events out to subscribers.
Publishing is best effort: each subscriber runs as its own asyncio task, the
bus waits for all of them to settle, and failures are logged instead of being
raised to the publisher.

## Key Features

- **Concurrent Fan-out**: All subscribers of an event type run concurrently
- **Error Isolation**: A failing subscriber never affects its siblings or the publisher
- **Subscription Order**: Subscribers are kept (and started) in subscription order
- **Explicit Ownership**: One bus per process, constructed by the composition root

## Usage

```python
bus = EventBus()

async def send_verification_email(event: UserRegisteredEvent) -> None:
    ...

async def record_activity(event: UserRegisteredEvent) -> None:
    ...

bus.subscribe(MessageType.REGISTERED_USER_EVENT, send_verification_email)
bus.subscribe(MessageType.REGISTERED_USER_EVENT, record_activity)

# Returns once both subscribers have finished, whatever their outcome
await bus.publish(UserRegisteredEvent(payload=...))
```

"""

import asyncio
import inspect
from collections.abc import Callable
from typing import Any

from loguru import logger

from taskboard_server.logging import NO_CORRELATION_ID

from .core import Event, HandlerRegistrationError, MessageDispatchError, message_type_of
from .dispatcher import describe_handler

T_Subscriber = Callable[[Any], Any]


class EventBus:
    """Fan-out bus for events.

    Example:
        ```python
        bus.subscribe(MessageType.USER_VERIFIED_EVENT, handler)
        await bus.publish(UserVerifiedEvent(payload=UserVerifiedPayload(user_id="1", email="a@b.c")))
        ```
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[T_Subscriber]] = {}
        logger.debug("EventBus initialized")

    def subscribe(self, event_type: str, handler: T_Subscriber) -> None:
        """Append a subscriber for an event type.

        Args:
            event_type: The ``MessageType`` tag to subscribe to
            handler: Callable taking the event, sync or async

        Raises:
            HandlerRegistrationError: If handler is not callable
        """
        if not callable(handler):
            raise HandlerRegistrationError(f"Handler must be callable: {handler}")

        self._subscribers.setdefault(str(event_type), []).append(handler)
        logger.debug(f"Subscribed {describe_handler(handler)} to {event_type}")

    def unsubscribe(self, event_type: str, handler: T_Subscriber) -> bool:
        """Remove a subscriber by identity. Returns False if it was not subscribed."""
        handlers = self._subscribers.get(str(event_type), [])
        for index, candidate in enumerate(handlers):
            if candidate is handler:
                del handlers[index]
                logger.debug(f"Unsubscribed {describe_handler(handler)} from {event_type}")
                return True
        return False

    def clear_subscribers(self, event_type: str | None = None) -> None:
        """Clear subscribers for a specific event type or all events."""
        if event_type is None:
            self._subscribers.clear()
            logger.debug("Cleared all subscribers")
        elif str(event_type) in self._subscribers:
            del self._subscribers[str(event_type)]
            logger.debug(f"Cleared subscribers for {event_type}")

    def get_subscriber_count(self, event_type: str) -> int:
        return len(self._subscribers.get(str(event_type), []))

    def get_subscribers(self, event_type: str) -> list[T_Subscriber]:
        return list(self._subscribers.get(str(event_type), []))

    def get_subscribed_events(self) -> list[str]:
        """Get all event types that have at least one subscriber."""
        return [event_type for event_type, handlers in self._subscribers.items() if handlers]

    async def publish(self, event: Event) -> None:
        """Deliver an event to every subscriber and wait for all of them to settle.

        Subscriber failures are logged and absorbed; they are never raised here.

        Args:
            event: The event instance to publish

        Raises:
            MessageDispatchError: If event is not an Event instance
        """
        if not isinstance(event, Event):
            raise MessageDispatchError(f"Event must be an Event instance, got: {type(event).__name__}")

        event_type = message_type_of(event)
        handlers = list(self._subscribers.get(event_type, []))

        if not handlers:
            logger.debug(f"No subscribers for {event_type}")
            return

        logger.debug(f"Publishing {event_type} to {len(handlers)} subscribers (correlation_id={event.correlation_id})")

        # Subscriber tasks copy the current context, so they inherit the bound correlation id
        with logger.contextualize(correlation_id=event.correlation_id or NO_CORRELATION_ID):
            tasks = [asyncio.create_task(self._run_subscriber(handler, event)) for handler in handlers]
            results = await asyncio.gather(*tasks, return_exceptions=True)

        successful = sum(1 for r in results if r is True)
        failed = len(results) - successful
        if failed > 0:
            logger.warning(f"Event {event_type}: {successful} successful, {failed} failed subscribers")
        else:
            logger.trace(f"Event {event_type}: all {successful} subscribers succeeded")

    async def _run_subscriber(self, handler: T_Subscriber, event: Event) -> bool:
        """Run one subscriber, routing any failure to the log.

        Returns:
            True if the subscriber completed, False if it raised
        """
        try:
            logger.trace(f"Running subscriber {describe_handler(handler)} for {event.type}")
            result = handler(event)
            if inspect.isawaitable(result):
                await result
            return True
        except Exception as e:
            logger.opt(exception=e).error(
                f"Subscriber {describe_handler(handler)} failed for {event.type} (correlation_id={event.correlation_id}): {e}"
            )
            return False
