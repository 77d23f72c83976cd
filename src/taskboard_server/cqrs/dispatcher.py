"""Shared registration and dispatch logic for the single-handler buses.

Commands and queries are routed the same way: one handler per message type,
looked up by the message's ``type`` tag. The command and query buses only
differ in what they wrap around ``_dispatch``.
"""

import inspect
from collections.abc import Callable, Iterable
from typing import Any

from loguru import logger

from taskboard_server.logging import NO_CORRELATION_ID

from .core import HandlerRegistrationError, Message, MessageDispatchError, NoHandlerRegisteredError, message_type_of

T_Handler = Callable[[Any], Any]


class SingleHandlerBus:
    """Registry mapping each message type to exactly one handler.

    Registering a second handler for a type replaces the first and logs a
    warning. Handlers may be sync or async callables; awaitable results are
    awaited before being returned.
    """

    kind: str = "message"

    def __init__(self) -> None:
        self._handlers: dict[str, T_Handler] = {}
        logger.debug(f"{type(self).__name__} initialized")

    def register_handler(self, message_type: str, handler: T_Handler) -> None:
        """Register the handler for a message type.

        Args:
            message_type: The ``MessageType`` tag the handler serves
            handler: Callable taking the message, or a handler instance

        Raises:
            HandlerRegistrationError: If handler is not callable
        """
        if not callable(handler):
            raise HandlerRegistrationError(f"Handler must be callable: {handler}")

        key = str(message_type)
        if key in self._handlers:
            logger.warning(f"Overwriting existing {self.kind} handler for {key}")
        self._handlers[key] = handler
        logger.debug(f"Registered {self.kind} handler for {key}: {describe_handler(handler)}")

    def remove_handler(self, message_type: str) -> bool:
        """Remove the handler for a message type. Returns False if none was registered."""
        removed = self._handlers.pop(str(message_type), None)
        if removed is not None:
            logger.debug(f"Removed {self.kind} handler for {message_type}")
        return removed is not None

    def has_handler(self, message_type: str) -> bool:
        return str(message_type) in self._handlers

    def get_registered_types(self) -> list[str]:
        return list(self._handlers.keys())

    def get_handler(self, message_type: str) -> T_Handler | None:
        return self._handlers.get(str(message_type))

    def ensure_handlers(self, message_types: Iterable[str]) -> None:
        """Fail fast if any of ``message_types`` has no handler.

        Raises:
            NoHandlerRegisteredError: Listing every unhandled type
        """
        missing = sorted(str(t) for t in message_types if str(t) not in self._handlers)
        if missing:
            logger.error(f"Unhandled {self.kind} types: {', '.join(missing)}")
            raise NoHandlerRegisteredError(missing[0], self.kind, missing)
        logger.debug(f"All {self.kind} types have a registered handler")

    async def _dispatch(self, message: Message) -> Any:
        if not isinstance(message, Message):
            raise MessageDispatchError(f"{self.kind.capitalize()} must be a Message instance, got: {type(message).__name__}")

        message_type = message_type_of(message)
        handler = self._handlers.get(message_type)
        if handler is None:
            logger.error(f"No handler registered for {self.kind}: {message_type}")
            raise NoHandlerRegisteredError(message_type, self.kind)

        # Everything the handler logs, including events it publishes, carries the correlation id
        with logger.contextualize(correlation_id=message.correlation_id or NO_CORRELATION_ID):
            logger.trace(f"Dispatching {message_type} to {describe_handler(handler)}")
            try:
                result = handler(message)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as e:
                logger.opt(exception=e).error(
                    f"Error handling {self.kind} {message_type} (correlation_id={message.correlation_id}): {e}"
                )
                raise
            logger.trace(f"{self.kind.capitalize()} {message_type} handled")
            return result


def describe_handler(handler: Any) -> str:
    """Readable name of a handler for log lines."""
    if inspect.isfunction(handler) or inspect.ismethod(handler):
        return handler.__qualname__
    return type(handler).__name__
