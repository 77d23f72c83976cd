"""Composition root for the message buses.

Builds one command bus, one query bus and one event bus per process, puts
them into the service registry and wires every handler class to its message
type. Handler classes declare their dependencies as annotated constructor
parameters; ``instantiate_handler`` resolves them from the registry.

Example:
    ```python
    registry = get_service_registry()
    register_all_services(registry)

    buses = build_message_buses()
    register_message_buses(registry, buses)
    register_message_handlers(buses, registry)  # raises if a command or query is unhandled
    ```
"""

import inspect
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, get_type_hints

from loguru import logger

from taskboard_server.services.registry import ServiceRegistry

from .command_bus import CommandBus
from .core import HandlerRegistrationError
from .event_bus import EventBus
from .query_bus import QueryBus
from .types import COMMAND_TYPES, QUERY_TYPES


@dataclass(frozen=True)
class MessageBuses:
    command_bus: CommandBus
    query_bus: QueryBus
    event_bus: EventBus


def build_message_buses() -> MessageBuses:
    """Create a fresh set of buses with no handlers registered."""
    return MessageBuses(command_bus=CommandBus(), query_bus=QueryBus(), event_bus=EventBus())


def register_message_buses(registry: ServiceRegistry, buses: MessageBuses) -> None:
    """Expose the buses through the service registry."""
    registry.register_singleton(MessageBuses, buses)
    registry.register_singleton(CommandBus, buses.command_bus)
    registry.register_singleton(QueryBus, buses.query_bus)
    registry.register_singleton(EventBus, buses.event_bus)
    logger.debug("Message buses registered in service registry")


def instantiate_handler(handler_class: type, registry: ServiceRegistry) -> Any:
    """Instantiate a handler class with dependency injection.

    Every annotated ``__init__`` parameter is looked up by type in the
    registry. Parameters with defaults may be missing from the registry.

    Raises:
        HandlerRegistrationError: If a required dependency is not registered
    """
    init = handler_class.__init__
    if init is object.__init__:
        return handler_class()

    hints = get_type_hints(init)
    parameters = list(inspect.signature(init).parameters.values())[1:]  # Skip 'self'

    kwargs = {}
    for param in parameters:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        annotation = hints.get(param.name)
        if isinstance(annotation, type) and registry.has(annotation):
            kwargs[param.name] = registry.get(annotation)
            logger.trace(f"Injected service '{annotation.__name__}' into handler class {handler_class.__name__}")
        elif param.default is inspect.Parameter.empty:
            raise HandlerRegistrationError(
                f"Cannot instantiate {handler_class.__name__}: dependency '{param.name}' ({annotation}) is not registered"
            )

    return handler_class(**kwargs)


def register_message_handlers(
    buses: MessageBuses,
    registry: ServiceRegistry,
    command_handlers: Mapping[str, type] | None = None,
    query_handlers: Mapping[str, type] | None = None,
    event_subscribers: Mapping[str, Sequence[type]] | None = None,
) -> None:
    """Instantiate and register every handler, then check coverage.

    Defaults to the application's handler maps. After wiring, every command
    and query type must have a handler; startup fails otherwise.

    Raises:
        HandlerRegistrationError: If a handler cannot be instantiated
        NoHandlerRegisteredError: If a command or query type is left unhandled
    """
    if command_handlers is None:
        from taskboard_server.commands import COMMAND_HANDLERS

        command_handlers = COMMAND_HANDLERS
    if query_handlers is None:
        from taskboard_server.queries import QUERY_HANDLERS

        query_handlers = QUERY_HANDLERS
    if event_subscribers is None:
        from taskboard_server.events import EVENT_SUBSCRIBERS

        event_subscribers = EVENT_SUBSCRIBERS

    logger.debug("Registering message handlers")

    for message_type, handler_class in command_handlers.items():
        buses.command_bus.register_handler(message_type, instantiate_handler(handler_class, registry))

    for message_type, handler_class in query_handlers.items():
        buses.query_bus.register_handler(message_type, instantiate_handler(handler_class, registry))

    for message_type, handler_classes in event_subscribers.items():
        for handler_class in handler_classes:
            buses.event_bus.subscribe(message_type, instantiate_handler(handler_class, registry))

    buses.command_bus.ensure_handlers(COMMAND_TYPES)
    buses.query_bus.ensure_handlers(QUERY_TYPES)

    logger.info(
        f"Message handlers registered: {len(buses.command_bus.get_registered_types())} commands, "
        f"{len(buses.query_bus.get_registered_types())} queries, "
        f"{len(buses.event_bus.get_subscribed_events())} event types with subscribers"
    )
