"""Command, query and event buses.

This package provides the in-process message plumbing of the server:

- **CommandBus**: one handler per command type; handler errors propagate to the caller
- **QueryBus**: one handler per query type, same routing as commands
- **EventBus**: zero or more subscribers per event type; failures are logged, never raised
- **MessageType**: the closed enumeration of every message the system knows

## Quick Start

```python
from taskboard_server.cqrs import CommandBus, EventBus, MessageType

command_bus = CommandBus()
command_bus.register_handler(MessageType.REGISTER_USER_COMMAND, handler)
result = await command_bus.execute(RegisterUserCommand(payload=...))
```

Buses are plain objects. The application builds one of each at startup
(see ``taskboard_server.cqrs.setup``) and shares them through the service
registry; nothing here is a module-level singleton.

"""

from .command_bus import CommandBus
from .core import (
    Command,
    CommandHandler,
    CqrsError,
    Event,
    EventHandler,
    HandlerRegistrationError,
    Message,
    MessageDispatchError,
    MessageMetadata,
    NoHandlerRegisteredError,
    Query,
    QueryHandler,
)
from .event_bus import EventBus
from .locks import KeyedLock
from .query_bus import QueryBus
from .types import COMMAND_TYPES, EVENT_TYPES, QUERY_TYPES, MessageType

__all__ = [
    "COMMAND_TYPES",
    "EVENT_TYPES",
    "QUERY_TYPES",
    "Command",
    "CommandBus",
    "CommandHandler",
    "CqrsError",
    "Event",
    "EventBus",
    "EventHandler",
    "HandlerRegistrationError",
    "KeyedLock",
    "Message",
    "MessageDispatchError",
    "MessageMetadata",
    "MessageType",
    "NoHandlerRegisteredError",
    "Query",
    "QueryBus",
    "QueryHandler",
]
