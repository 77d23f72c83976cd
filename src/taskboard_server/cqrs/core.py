"""Core CQRS Components.

This module contains the message value types, handler base classes and errors
shared by the command, query and event buses.

## Key Components

- **MessageMetadata**: Correlation id, acting user, timestamp and source
- **Command / Query / Event**: Frozen Pydantic messages with a constant ``type`` tag
- **CommandHandler / QueryHandler / EventHandler**: Base classes for handlers
- **CqrsError**: Base exception for all bus related errors

## Usage Example

```python
from pydantic import BaseModel, ConfigDict
from typing import ClassVar

class CreateProjectPayload(BaseModel):
    model_config = ConfigDict(frozen=True)
    name: str

class CreateProjectCommand(Command):
    type: ClassVar[str] = "CREATE_PROJECT_COMMAND"
    payload: CreateProjectPayload

class CreateProjectHandler(CommandHandler[CreateProjectCommand]):
    def __init__(self, projects: ProjectService):
        self.projects = projects

    async def handle(self, command: CreateProjectCommand) -> str:
        return self.projects.create(command.payload.name)
```

Handler classes receive their dependencies through their constructor; the
composition root resolves them from the ``ServiceRegistry``.

"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from taskboard_server.utils.clock import utcnow


class MessageMetadata(BaseModel):
    """Metadata threaded opaquely through a command and the events it triggers.

    ``timestamp`` defaults to the construction time. The buses never interpret
    ``correlation_id``; handlers use it to correlate log lines.
    """

    model_config = ConfigDict(frozen=True)

    correlation_id: str | None = None
    user_id: str | None = None
    timestamp: datetime = Field(default_factory=utcnow)
    source: str | None = None


class Message(BaseModel):
    """Base class of every command, query and event.

    Subclasses set the ``type`` class variable to a member of ``MessageType``
    and narrow ``payload`` to their own payload model.
    """

    model_config = ConfigDict(frozen=True)

    type: ClassVar[str]

    payload: Any = None
    metadata: MessageMetadata = Field(default_factory=MessageMetadata)

    @property
    def correlation_id(self) -> str | None:
        return self.metadata.correlation_id


class Command(Message):
    """An instruction to change state, handled by exactly one handler."""

    @property
    def exclusive_key(self) -> str | None:
        """Key serializing in-flight commands that touch the same entity.

        ``None`` (the default) means the command runs without exclusion.
        """
        return None


class Query(Message):
    """A read request, handled by exactly one handler."""


class Event(Message):
    """A notification that something happened, fanned out to any subscribers."""


def message_type_of(message: Message) -> str:
    """Return the ``type`` tag of a message.

    Raises:
        MessageDispatchError: If the message class never set its ``type``
    """
    message_type = getattr(message, "type", None)
    if not message_type:
        raise MessageDispatchError(f"{type(message).__name__} has no message type")
    return message_type


class CommandHandler[T_Command: Command](ABC):
    """Base class for command handlers.

    Errors raised by ``handle`` propagate to the caller of ``CommandBus.execute``.
    """

    @abstractmethod
    async def handle(self, command: T_Command) -> Any:
        """Handle the command and return its result."""

    def __call__(self, command: T_Command) -> Any:
        return self.handle(command)


class QueryHandler[T_Query: Query](ABC):
    """Base class for query handlers."""

    @abstractmethod
    async def handle(self, query: T_Query) -> Any:
        """Handle the query and return its result."""

    def __call__(self, query: T_Query) -> Any:
        return self.handle(query)


class EventHandler[T_Event: Event](ABC):
    """Base class for event subscribers.

    Exceptions raised by ``handle`` are caught and logged by the event bus;
    they never reach the publisher.
    """

    @abstractmethod
    async def handle(self, event: T_Event) -> None:
        """Handle the event."""

    def __call__(self, event: T_Event) -> Any:
        return self.handle(event)


class CqrsError(Exception):
    """Base exception for all bus related errors.

    Use this for catching any bus related error:
        ```python
        try:
            await command_bus.execute(command)
        except CqrsError as e:
            logger.error(f"Bus error: {e}")
        ```
    """


class HandlerRegistrationError(CqrsError):
    """Raised when a handler cannot be registered or instantiated.

    This occurs when:
    - The handler is not callable
    - A handler constructor dependency is missing from the service registry
    """


class MessageDispatchError(CqrsError):
    """Raised when something that is not a message is handed to a bus."""


class NoHandlerRegisteredError(CqrsError):
    """Raised when a command or query type has no registered handler.

    This is a configuration error: the message type enumeration and the
    registered handler set have drifted apart.
    """

    def __init__(self, message_type: str, kind: str = "command", missing: Sequence[str] = ()):
        self.message_type = message_type
        self.kind = kind
        self.missing = tuple(missing) or (message_type,)
        super().__init__(f"No handler registered for {kind}: {', '.join(self.missing)}")
