"""Command Bus Implementation.

Routes each command to its single registered handler and returns the
handler's result. Handler failures are logged at ERROR and re-raised to the
caller unchanged.

Example:
    ```python
    bus = CommandBus()
    bus.register_handler(MessageType.REGISTER_USER_COMMAND, RegisterUserHandler(users, events))

    user_id = await bus.execute(
        RegisterUserCommand(payload=RegisterUserPayload(name="Ada", email="ada@example.com", password="..."))
    )
    ```
"""

from typing import Any

from .core import Command
from .dispatcher import SingleHandlerBus
from .locks import KeyedLock


class CommandBus(SingleHandlerBus):
    """Single-handler bus for commands.

    Commands that expose an ``exclusive_key`` are serialized per key, so two
    registrations for the same email never interleave. Commands without a
    key run concurrently.
    """

    kind = "command"

    def __init__(self) -> None:
        super().__init__()
        self._locks = KeyedLock()

    async def execute(self, command: Command) -> Any:
        """Execute a command through its registered handler.

        Args:
            command: The command to execute

        Returns:
            Whatever the handler returns

        Raises:
            NoHandlerRegisteredError: If no handler is registered for ``command.type``
            Exception: Any exception raised by the handler, after logging
        """
        key = command.exclusive_key if isinstance(command, Command) else None
        if key is None:
            return await self._dispatch(command)

        async with self._locks.hold(key):
            return await self._dispatch(command)
