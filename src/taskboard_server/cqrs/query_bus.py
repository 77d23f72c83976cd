"""Query Bus Implementation.

Same routing as the command bus, without exclusivity: queries never mutate
state, so they always run concurrently.
"""

from typing import Any

from .core import Query
from .dispatcher import SingleHandlerBus


class QueryBus(SingleHandlerBus):
    """Single-handler bus for queries."""

    kind = "query"

    async def execute(self, query: Query) -> Any:
        """Execute a query through its registered handler and return the result.

        Raises:
            NoHandlerRegisteredError: If no handler is registered for ``query.type``
        """
        return await self._dispatch(query)
