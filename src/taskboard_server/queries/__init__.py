"""Query handlers for the closed set of query types."""

from taskboard_server.cqrs import MessageType, QueryHandler
from taskboard_server.queries.user_handlers import GetUserByIdHandler

QUERY_HANDLERS: dict[MessageType, type[QueryHandler]] = {
    MessageType.GET_USER_BY_ID_QUERY: GetUserByIdHandler,
}

__all__ = ["QUERY_HANDLERS"]
