"""User query handlers."""

from taskboard_server.cqrs import QueryHandler
from taskboard_server.database import SessionProvider
from taskboard_server.exceptions import ResourceNotFoundError
from taskboard_server.messages import ErrorMessage
from taskboard_server.models.api_model import UserResponse
from taskboard_server.queries.types import GetUserByIdQuery
from taskboard_server.services.user_service import UserService


class GetUserByIdHandler(QueryHandler[GetUserByIdQuery]):
    def __init__(self, users: UserService, sessions: SessionProvider):
        self.users = users
        self.sessions = sessions

    async def handle(self, query: GetUserByIdQuery) -> UserResponse:
        async with self.sessions.open_session() as session:
            user = self.users.get_by_id(session, query.payload.user_id)
            if user is None:
                raise ResourceNotFoundError(ErrorMessage.USER_DOES_NOT_EXIST, "User", query.payload.user_id)
            return self.users.to_public(user)
