"""Query definitions."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from taskboard_server.cqrs import MessageType, Query


class GetUserByIdPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str


class GetUserByIdQuery(Query):
    type: ClassVar[str] = MessageType.GET_USER_BY_ID_QUERY
    payload: GetUserByIdPayload
