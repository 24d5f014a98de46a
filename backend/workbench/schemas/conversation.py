from datetime import datetime
from typing import Literal

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ConversationMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ConversationCreate(BaseModel):
    messages: list[ConversationMessage] = []


class ConversationResponse(BaseModel):
    id: str
    project_id: str | None
    messages: list[ConversationMessage]
    created_at: datetime

    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}
