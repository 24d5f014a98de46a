from datetime import datetime

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ProjectFileCreate(BaseModel):
    path: str
    name: str
    content: str = ""
    type: str


class ProjectFileUpdate(BaseModel):
    path: str | None = None
    name: str | None = None
    content: str | None = None


class ProjectFileResponse(BaseModel):
    id: str
    project_id: str
    path: str
    name: str
    content: str
    type: str
    is_modified: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}
