from datetime import datetime
from typing import Literal

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

ProjectType = Literal["web", "apk", "python"]


class ProjectCreate(BaseModel):
    name: str
    type: ProjectType
    description: str | None = None


class ProjectUpdate(BaseModel):
    name: str | None = None
    type: ProjectType | None = None
    description: str | None = None


class ProjectResponse(BaseModel):
    id: str
    name: str
    type: str
    description: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}
