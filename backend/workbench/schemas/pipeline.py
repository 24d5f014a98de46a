from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from workbench.schemas.actions import Action

_camel = {"alias_generator": to_camel, "populate_by_name": True}


class ParseContext(BaseModel):
    project_id: str | None = None
    current_file: str | None = None
    file_content: str | None = None

    model_config = _camel


class ParseResult(BaseModel):
    actions: list[Action] = []
    needs_more_info: bool = False
    clarification_message: str | None = None
    rejected_count: int = 0

    model_config = _camel


class ActionOutcome(BaseModel):
    success: bool
    message: str
    data: Any = None
    requires_confirmation: bool = False
    confirmation_message: str | None = None
    action_id: str | None = None

    model_config = _camel


class GeneratedFile(BaseModel):
    path: str
    name: str
    content: str
    type: str


class ProjectStructure(BaseModel):
    files: list[GeneratedFile] = Field(min_length=1)
    description: str = ""


class CodeIssue(BaseModel):
    line: int
    type: Literal["error", "warning"]
    message: str
    suggestion: str = ""


# ─── Requests ───────────────────────────────────────────────

class ParseRequest(BaseModel):
    message: str
    context: ParseContext | None = None


class ExecuteRequest(BaseModel):
    action: Action
    user_id: str | None = None

    model_config = _camel


class ConfirmRequest(BaseModel):
    action_id: str
    confirmed: bool

    model_config = _camel


class RunRequest(BaseModel):
    message: str
    context: ParseContext | None = None
    user_id: str | None = None

    model_config = _camel


class RunResponse(BaseModel):
    parse: ParseResult
    outcomes: list[ActionOutcome] = []
