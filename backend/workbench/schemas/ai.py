from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from workbench.schemas.pipeline import CodeIssue

_camel = {"alias_generator": to_camel, "populate_by_name": True}


class ChatContext(BaseModel):
    project_type: str | None = None
    current_file: str | None = None
    file_content: str | None = None

    model_config = _camel


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    conversation_id: str | None = None
    context: ChatContext | None = None

    model_config = _camel


class ChatResponse(BaseModel):
    response: str


class GenerateCodeRequest(BaseModel):
    prompt: str = Field(min_length=1)
    language: str = "javascript"
    context: str | None = None


class GenerateCodeResponse(BaseModel):
    code: str


class FixErrorsRequest(BaseModel):
    code: str
    error: str
    language: str = "javascript"


class FixErrorsResponse(BaseModel):
    fixed_code: str

    model_config = _camel


class CodeRequest(BaseModel):
    code: str
    language: str = "javascript"


class OptimizeCodeResponse(BaseModel):
    optimized_code: str

    model_config = _camel


class DetectErrorsResponse(BaseModel):
    issues: list[CodeIssue]
