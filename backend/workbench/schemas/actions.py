"""Chat actions: the closed set of commands the assistant may run against a project.

Every action is a pydantic model tagged by ``type``. Candidates coming back from the
model are plain dicts and go through :func:`validate_action` before anything runs.
Wire names are camelCase (``projectId``, ``fileType``...), attributes are snake_case.
"""
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter
from pydantic.alias_generators import to_camel

# Late-bound reference to "the project the user is looking at"
CURRENT_PROJECT = "current"

FileType = Literal["html", "css", "js", "py", "xml", "java", "kt", "smali"]


class _ActionBase(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class CreateProjectAction(_ActionBase):
    type: Literal["create_project"]
    name: str = Field(min_length=1)
    project_type: Literal["web", "apk", "python"]
    description: str | None = None
    template: Literal["blank", "basic_website", "react_app", "android_app"] | None = None


class AddFileAction(_ActionBase):
    type: Literal["add_file"]
    project_id: str
    name: str = Field(min_length=1)
    content: str
    path: str
    file_type: FileType


class UpdateFileAction(_ActionBase):
    type: Literal["update_file"]
    file_id: str
    content: str | None = None
    path: str | None = None
    name: str | None = None


class DeleteFileAction(_ActionBase):
    type: Literal["delete_file"]
    file_id: str


class CreateWebPageAction(_ActionBase):
    type: Literal["create_web_page"]
    project_id: str
    page_name: str = Field(min_length=1)
    page_type: Literal["landing", "contact", "about", "blog", "product", "service"]
    style: Literal["modern", "classic", "minimal", "colorful"] | None = None
    features: list[str] | None = None  # e.g. ["contact_form", "gallery", "testimonials"]


class ModifyApkAction(_ActionBase):
    type: Literal["modify_apk"]
    project_id: str
    action: Literal["change_icon", "modify_strings", "add_feature", "change_theme"]
    parameters: dict[str, Any]


class RunPythonAction(_ActionBase):
    type: Literal["run_python"]
    code: str = Field(min_length=1)
    description: str | None = None


class GenerateCodeSnippetAction(_ActionBase):
    type: Literal["generate_code_snippet"]
    language: str
    description: str = Field(min_length=1)
    context: str | None = None


Action = Annotated[
    Union[
        CreateProjectAction,
        AddFileAction,
        UpdateFileAction,
        DeleteFileAction,
        CreateWebPageAction,
        ModifyApkAction,
        RunPythonAction,
        GenerateCodeSnippetAction,
    ],
    Field(discriminator="type"),
]

ACTION_TYPES = (
    "create_project",
    "add_file",
    "update_file",
    "delete_file",
    "create_web_page",
    "modify_apk",
    "run_python",
    "generate_code_snippet",
)

_action_adapter: TypeAdapter[Action] = TypeAdapter(Action)


def validate_action(obj: Any) -> Action:
    """Validate an arbitrary object as an action. Raises pydantic.ValidationError."""
    return _action_adapter.validate_python(obj)


def dump_action(action: Action) -> dict:
    return action.model_dump(by_alias=True, exclude_none=True)


# Suggestions shown next to the chat box
QUICK_ACTIONS = [
    {
        "id": "create_web_project",
        "title": "Create web project",
        "description": "Start a new website project",
        "icon": "Globe",
        "prompt": 'Create a new web project called "my-website" with a modern home page',
    },
    {
        "id": "add_contact_page",
        "title": "Add contact page",
        "description": "Add a contact page to the current project",
        "icon": "Mail",
        "prompt": "Add a contact page with a contact form to the current project",
    },
    {
        "id": "modify_apk",
        "title": "Modify APK",
        "description": "Change an existing APK",
        "icon": "Smartphone",
        "prompt": "I want to change the icon and the theme of my APK app",
    },
    {
        "id": "run_python",
        "title": "Run Python",
        "description": "Execute Python code",
        "icon": "Code",
        "prompt": "Run a Python script that prints a small sales report",
    },
    {
        "id": "generate_component",
        "title": "Generate component",
        "description": "Generate a code component",
        "icon": "Package",
        "prompt": "Generate a React component that shows product cards",
    },
]
