"""Tests for workbench.schemas.actions"""
import pytest
from pydantic import ValidationError

from workbench.schemas.actions import (
    ACTION_TYPES,
    QUICK_ACTIONS,
    AddFileAction,
    CreateProjectAction,
    ModifyApkAction,
    dump_action,
    validate_action,
)

VALID = {
    "create_project": {"type": "create_project", "name": "shop", "projectType": "web", "template": "basic_website"},
    "add_file": {
        "type": "add_file", "projectId": "p1", "name": "app.js", "content": "", "path": "js/app.js", "fileType": "js",
    },
    "update_file": {"type": "update_file", "fileId": "f1", "content": "x = 1"},
    "delete_file": {"type": "delete_file", "fileId": "f1"},
    "create_web_page": {
        "type": "create_web_page", "projectId": "p1", "pageName": "contact", "pageType": "contact",
        "features": ["contact_form"],
    },
    "modify_apk": {"type": "modify_apk", "projectId": "p1", "action": "change_theme", "parameters": {"theme": "x"}},
    "run_python": {"type": "run_python", "code": "print(1)"},
    "generate_code_snippet": {"type": "generate_code_snippet", "language": "python", "description": "fizzbuzz"},
}


class TestValidateAction:
    """Each variant validates from its wire shape."""

    @pytest.mark.parametrize("action_type", ACTION_TYPES)
    def test_valid_variants(self, action_type):
        action = validate_action(VALID[action_type])
        assert action.type == action_type

    def test_covers_every_variant(self):
        assert set(VALID) == set(ACTION_TYPES)

    def test_camel_case_fields_map_to_attributes(self):
        action = validate_action(VALID["add_file"])
        assert isinstance(action, AddFileAction)
        assert action.project_id == "p1"
        assert action.file_type == "js"

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            validate_action({"type": "format_disk"})

    def test_missing_required_field_rejected(self):
        with pytest.raises(ValidationError):
            validate_action({"type": "add_file", "projectId": "p1", "name": "a.js", "path": "a.js", "fileType": "js"})

    def test_bad_enum_rejected(self):
        with pytest.raises(ValidationError):
            validate_action({**VALID["add_file"], "fileType": "exe"})
        with pytest.raises(ValidationError):
            validate_action({**VALID["create_project"], "projectType": "desktop"})
        with pytest.raises(ValidationError):
            validate_action({**VALID["modify_apk"], "action": "resign"})

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            validate_action({**VALID["create_project"], "name": ""})

    def test_non_dict_rejected(self):
        with pytest.raises(ValidationError):
            validate_action("create_project")

    def test_snake_case_also_accepted(self):
        action = CreateProjectAction(type="create_project", name="x", project_type="python")
        assert action.project_type == "python"


class TestDumpAction:

    def test_dumps_wire_names_without_nulls(self):
        action = validate_action(VALID["modify_apk"])
        assert isinstance(action, ModifyApkAction)
        assert dump_action(action) == VALID["modify_apk"]

    def test_optional_fields_omitted(self):
        dumped = dump_action(validate_action(VALID["run_python"]))
        assert "description" not in dumped


def test_quick_actions_have_prompts():
    assert QUICK_ACTIONS
    for quick in QUICK_ACTIONS:
        assert {"id", "title", "description", "icon", "prompt"} <= quick.keys()
