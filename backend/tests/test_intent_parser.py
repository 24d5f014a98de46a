"""Tests for workbench.pipeline.intent_parser"""
import json

from openai import APIConnectionError
import httpx

from workbench.pipeline.intent_parser import (
    NEEDS_DETAILS_MESSAGE,
    NOT_UNDERSTOOD_MESSAGE,
    PARSE_ERROR_MESSAGE,
    interpret_response,
    parse_user_request,
    validate_candidates,
)
from workbench.schemas.pipeline import ParseContext

RUN = {"type": "run_python", "code": "print('hi')"}
ADD = {
    "type": "add_file", "projectId": "current", "name": "about.html",
    "content": "<h1>About</h1>", "path": "about.html", "fileType": "html",
}


class TestInterpretResponse:
    """Turning model output into a ParseResult."""

    def test_non_json_asks_for_clarification(self):
        result = interpret_response("Sure! I'll create that for you.")
        assert result.needs_more_info is True
        assert result.clarification_message == NOT_UNDERSTOOD_MESSAGE
        assert result.actions == []

    def test_single_object_becomes_one_action(self):
        result = interpret_response(json.dumps(RUN))
        assert result.needs_more_info is False
        assert [a.type for a in result.actions] == ["run_python"]

    def test_array_keeps_order(self):
        gen = {"type": "generate_code_snippet", "language": "js", "description": "debounce"}
        result = interpret_response(json.dumps([gen, RUN]))
        assert [a.type for a in result.actions] == ["generate_code_snippet", "run_python"]

    def test_code_fences_are_stripped(self):
        result = interpret_response("```json\n" + json.dumps(RUN) + "\n```")
        assert len(result.actions) == 1

    def test_clarification_passthrough(self):
        payload = {"needsMoreInfo": True, "clarificationMessage": "Which project?"}
        result = interpret_response(json.dumps(payload))
        assert result.needs_more_info is True
        assert result.clarification_message == "Which project?"
        assert result.actions == []

    def test_clarification_without_message_gets_fallback(self):
        result = interpret_response(json.dumps({"needsMoreInfo": True}))
        assert result.clarification_message == NEEDS_DETAILS_MESSAGE

    def test_invalid_candidates_dropped_individually(self):
        bad_type = {"type": "format_disk"}
        missing = {"type": "delete_file"}
        result = interpret_response(json.dumps([RUN, bad_type, missing, "text"]))
        assert [a.type for a in result.actions] == ["run_python"]
        assert result.rejected_count == 3
        assert result.needs_more_info is False

    def test_all_invalid_is_empty_not_clarification(self):
        result = interpret_response(json.dumps([{"type": "nope"}]))
        assert result.actions == []
        assert result.needs_more_info is False
        assert result.rejected_count == 1


class TestPlaceholders:
    """The "current" project reference binds to the context project."""

    def test_current_resolved_from_context(self):
        actions, rejected = validate_candidates([dict(ADD)], ParseContext(project_id="p-42"))
        assert rejected == 0
        assert actions[0].project_id == "p-42"

    def test_current_kept_without_context(self):
        actions, _ = validate_candidates([dict(ADD)], None)
        assert actions[0].project_id == "current"

    def test_current_resolved_for_attribute_name(self):
        page = {"type": "create_web_page", "project_id": "current", "pageName": "contact", "pageType": "contact"}
        result = interpret_response(json.dumps([page]), ParseContext(project_id="proj-42"))
        assert result.actions[0].project_id == "proj-42"

    def test_explicit_id_untouched(self):
        actions, _ = validate_candidates([{**ADD, "projectId": "other"}], ParseContext(project_id="p-42"))
        assert actions[0].project_id == "other"


class TestParseUserRequest:

    async def test_asks_model_with_context(self, fake_openai):
        client = fake_openai(json.dumps(ADD))
        context = ParseContext(project_id="p1", current_file="index.html", file_content="x" * 2000)

        result = await parse_user_request(client, "add an about page", context)

        assert result.actions[0].project_id == "p1"
        kwargs = client.chat.completions.create.await_args.kwargs
        prompt = kwargs["messages"][-1]["content"]
        assert "add an about page" in prompt
        assert '"projectId": "p1"' in prompt
        assert "x" * 500 in prompt
        assert "x" * 501 not in prompt

    async def test_oracle_failure_is_clarification(self, fake_openai):
        error = APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))
        client = fake_openai(error)

        result = await parse_user_request(client, "make me a website")

        assert result.needs_more_info is True
        assert result.clarification_message == PARSE_ERROR_MESSAGE
        assert result.actions == []

    async def test_empty_response_is_clarification(self, fake_openai):
        result = await parse_user_request(fake_openai(None), "hello")
        assert result.needs_more_info is True
        assert result.clarification_message == NOT_UNDERSTOOD_MESSAGE
