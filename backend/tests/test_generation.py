"""Tests for workbench.pipeline.generation"""
import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import structure_json
from workbench.config import settings
from workbench.pipeline import generation
from workbench.pipeline.errors import OracleError


class TestStripCodeFences:

    def test_plain_text_untouched(self):
        assert generation.strip_code_fences("  x = 1 ") == "x = 1"

    def test_fenced_with_language(self):
        assert generation.strip_code_fences("```python\nx = 1\n```") == "x = 1"

    def test_fenced_without_language(self):
        assert generation.strip_code_fences("```\n<p>hi</p>\n```") == "<p>hi</p>"


class TestGenerateText:

    async def test_sends_system_history_and_prompt(self, fake_openai):
        client = fake_openai("answer")
        history = [{"role": "user", "content": "earlier"}]

        result = await generation.generate_text(client, "now", system="be brief", history=history)

        assert result == "answer"
        messages = client.chat.completions.create.await_args.kwargs["messages"]
        assert [m["role"] for m in messages] == ["system", "user", "user"]
        assert messages[-1]["content"] == "now"

    async def test_timeout_becomes_oracle_error(self, monkeypatch):
        monkeypatch.setattr(settings, "openai_timeout_seconds", 0.01)

        async def slow(**kwargs):
            await asyncio.sleep(1)

        client = MagicMock()
        client.chat.completions.create = slow

        with pytest.raises(OracleError):
            await generation.generate_text(client, "hello")

    async def test_json_mode_requested(self, fake_openai):
        client = fake_openai('{"ok": true}')
        assert await generation.generate_json(client, "system", "prompt") == {"ok": True}
        assert client.chat.completions.create.await_args.kwargs["response_format"] == {"type": "json_object"}

    async def test_invalid_json_raises(self, fake_openai):
        with pytest.raises(OracleError):
            await generation.generate_json(fake_openai("not json"), "system", "prompt")


class TestCodeHelpers:

    async def test_generate_code_strips_fences(self, fake_openai):
        code = await generation.generate_code(fake_openai("```js\nconst a = 1;\n```"), "a constant", "javascript")
        assert code == "const a = 1;"

    async def test_generate_code_empty_raises(self, fake_openai):
        with pytest.raises(OracleError):
            await generation.generate_code(fake_openai(""), "anything", "python")

    async def test_fix_falls_back_to_original(self, fake_openai):
        assert await generation.fix_code_errors(fake_openai(""), "x = ", "SyntaxError", "python") == "x = "

    async def test_optimize_returns_model_code(self, fake_openai):
        assert await generation.optimize_code(fake_openai("y = 2"), "y = 1 + 1", "python") == "y = 2"

    async def test_detect_errors_parses_issues(self, fake_openai):
        payload = {"issues": [{"line": 3, "type": "error", "message": "undefined name", "suggestion": "define it"}]}
        issues = await generation.detect_code_errors(fake_openai(json.dumps(payload)), "print(x)", "python")
        assert len(issues) == 1
        assert issues[0].line == 3

    async def test_detect_errors_empty_on_garbage(self, fake_openai):
        assert await generation.detect_code_errors(fake_openai("no issues found"), "x", "python") == []
        assert await generation.detect_code_errors(fake_openai('{"issues": [{"line": "?"}]}'), "x", "python") == []


class TestProjectStructure:

    async def test_valid_structure(self, fake_openai):
        client = fake_openai(structure_json(("index.html", "<h1>Hi</h1>", "html"), ("css/style.css", "", "css")))
        structure = await generation.generate_project_structure(client, "web", "a blog", "basic_website")
        assert [f.path for f in structure.files] == ["index.html", "css/style.css"]

    async def test_no_files_is_error(self, fake_openai):
        with pytest.raises(OracleError):
            await generation.generate_project_structure(fake_openai('{"files": []}'), "web", "a blog")

    async def test_missing_fields_is_error(self, fake_openai):
        with pytest.raises(OracleError):
            await generation.generate_project_structure(fake_openai('{"files": [{"path": "a"}]}'), "web", "x")


class TestStreamChat:

    async def test_yields_deltas(self):
        async def chunks():
            for text in ("Hel", None, "lo"):
                yield SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=text))])

        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=chunks())

        tokens = [t async for t in generation.stream_chat(client, "hi", "system")]

        assert tokens == ["Hel", "lo"]
