"""Tests for workbench.pipeline.orchestrator"""
import json

from workbench.pipeline.orchestrator import process_message, stream_message
from workbench.schemas.pipeline import ActionOutcome


class RecordingExecutor:
    """Stands in for ActionExecutor; fails every action listed in ``failing``."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []

    async def execute(self, action, user_id=None):
        self.calls.append((action.type, user_id))
        ok = action.type not in self.failing
        return ActionOutcome(success=ok, message="done" if ok else "failed")


def parse_events(chunks):
    events = []
    for chunk in chunks:
        lines = chunk.strip().split("\n")
        events.append((lines[0].removeprefix("event: "), json.loads(lines[1].removeprefix("data: "))))
    return events


ACTIONS = [
    {"type": "generate_code_snippet", "language": "js", "description": "debounce"},
    {"type": "run_python", "code": "print(1)"},
]


class TestProcessMessage:

    async def test_runs_all_actions_in_order(self, fake_openai):
        executor = RecordingExecutor(failing={"generate_code_snippet"})

        response = await process_message(fake_openai(json.dumps(ACTIONS)), executor, "do things", user_id="u1")

        assert executor.calls == [("generate_code_snippet", "u1"), ("run_python", "u1")]
        assert [o.success for o in response.outcomes] == [False, True]

    async def test_clarification_runs_nothing(self, fake_openai):
        executor = RecordingExecutor()
        client = fake_openai(json.dumps({"needsMoreInfo": True, "clarificationMessage": "Which file?"}))

        response = await process_message(client, executor, "fix it")

        assert executor.calls == []
        assert response.parse.clarification_message == "Which file?"
        assert response.outcomes == []


class TestStreamMessage:

    async def test_event_sequence(self, fake_openai):
        executor = RecordingExecutor(failing={"run_python"})
        chunks = [c async for c in stream_message(fake_openai(json.dumps(ACTIONS)), executor, "go")]

        events = parse_events(chunks)

        assert [name for name, _ in events] == [
            "stage_change", "actions", "stage_change", "action_result", "action_result", "done",
        ]
        assert events[1][1]["actions"][0]["type"] == "generate_code_snippet"
        assert events[4][1]["outcome"]["success"] is False
        assert events[-1][1] == {"succeeded": 1, "failed": 1}

    async def test_clarification_stream(self, fake_openai):
        chunks = [c async for c in stream_message(fake_openai("not json"), RecordingExecutor(), "??")]

        events = parse_events(chunks)

        assert [name for name, _ in events] == ["stage_change", "clarification", "done"]
