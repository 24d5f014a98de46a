import json
from typing import Any


def sse_event(event: str, data: Any) -> str:
    payload = json.dumps(data) if not isinstance(data, str) else data
    return f"event: {event}\ndata: {payload}\n\n"


def sse_stage_change(stage: str) -> str:
    return sse_event("stage_change", {"stage": stage})


def sse_token(token: str) -> str:
    return sse_event("token", {"token": token})


def sse_clarification(message: str) -> str:
    return sse_event("clarification", {"message": message})


def sse_actions(actions: list[dict], rejected_count: int = 0) -> str:
    return sse_event("actions", {"actions": actions, "rejectedCount": rejected_count})


def sse_action_result(index: int, action_type: str, outcome: dict) -> str:
    return sse_event("action_result", {"index": index, "type": action_type, "outcome": outcome})


def sse_error(message: str) -> str:
    return sse_event("error", {"message": message})


def sse_done(succeeded: int = 0, failed: int = 0) -> str:
    return sse_event("done", {"succeeded": succeeded, "failed": failed})
