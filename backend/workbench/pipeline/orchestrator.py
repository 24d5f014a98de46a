from collections.abc import AsyncGenerator

from openai import AsyncOpenAI

from workbench.pipeline.action_executor import ActionExecutor
from workbench.pipeline.intent_parser import parse_user_request
from workbench.schemas.actions import dump_action
from workbench.schemas.pipeline import ActionOutcome, ParseContext, RunResponse
from workbench.utils.sse import (
    sse_action_result,
    sse_actions,
    sse_clarification,
    sse_done,
    sse_stage_change,
)


async def process_message(
    client: AsyncOpenAI,
    executor: ActionExecutor,
    message: str,
    context: ParseContext | None = None,
    user_id: str | None = None,
) -> RunResponse:
    """Parse ``message`` and run every resulting action in order."""
    parsed = await parse_user_request(client, message, context)
    outcomes: list[ActionOutcome] = []
    for action in parsed.actions:
        # Each action reports its own failure; later actions still run
        outcomes.append(await executor.execute(action, user_id))
    return RunResponse(parse=parsed, outcomes=outcomes)


async def stream_message(
    client: AsyncOpenAI,
    executor: ActionExecutor,
    message: str,
    context: ParseContext | None = None,
    user_id: str | None = None,
) -> AsyncGenerator[str, None]:
    """Same as process_message, as SSE events."""
    yield sse_stage_change("intent_parser")
    parsed = await parse_user_request(client, message, context)

    if parsed.needs_more_info:
        yield sse_clarification(parsed.clarification_message or "")
        yield sse_done()
        return

    yield sse_actions([dump_action(a) for a in parsed.actions], parsed.rejected_count)

    yield sse_stage_change("executor")
    succeeded = failed = 0
    for index, action in enumerate(parsed.actions):
        outcome = await executor.execute(action, user_id)
        if outcome.success:
            succeeded += 1
        else:
            failed += 1
        yield sse_action_result(index, action.type, outcome.model_dump(mode="json", by_alias=True))

    yield sse_done(succeeded, failed)
