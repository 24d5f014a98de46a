from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from openai import AsyncOpenAI

from workbench.dependencies import get_action_executor, get_openai_client
from workbench.pipeline.action_executor import ActionExecutor
from workbench.pipeline.intent_parser import parse_user_request
from workbench.pipeline.orchestrator import process_message, stream_message
from workbench.schemas.actions import QUICK_ACTIONS
from workbench.schemas.pipeline import (
    ActionOutcome,
    ConfirmRequest,
    ExecuteRequest,
    ParseRequest,
    ParseResult,
    RunRequest,
    RunResponse,
)

router = APIRouter(prefix="/api/v1/actions", tags=["actions"])


@router.post("/parse", response_model=ParseResult)
async def parse(data: ParseRequest, client: AsyncOpenAI = Depends(get_openai_client)):
    return await parse_user_request(client, data.message, data.context)


@router.post("/execute", response_model=ActionOutcome)
async def execute(data: ExecuteRequest, executor: ActionExecutor = Depends(get_action_executor)):
    return await executor.execute(data.action, data.user_id)


@router.post("/confirm", response_model=ActionOutcome)
async def confirm(data: ConfirmRequest, executor: ActionExecutor = Depends(get_action_executor)):
    return await executor.confirm(data.action_id, data.confirmed)


@router.post("/run", response_model=RunResponse)
async def run(
    data: RunRequest,
    client: AsyncOpenAI = Depends(get_openai_client),
    executor: ActionExecutor = Depends(get_action_executor),
):
    return await process_message(client, executor, data.message, data.context, data.user_id)


@router.post("/run/stream")
async def run_stream(
    data: RunRequest,
    client: AsyncOpenAI = Depends(get_openai_client),
    executor: ActionExecutor = Depends(get_action_executor),
):
    return StreamingResponse(
        stream_message(client, executor, data.message, data.context, data.user_id),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.get("/quick")
async def quick_actions():
    return QUICK_ACTIONS
