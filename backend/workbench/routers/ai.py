import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from openai import AsyncOpenAI
from sqlalchemy.ext.asyncio import AsyncSession

from workbench.config import settings
from workbench.dependencies import get_db, get_openai_client
from workbench.pipeline import generation
from workbench.pipeline.errors import OracleError
from workbench.pipeline.prompts.generation import build_chat_system
from workbench.schemas.ai import (
    ChatRequest,
    ChatResponse,
    CodeRequest,
    DetectErrorsResponse,
    FixErrorsRequest,
    FixErrorsResponse,
    GenerateCodeRequest,
    GenerateCodeResponse,
    OptimizeCodeResponse,
)
from workbench.services import conversation_service
from workbench.utils.sse import sse_done, sse_error, sse_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/ai", tags=["ai"])


def _system_for(data: ChatRequest) -> str:
    ctx = data.context
    if ctx is None:
        return build_chat_system()
    return build_chat_system(ctx.project_type, ctx.current_file, ctx.file_content, settings.context_file_chars)


@router.post("/chat", response_model=ChatResponse)
async def chat(
    data: ChatRequest,
    db: AsyncSession = Depends(get_db),
    client: AsyncOpenAI = Depends(get_openai_client),
):
    conversation = None
    if data.conversation_id:
        conversation = await conversation_service.get_conversation(db, data.conversation_id)
        if not conversation:
            raise HTTPException(status_code=404, detail="Conversation not found")

    try:
        answer = await generation.chat_with_ai(
            client, data.message, _system_for(data), conversation_service.history_for_ai(conversation)
        )
    except OracleError as e:
        logger.error("Chat failed: %s", e)
        raise HTTPException(status_code=502, detail="Failed to get AI response")

    if conversation:
        await conversation_service.append_messages(db, conversation.id, [
            {"role": "user", "content": data.message},
            {"role": "assistant", "content": answer},
        ])
    return ChatResponse(response=answer)


@router.post("/chat/stream")
async def chat_stream(
    data: ChatRequest,
    db: AsyncSession = Depends(get_db),
    client: AsyncOpenAI = Depends(get_openai_client),
):
    conversation = None
    if data.conversation_id:
        conversation = await conversation_service.get_conversation(db, data.conversation_id)
        if not conversation:
            raise HTTPException(status_code=404, detail="Conversation not found")
    history = conversation_service.history_for_ai(conversation)
    system = _system_for(data)

    async def event_stream():
        parts: list[str] = []
        try:
            async for token in generation.stream_chat(client, data.message, system, history):
                parts.append(token)
                yield sse_token(token)
        except OracleError as e:
            logger.error("Chat stream failed: %s", e)
            yield sse_error("Failed to get AI response")
            yield sse_done()
            return

        if conversation and parts:
            await conversation_service.append_messages(db, conversation.id, [
                {"role": "user", "content": data.message},
                {"role": "assistant", "content": "".join(parts)},
            ])
        yield sse_done()

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.post("/generate-code", response_model=GenerateCodeResponse)
async def generate_code(data: GenerateCodeRequest, client: AsyncOpenAI = Depends(get_openai_client)):
    try:
        code = await generation.generate_code(client, data.prompt, data.language, data.context)
    except OracleError as e:
        logger.error("Code generation failed: %s", e)
        raise HTTPException(status_code=502, detail="Failed to generate code")
    return GenerateCodeResponse(code=code)


@router.post("/fix-errors", response_model=FixErrorsResponse)
async def fix_errors(data: FixErrorsRequest, client: AsyncOpenAI = Depends(get_openai_client)):
    try:
        fixed = await generation.fix_code_errors(client, data.code, data.error, data.language)
    except OracleError as e:
        logger.error("Fixing errors failed: %s", e)
        raise HTTPException(status_code=502, detail="Failed to fix code errors")
    return FixErrorsResponse(fixed_code=fixed)


@router.post("/optimize-code", response_model=OptimizeCodeResponse)
async def optimize_code(data: CodeRequest, client: AsyncOpenAI = Depends(get_openai_client)):
    try:
        optimized = await generation.optimize_code(client, data.code, data.language)
    except OracleError as e:
        logger.error("Optimization failed: %s", e)
        raise HTTPException(status_code=502, detail="Failed to optimize code")
    return OptimizeCodeResponse(optimized_code=optimized)


@router.post("/detect-errors", response_model=DetectErrorsResponse)
async def detect_errors(data: CodeRequest, client: AsyncOpenAI = Depends(get_openai_client)):
    issues = await generation.detect_code_errors(client, data.code, data.language)
    return DetectErrorsResponse(issues=issues)
