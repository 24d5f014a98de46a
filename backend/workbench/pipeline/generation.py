"""Thin layer over the chat completions API.

Everything the model returns is untrusted text. Helpers that expect structure
decode and validate it here and raise OracleError when it does not fit.
"""
import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from typing import Any

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from workbench.config import settings
from workbench.pipeline.errors import OracleError
from workbench.pipeline.prompts.generation import (
    CODE_GENERATOR_SYSTEM,
    DETECT_ERRORS_SYSTEM,
    FIX_ERRORS_SYSTEM,
    OPTIMIZE_SYSTEM,
    PROJECT_STRUCTURE_SYSTEM,
    build_project_request,
)
from workbench.schemas.pipeline import CodeIssue, ProjectStructure

logger = logging.getLogger(__name__)


def strip_code_fences(content: str) -> str:
    content = content.strip()
    if content.startswith("```"):
        content = content.split("\n", 1)[1] if "\n" in content else content[3:]
        if content.endswith("```"):
            content = content[:-3]
        content = content.strip()
    return content


def _build_messages(prompt: str, system: str | None, history: list[dict] | None) -> list[dict]:
    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.extend(history or [])
    messages.append({"role": "user", "content": prompt})
    return messages


async def generate_text(
    client: AsyncOpenAI,
    prompt: str,
    *,
    system: str | None = None,
    history: list[dict] | None = None,
    json_response: bool = False,
    temperature: float = 0.2,
    max_tokens: int = 4000,
) -> str:
    kwargs: dict = {}
    if json_response:
        kwargs["response_format"] = {"type": "json_object"}

    try:
        response = await asyncio.wait_for(
            client.chat.completions.create(
                model=settings.openai_model,
                messages=_build_messages(prompt, system, history),
                temperature=temperature,
                **settings.max_tokens_param(max_tokens),
                **kwargs,
            ),
            timeout=settings.openai_timeout_seconds,
        )
    except asyncio.TimeoutError as e:
        raise OracleError(f"Generation timed out after {settings.openai_timeout_seconds}s") from e
    except OpenAIError as e:
        raise OracleError(f"Generation failed: {e}") from e

    return response.choices[0].message.content or ""


async def generate_json(client: AsyncOpenAI, system: str, prompt: str, max_tokens: int = 8000) -> Any:
    content = await generate_text(
        client, prompt, system=system, json_response=True, max_tokens=max_tokens
    )
    try:
        return json.loads(strip_code_fences(content))
    except json.JSONDecodeError as e:
        raise OracleError(f"Model returned invalid JSON: {e}") from e


async def generate_code(client: AsyncOpenAI, description: str, language: str, context: str | None = None) -> str:
    prompt = f"Additional context: {context}\n\nUser request: {description}" if context else description
    code = strip_code_fences(
        await generate_text(client, prompt, system=CODE_GENERATOR_SYSTEM.format(language=language))
    )
    if not code:
        raise OracleError("Model returned no code")
    return code


async def fix_code_errors(client: AsyncOpenAI, code: str, error: str, language: str) -> str:
    fixed = await generate_text(
        client, code, system=FIX_ERRORS_SYSTEM.format(language=language, error=error)
    )
    return strip_code_fences(fixed) or code


async def optimize_code(client: AsyncOpenAI, code: str, language: str) -> str:
    optimized = await generate_text(client, code, system=OPTIMIZE_SYSTEM.format(language=language))
    return strip_code_fences(optimized) or code


async def detect_code_errors(client: AsyncOpenAI, code: str, language: str) -> list[CodeIssue]:
    """Best-effort static review; any failure yields an empty list."""
    try:
        data = await generate_json(client, DETECT_ERRORS_SYSTEM.format(language=language), code)
        items = data.get("issues", []) if isinstance(data, dict) else data
        return [CodeIssue.model_validate(item) for item in items]
    except (OracleError, ValidationError, TypeError, AttributeError) as e:
        logger.warning("Error detecting code issues: %s", e)
        return []


async def generate_project_structure(
    client: AsyncOpenAI, project_type: str, description: str, template: str | None = None
) -> ProjectStructure:
    data = await generate_json(
        client,
        PROJECT_STRUCTURE_SYSTEM.format(project_type=project_type),
        build_project_request(description, template),
        max_tokens=16000,
    )
    try:
        return ProjectStructure.model_validate(data)
    except ValidationError as e:
        raise OracleError(f"Model returned an unusable project structure: {e.error_count()} errors") from e


async def chat_with_ai(client: AsyncOpenAI, message: str, system: str, history: list[dict] | None = None) -> str:
    answer = await generate_text(
        client, message, system=system, history=history, temperature=0.7, max_tokens=2000
    )
    return answer or "I'm sorry, I couldn't process your request. Please try again."


async def stream_chat(
    client: AsyncOpenAI, message: str, system: str, history: list[dict] | None = None
) -> AsyncGenerator[str, None]:
    try:
        stream = await asyncio.wait_for(
            client.chat.completions.create(
                model=settings.openai_model,
                messages=_build_messages(message, system, history),
                temperature=0.7,
                stream=True,
                **settings.max_tokens_param(2000),
            ),
            timeout=settings.openai_timeout_seconds,
        )
    except asyncio.TimeoutError as e:
        raise OracleError(f"Generation timed out after {settings.openai_timeout_seconds}s") from e
    except OpenAIError as e:
        raise OracleError(f"Generation failed: {e}") from e

    async for chunk in stream:
        if chunk.choices and chunk.choices[0].delta.content:
            yield chunk.choices[0].delta.content
