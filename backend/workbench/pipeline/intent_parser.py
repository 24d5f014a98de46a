import json
import logging
from typing import Any

from openai import AsyncOpenAI
from pydantic import ValidationError

from workbench.config import settings
from workbench.pipeline.generation import generate_text, strip_code_fences
from workbench.pipeline.prompts.intent_parser import INTENT_PARSER_SYSTEM, build_intent_prompt
from workbench.schemas.actions import ACTION_TYPES, CURRENT_PROJECT, Action, validate_action
from workbench.schemas.pipeline import ParseContext, ParseResult

logger = logging.getLogger(__name__)

NOT_UNDERSTOOD_MESSAGE = "I couldn't understand your request. Could you be more specific about what you want to do?"
NEEDS_DETAILS_MESSAGE = "I need more details to do that. What exactly should I change?"
PARSE_ERROR_MESSAGE = "An error occurred processing your request. Could you try again?"

_PROJECT_ID_KEYS = ("projectId", "project_id")


def resolve_placeholders(candidate: Any, context: ParseContext | None) -> Any:
    """Bind the "current" project reference to the project in context, in place."""
    if not isinstance(candidate, dict) or context is None or not context.project_id:
        return candidate
    # Actions accept both the wire name and the attribute name
    for key in _PROJECT_ID_KEYS:
        if candidate.get(key) == CURRENT_PROJECT:
            candidate[key] = context.project_id
    return candidate


def validate_candidates(candidates: list[Any], context: ParseContext | None = None) -> tuple[list[Action], int]:
    """Validate each candidate on its own; return survivors and how many were dropped."""
    actions: list[Action] = []
    rejected = 0
    for candidate in candidates:
        resolve_placeholders(candidate, context)
        if not isinstance(candidate, dict) or candidate.get("type") not in ACTION_TYPES:
            rejected += 1
            logger.warning("Dropping candidate with unknown action type: %r", candidate)
            continue
        try:
            actions.append(validate_action(candidate))
        except ValidationError as e:
            rejected += 1
            logger.warning("Dropping invalid action %r: %s", candidate, e)
    return actions, rejected


def interpret_response(content: str, context: ParseContext | None = None) -> ParseResult:
    """Turn raw model output into a ParseResult."""
    try:
        parsed = json.loads(strip_code_fences(content))
    except json.JSONDecodeError:
        logger.info("Model response is not JSON, asking for clarification")
        return ParseResult(needs_more_info=True, clarification_message=NOT_UNDERSTOOD_MESSAGE)

    if isinstance(parsed, dict) and parsed.get("needsMoreInfo") is True:
        message = parsed.get("clarificationMessage")
        return ParseResult(
            needs_more_info=True,
            clarification_message=message if isinstance(message, str) and message else NEEDS_DETAILS_MESSAGE,
        )

    candidates = parsed if isinstance(parsed, list) else [parsed]
    actions, rejected = validate_candidates(candidates, context)
    return ParseResult(actions=actions, needs_more_info=False, rejected_count=rejected)


async def parse_user_request(
    client: AsyncOpenAI, message: str, context: ParseContext | None = None
) -> ParseResult:
    """Ask the model which actions ``message`` calls for. Never raises."""
    try:
        prompt = build_intent_prompt(
            message,
            context.model_dump(by_alias=True) if context else {},
            max_file_chars=settings.context_file_chars,
        )
        content = await generate_text(client, prompt, system=INTENT_PARSER_SYSTEM, temperature=0.1, max_tokens=2000)
        return interpret_response(content, context)
    except Exception:
        logger.exception("Error parsing user request")
        return ParseResult(needs_more_info=True, clarification_message=PARSE_ERROR_MESSAGE)
