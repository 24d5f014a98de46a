from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workbench.models.conversation import Conversation


async def create_conversation(db: AsyncSession, project_id: str | None, messages: list[dict]) -> Conversation:
    conversation = Conversation(project_id=project_id, messages=messages)
    db.add(conversation)
    await db.commit()
    await db.refresh(conversation)
    return conversation


async def get_conversation(db: AsyncSession, conversation_id: str) -> Conversation | None:
    return await db.get(Conversation, conversation_id)


async def list_conversations(db: AsyncSession, project_id: str) -> list[Conversation]:
    result = await db.execute(
        select(Conversation)
        .where(Conversation.project_id == project_id)
        .order_by(Conversation.created_at)
    )
    return list(result.scalars().all())


async def append_messages(db: AsyncSession, conversation_id: str, messages: list[dict]) -> Conversation | None:
    conversation = await db.get(Conversation, conversation_id)
    if not conversation:
        return None
    # Reassign so the JSON column is flagged dirty
    conversation.messages = [*(conversation.messages or []), *messages]
    await db.commit()
    await db.refresh(conversation)
    return conversation


def history_for_ai(conversation: Conversation | None, limit: int = 4) -> list[dict]:
    """Most recent messages, formatted for the chat completions API."""
    if not conversation or not conversation.messages:
        return []
    return [
        {"role": m.get("role", "assistant"), "content": m.get("content", "")}
        for m in conversation.messages[-limit:]
    ]
