from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends
from openai import AsyncOpenAI
from sqlalchemy.ext.asyncio import AsyncSession

from workbench.config import settings
from workbench.db.engine import async_session_factory
from workbench.pipeline.action_executor import ActionExecutor
from workbench.services.file_mirror import FileMirror


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        yield session


def get_openai_client() -> AsyncOpenAI:
    kwargs: dict = {"api_key": settings.openai_api_key, "timeout": settings.openai_timeout_seconds}
    if settings.openai_base_url:
        kwargs["base_url"] = settings.openai_base_url
    return AsyncOpenAI(**kwargs)


@lru_cache
def get_file_mirror() -> FileMirror:
    return FileMirror(settings.projects_root)


def get_action_executor(
    db: AsyncSession = Depends(get_db),
    client: AsyncOpenAI = Depends(get_openai_client),
    mirror: FileMirror = Depends(get_file_mirror),
) -> ActionExecutor:
    return ActionExecutor(db, client, mirror)
