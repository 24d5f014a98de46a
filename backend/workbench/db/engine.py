from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from workbench.config import settings


def _engine_options(url: str) -> dict:
    # SQLite (aiosqlite) has no server connections to recycle
    if make_url(url).get_backend_name() == "sqlite":
        return {}
    return {"pool_pre_ping": True}


engine = create_async_engine(
    settings.database_url,
    echo=(settings.app_env == "development"),
    **_engine_options(settings.database_url),
)
async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
