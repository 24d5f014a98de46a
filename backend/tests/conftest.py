"""
Shared fixtures.

- ``db``: AsyncSession on a fresh in-memory SQLite database
- ``mirror``: FileMirror rooted in a temporary directory
- ``fake_openai``: builds an OpenAI client stub answering with canned contents
"""
import json
import sys
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import workbench.models  # noqa: F401  (registers tables)
from workbench.config import settings
from workbench.db.base import Base
from workbench.pipeline.confirmation import ConfirmationGate
from workbench.services.file_mirror import FileMirror

MANIFEST_XML = """<?xml version="1.0" encoding="utf-8"?>
<manifest xmlns:android="http://schemas.android.com/apk/res/android" package="com.example.app">
    <application android:label="@string/app_name" android:icon="@mipmap/ic_launcher">
        <activity android:name=".MainActivity" />
    </application>
</manifest>
"""


def completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def structure_json(*files: tuple[str, str, str]) -> str:
    """JSON the project generator would return for (path, content, type) triples."""
    return json.dumps({
        "files": [
            {"path": path, "name": path.rsplit("/", 1)[-1], "content": content, "type": type_}
            for path, content, type_ in files
        ],
        "description": "generated",
    })


@pytest.fixture
def fake_openai():
    def factory(*contents: str | Exception):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(
            side_effect=[c if isinstance(c, Exception) else completion(c) for c in contents]
        )
        return client
    return factory


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def mirror(tmp_path):
    return FileMirror(tmp_path / "projects")


@pytest.fixture
def gate():
    return ConfirmationGate(ttl_seconds=900, max_pending=50)


@pytest.fixture
def python_executable(monkeypatch):
    monkeypatch.setattr(settings, "python_executable", sys.executable)
    return sys.executable
