import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import async_engine_from_config

from workbench.config import settings
from workbench.db.base import Base
# Import all models so they register with Base.metadata
from workbench.models import conversation, project, project_file  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

_url = make_url(settings.database_url)
# SQLite cannot ALTER most things in place; batch mode rebuilds the table instead
_render_as_batch = _url.get_backend_name() == "sqlite"

OUR_TABLES = {"projects", "project_files", "ai_conversations"}


def include_object(object, name, type_, reflected, compare_to):
    if type_ == "table":
        return name in OUR_TABLES
    if type_ == "index" and hasattr(object, "table"):
        return object.table.name in OUR_TABLES
    return True


def run_migrations_offline() -> None:
    # Offline SQL is rendered with the sync dialect of the configured backend
    context.configure(
        url=_url.set(drivername=_url.get_backend_name()),
        target_metadata=target_metadata,
        literal_binds=True,
        render_as_batch=_render_as_batch,
        include_object=include_object,
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        include_object=include_object,
        render_as_batch=_render_as_batch,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    cfg = config.get_section(config.config_ini_section, {})
    cfg["sqlalchemy.url"] = settings.database_url
    connectable = async_engine_from_config(cfg, prefix="sqlalchemy.", poolclass=pool.NullPool)
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
