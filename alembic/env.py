"""
Alembic environment for the dealership database.

DB_URL (from the environment or .env) selects the database; without it the
local SQLite file under data/ is used. Migrations run through the async
driver, with batch mode on SQLite so ALTER TABLE works.
"""

import asyncio
import os
from logging.config import fileConfig
from pathlib import Path
from sqlalchemy import pool, event
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine
from alembic import context
from dotenv import load_dotenv

# Importing the registry puts every model on Base.metadata
from app.core.db.models import Base

load_dotenv()

config = context.config

db_url = os.getenv("DB_URL")
if not db_url:
    project_root = Path(__file__).resolve().parent.parent
    (project_root / "data").mkdir(parents=True, exist_ok=True)
    db_url = f"sqlite+aiosqlite:///{project_root}/data/dealership.db"

config.set_main_option("sqlalchemy.url", db_url)

is_sqlite = db_url.startswith("sqlite")

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _configure_sqlite_connection(dbapi_connection, connection_record):
    """Same pragmas as the application engine."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=30000")
    cursor.close()


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
        render_as_batch=is_sqlite,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        render_as_batch=is_sqlite,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    url = config.get_main_option("sqlalchemy.url")
    if not url:
        raise RuntimeError("No database URL configured")

    connectable = create_async_engine(url, poolclass=pool.NullPool)

    if is_sqlite:
        @event.listens_for(connectable.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            _configure_sqlite_connection(dbapi_connection, connection_record)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
