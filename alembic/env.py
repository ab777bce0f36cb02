"""Alembic migration environment configuration."""

import os
import re
from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import engine_from_config, pool

load_dotenv()

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

from warpplates.database import Base  # noqa: E402
from warpplates.models import WarpplateAllowedUser, WarpplateRow  # noqa: E402, F401

target_metadata = Base.metadata


def transform_url_for_sync(url: str) -> str:
    """Transform an async database URL for a sync driver.

    - Drops the +asyncpg / +aiosqlite driver suffix
    - Converts ssl= back to sslmode= for psycopg2
    """
    url = url.replace("postgresql+asyncpg://", "postgresql://")
    url = url.replace("sqlite+aiosqlite://", "sqlite://")
    url = re.sub(r"\bssl=(\w+)", r"sslmode=\1", url)
    return url


def get_url():
    """Get database URL from environment."""
    sync_url = os.getenv("DATABASE_URL_SYNC")
    if sync_url:
        return sync_url

    url = os.getenv("WARPPLATES_DATABASE_URL", "sqlite+aiosqlite:///warpplates.sqlite")
    return transform_url_for_sync(url)


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_url()
    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
