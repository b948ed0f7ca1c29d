# alembic/env.py
from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

config = context.config

# alembic.ini is optional; without one, logging is left to the caller
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

from fantasy_soccer import models  # noqa: E402,F401  (registers players/fantasy_teams/roster_entries)
from fantasy_soccer.db import SQLALCHEMY_DATABASE_URL, Base  # noqa: E402

target_metadata = Base.metadata

# SQLite can't ALTER most constraints in place (unique pairs on roster_entries)
RENDER_AS_BATCH = True


def _database_url() -> str:
    """DATABASE_URL wins, then sqlalchemy.url from an ini file, then the app default."""
    return os.getenv("DATABASE_URL") or config.get_main_option("sqlalchemy.url") or SQLALCHEMY_DATABASE_URL


def run_migrations_offline() -> None:
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=RENDER_AS_BATCH,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(_database_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=RENDER_AS_BATCH,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
