"""Migration runner for the translation hub schema (users, sessions, history tables)."""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

os.environ.setdefault("APP_ENV", "dev")
from translation_hub.core.config import get_settings
from translation_hub.models import Base

# Registers the history and session tables on Base.metadata for autogenerate.
from translation_hub.models import AuditLog, LanguageStat, Translation, User, UserSession  # noqa: F401

alembic_cfg = context.config
if alembic_cfg.config_file_name is not None:
    try:
        fileConfig(alembic_cfg.config_file_name)
    except KeyError:
        # No logging sections in the ini; keep the default logging setup.
        pass

hub_metadata = Base.metadata


def database_url() -> str:
    return get_settings().DATABASE_URL


def emit_sql_script() -> None:
    """`alembic upgrade --sql`: print the DDL instead of touching a database."""
    context.configure(
        url=database_url(),
        target_metadata=hub_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def apply_to_database() -> None:
    engine = create_engine(database_url(), poolclass=NullPool)
    with engine.connect() as connection:
        # SQLite cannot ALTER most constraints in place.
        context.configure(
            connection=connection,
            target_metadata=hub_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    emit_sql_script()
else:
    apply_to_database()
