import os, sys
from logging.config import fileConfig
from alembic import context
from sqlalchemy import engine_from_config, pool

# Project root on sys.path so `garage` imports without an install
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from garage.core.config import Settings
from garage.db.base import Base
import garage.models.garage  # registers every garage table on Base.metadata

config = context.config


def _database_url() -> str:
    """alembic.ini wins when it names a URL; otherwise the app's own settings (env / .env)."""
    url = config.get_main_option("sqlalchemy.url")
    if url:
        return url
    return Settings().database_url


config.set_main_option("sqlalchemy.url", _database_url())

if config.config_file_name:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# money columns are Numeric(38, 9); let autogenerate notice type drift
COMPARE_OPTS = {"compare_type": True, "render_as_batch": True}


def run_migrations_offline():
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **COMPARE_OPTS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, **COMPARE_OPTS)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
