import os
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool, create_engine
from dotenv import load_dotenv

# -------- Load .env and make project importable --------
load_dotenv()
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# -------- Alembic config / logging --------
config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# -------- Import models + metadata (single Base) --------
from database import Base
import models  # side-effects to register models

target_metadata = Base.metadata

# -------- Resolve database URL priority (NO writing back to config!) --------
resolved_url = (
    os.getenv("ALEMBIC_DATABASE_URL")
    or os.getenv("DATABASE_URL")
    or config.get_main_option("sqlalchemy.url")
)


def _configure_offline():
    context.configure(
        url=resolved_url,
        target_metadata=target_metadata,
        compare_type=True,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=(resolved_url or "").startswith("sqlite"),
    )


def _configure_online(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=connection.dialect.name == "sqlite",
    )


# -------- Entry points --------
def run_migrations_offline():
    _configure_offline()
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = create_engine(
        resolved_url,
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        _configure_online(connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
