from logging.config import fileConfig
from sqlalchemy import engine_from_config
from sqlalchemy import pool
from alembic import context
import logging
import time

# Import our models
from models.base import Base
from models.flashcard import Flashcard  # noqa: F401
from models.generation import Generation, GenerationErrorLog  # noqa: F401
from config.env import settings

config = context.config

# The database URL comes from application settings (env vars / .env.local)
config.set_main_option("sqlalchemy.url", settings.database_url.replace("%", "%%"))

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

target_metadata = Base.metadata

def get_next_revision_id():
    """Generate a sequential revision ID based on timestamp."""
    # Use millisecond timestamp for uniqueness
    return str(int(time.time() * 1000))

def process_revision_directives(context, revision, directives):
    """Override revision ID generation."""
    new_rev_id = get_next_revision_id()
    logger.info(f"Generated revision ID: {new_rev_id}")

    script = directives[0]
    script.rev_id = new_rev_id

def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        process_revision_directives=process_revision_directives
    )

    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            # SQLite cannot ALTER constraints in place
            render_as_batch=connection.dialect.name == "sqlite",
            process_revision_directives=process_revision_directives
        )

        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
