"""Alembic environment for the itinerary_version schema.

The database URL always comes from application settings (DATABASE_URL), never
from alembic.ini, so migrations and the running service target the same
database.
"""

from logging.config import fileConfig

from alembic import context

from backend.reflow.config import get_settings
from backend.reflow.db.engine import create_engine_from_settings
from backend.reflow.db.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
settings = get_settings()


def run_migrations_offline() -> None:
    """Emit migration SQL for DATABASE_URL without connecting."""
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL must be set to run migrations")

    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations over the same engine configuration the service uses."""
    engine = create_engine_from_settings(settings)

    try:
        with engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                compare_type=True,
            )

            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
