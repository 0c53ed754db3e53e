import os
import sys
from logging.config import fileConfig

from alembic import context

# Migrations run from backend/alembic; the application modules live one level up
sys.path.insert(0, os.path.realpath(os.path.join(os.path.dirname(__file__), "..")))

from database import IS_SQLITE, SQLALCHEMY_DATABASE_URL, Base, engine  # noqa: E402
import models  # noqa: E402,F401

config = context.config
# alembic.ini interpolates %, so escape it in passwords
config.set_main_option("sqlalchemy.url", SQLALCHEMY_DATABASE_URL.replace("%", "%%"))

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
# SQLite cannot ALTER most columns in place
as_batch = IS_SQLITE


def run_migrations_offline() -> None:
    """Emit the migration SQL without a connection."""
    context.configure(
        url=SQLALCHEMY_DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=as_batch,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    # Same engine as the application, so the sqlite foreign key pragma applies here too
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, render_as_batch=as_batch)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
