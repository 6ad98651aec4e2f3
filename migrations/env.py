"""Alembic memakai engine dan metadata aplikasi; URL diambil dari DATABASE_URL."""
from logging.config import fileConfig

from alembic import context
from sqlmodel import SQLModel

import smartcare.models  # noqa: F401  (registrasi tabel ke metadata)
from smartcare.core.database import DATABASE_URL, engine

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata


def _configure(**kwargs) -> None:
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)


if context.is_offline_mode():
    _configure(url=DATABASE_URL, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()
else:
    with engine.connect() as connection:
        # ALTER TABLE di SQLite hanya lewat batch mode
        _configure(connection=connection, render_as_batch=connection.dialect.name == "sqlite")
        with context.begin_transaction():
            context.run_migrations()
