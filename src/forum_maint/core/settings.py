"""Maintenance settings and configuration.

This module defines all configuration options for the forum maintenance
tasks. Settings are loaded from environment variables with sensible defaults.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Maintenance settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./forum.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Renumbering waits this long for row locks before aborting (PostgreSQL only).
    renumber_lock_timeout_ms: int = Field(default=5_000, alias="RENUMBER_LOCK_TIMEOUT_MS")

    # Rebake batch loop
    rebake_batch_size: int = Field(default=500, alias="REBAKE_BATCH_SIZE")
    rebake_progress_every: int = Field(default=100, alias="REBAKE_PROGRESS_EVERY")
    disable_edit_notifications: bool = Field(
        default=False,
        alias="DISABLE_EDIT_NOTIFICATIONS",
    )

    # Dotted module path exposing rebake_service, rewrite_service and upload_service.
    collaborators_module: str | None = Field(default=None, alias="COLLABORATORS_MODULE")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


@contextmanager
def override_settings(base: Settings, **changes: Any) -> Iterator[Settings]:
    """Yield a copy of ``base`` with ``changes`` applied.

    The copy is handed to whoever needs the override; ``base`` itself is never
    mutated, so nothing has to be restored when the block exits.

    Args:
        base: Settings instance to derive from.
        **changes: Field names and their overridden values.

    Raises:
        KeyError: If a change names an unknown setting.
    """
    unknown = set(changes) - set(Settings.model_fields)
    if unknown:
        raise KeyError(f"Unknown settings: {', '.join(sorted(unknown))}")
    yield base.model_copy(update=changes)


settings = Settings()
