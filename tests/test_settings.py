"""Tests for configuration loading and scoped overrides."""

import pytest

from forum_maint.core.settings import Settings, override_settings


def test_defaults(test_settings):
    assert test_settings.renumber_lock_timeout_ms == 5_000
    assert test_settings.disable_edit_notifications is False
    assert test_settings.collaborators_module is None


def test_environment_aliases(monkeypatch):
    monkeypatch.setenv("RENUMBER_LOCK_TIMEOUT_MS", "250")
    monkeypatch.setenv("REBAKE_BATCH_SIZE", "10")
    monkeypatch.setenv("COLLABORATORS_MODULE", "site.collaborators")

    loaded = Settings(_env_file=None)

    assert loaded.renumber_lock_timeout_ms == 250
    assert loaded.rebake_batch_size == 10
    assert loaded.collaborators_module == "site.collaborators"


def test_test_database_override():
    loaded = Settings(
        _env_file=None,
        DATABASE_URL="postgresql+asyncpg://db/forum",
        TEST_DATABASE_URL="sqlite://",
        USE_TEST_DATABASE=True,
    )

    assert loaded.effective_database_url == "sqlite://"


def test_sync_url_swaps_async_driver():
    loaded = Settings(_env_file=None, DATABASE_URL="postgresql+asyncpg://db/forum")

    assert loaded.database_url_sync == "postgresql+psycopg://db/forum"


def test_override_leaves_base_untouched(test_settings):
    with override_settings(test_settings, disable_edit_notifications=True) as scoped:
        assert scoped.disable_edit_notifications is True
        assert test_settings.disable_edit_notifications is False


def test_override_base_untouched_after_error(test_settings):
    with pytest.raises(RuntimeError):
        with override_settings(test_settings, rebake_batch_size=1):
            raise RuntimeError("batch failed")

    assert test_settings.rebake_batch_size == 500


def test_override_rejects_unknown_settings(test_settings):
    with pytest.raises(KeyError, match="no_such_flag"):
        with override_settings(test_settings, no_such_flag=True):
            pass
