"""Tests for the Alembic upgrade helper."""

import os

from forum_maint.scripts import migrate


def test_config_points_at_project_migrations():
    cfg = migrate.build_config("sqlite:///./upgrade-test.db")

    assert cfg.get_main_option("script_location") == migrate.MIGRATIONS_DIR
    assert cfg.get_main_option("sqlalchemy.url") == "sqlite:///./upgrade-test.db"
    assert os.path.isfile(os.path.join(migrate.MIGRATIONS_DIR, "env.py"))


def test_upgrade_runs_to_head(mocker):
    upgrade = mocker.patch.object(migrate.command, "upgrade")

    migrate.run_upgrade_head("sqlite://")

    cfg, revision = upgrade.call_args.args
    assert revision == "head"
    assert cfg.get_main_option("sqlalchemy.url") == "sqlite://"
