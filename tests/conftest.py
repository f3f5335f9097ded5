"""Shared pytest fixtures for wealth tracker tests."""

import pytest

import wealth_tracker.data.database as dbmod
from wealth_tracker.core import config as configmod
from wealth_tracker.data.database import get_db, set_db_path


@pytest.fixture(autouse=True)
def isolated_db(tmp_path, monkeypatch):
    """Each test gets a fresh temp DB and default config. Resets the singletons after."""
    monkeypatch.setattr(configmod, "_config_path", lambda: tmp_path / "config.json")
    configmod.reset_config_cache()
    db_path = tmp_path / "test.db"
    set_db_path(str(db_path))
    db = get_db()
    yield db
    db.close()
    dbmod._db = None
    configmod.reset_config_cache()
