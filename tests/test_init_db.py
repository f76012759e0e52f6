from sqlalchemy import create_engine, inspect

from pawsi.core import config as config_module
from pawsi.db import init_db as init_module

EXPECTED_TABLES = {
    "users",
    "refresh_tokens",
    "lost_posts",
    "reported_posts",
    "adoption_posts",
    "classifieds",
    "veterinarians",
    "post_reports",
    "notifications",
    "deletion_logs",
    "maintenance_locks",
}


def test_init_db_creates_tables_for_sqlite_in_production(monkeypatch):
    engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
    monkeypatch.setattr(init_module, "engine", engine)
    monkeypatch.setattr(config_module.settings, "ENV", "production")
    monkeypatch.setattr(config_module.settings, "DATABASE_URL", "sqlite:///:memory:")

    init_module.init_db(drop_all=True)

    assert EXPECTED_TABLES <= set(inspect(engine).get_table_names())


def test_init_db_creates_tables_when_auto_create_enabled(monkeypatch):
    engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
    monkeypatch.setattr(init_module, "engine", engine)
    monkeypatch.setattr(config_module.settings, "ENV", "production")
    monkeypatch.setattr(config_module.settings, "DATABASE_URL", config_module.DEFAULT_DATABASE_URL)
    monkeypatch.setattr(config_module.settings, "AUTO_CREATE_TABLES", True)

    init_module.init_db(drop_all=True)

    assert "deletion_logs" in inspect(engine).get_table_names()


def test_init_db_skips_production_mysql_without_opt_in(monkeypatch):
    engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
    monkeypatch.setattr(init_module, "engine", engine)
    monkeypatch.setattr(config_module.settings, "ENV", "production")
    monkeypatch.setattr(config_module.settings, "DATABASE_URL", config_module.DEFAULT_DATABASE_URL)
    monkeypatch.setattr(config_module.settings, "AUTO_CREATE_TABLES", False)

    init_module.init_db()

    assert inspect(engine).get_table_names() == []
