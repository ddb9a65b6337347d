from dataclasses import fields

from applytrack.config import Settings, settings


def test_settings_only_carry_used_options():
    names = {field.name for field in fields(Settings)}

    assert "environment" not in names
    assert "default_search_location" not in names
    assert settings.connector_retry_wait_seconds == 0
    assert settings.adzuna_app_id == ""


def test_sqlite_directory_is_created(tmp_path):
    target = tmp_path / "nested" / "data"
    config = Settings(database_url=f"sqlite:///{target / 'app.db'}")

    config.ensure_directories()

    assert target.is_dir()
