"""
Unit Tests for Configuration Management.

Tests run against the real project files (YAML configs). Secrets come from
the process environment set up in the root conftest. Failure scenarios use
tmp_path to create controlled filesystems.
"""

from types import SimpleNamespace
from unittest.mock import patch

import pydantic
import pytest

from mynote.backend.core.config import (
    AppConfig,
    find_project_root,
    get_app_config,
    get_database_url,
    get_server_base_url,
    get_settings,
    load_yaml_config,
)
from mynote.backend.core.config_schema import DatabaseSchema, FeaturesSchema


@pytest.fixture(autouse=True)
def _clear_config_cache():
    """Clear lru_cache between tests so each test gets a fresh load."""
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


def _database(**overrides) -> DatabaseSchema:
    fields = {
        "driver": "sqlite+aiosqlite",
        "host": "localhost",
        "port": 5432,
        "name": "data/mynote.db",
        "user": "mynote",
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,
        "echo": False,
    }
    fields.update(overrides)
    return DatabaseSchema(**fields)


class TestFindProjectRoot:

    def test_finds_root_from_project_directory(self):
        root = find_project_root()
        assert (root / ".project_root").exists()
        assert (root / "config" / "settings").is_dir()

    def test_raises_outside_project(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(RuntimeError):
            find_project_root()


class TestLoadYamlConfig:

    def test_loads_application_yaml(self):
        raw = load_yaml_config("application.yaml")
        assert raw["api_prefix"] == "/api"

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_yaml_config("does-not-exist.yaml")


class TestAppConfig:

    def test_all_sections_load(self):
        config = AppConfig()
        assert config.application.name == "MyNote"
        assert config.database.driver.startswith("sqlite")
        assert config.security.jwt.algorithm == "HS256"
        assert config.security.views.unique_window_hours == 24

    def test_shipped_feature_flags(self):
        features = get_app_config().features
        assert features.folder_unique_names is True
        assert features.search_hides_protected is True
        assert features.api_detailed_errors is False

    def test_session_lasts_seven_days(self):
        assert get_app_config().security.jwt.access_token_expire_minutes == 7 * 24 * 60

    def test_unknown_keys_are_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            FeaturesSchema(
                api_detailed_errors=False,
                security_startup_checks_enabled=True,
                folder_unique_names=True,
                search_hides_protected=True,
                surprise=True,
            )


class TestSettings:

    def test_secrets_come_from_environment(self):
        settings = get_settings()
        assert len(settings.jwt_secret) >= 32
        assert settings.admin_username


class TestDatabaseUrl:

    def _config(self, database: DatabaseSchema) -> SimpleNamespace:
        return SimpleNamespace(database=database)

    def test_sqlite_file_is_relative_to_project_root(self):
        with patch(
            "mynote.backend.core.config.get_app_config",
            return_value=self._config(_database()),
        ):
            url = get_database_url()

        assert url.startswith("sqlite+aiosqlite:///")
        assert url.endswith(str(find_project_root() / "data" / "mynote.db"))

    def test_sqlite_in_memory(self):
        with patch(
            "mynote.backend.core.config.get_app_config",
            return_value=self._config(_database(name=":memory:")),
        ):
            assert get_database_url() == "sqlite+aiosqlite:///:memory:"

    def test_sync_driver_drops_async_suffix(self):
        with patch(
            "mynote.backend.core.config.get_app_config",
            return_value=self._config(_database(name=":memory:")),
        ):
            assert get_database_url(async_driver=False) == "sqlite:///:memory:"

    def test_postgres_url_uses_password_secret(self):
        database = _database(driver="postgresql+asyncpg", name="mynote", host="db")
        with (
            patch("mynote.backend.core.config.get_app_config", return_value=self._config(database)),
            patch(
                "mynote.backend.core.config.get_settings",
                return_value=SimpleNamespace(db_password="pw"),
            ),
        ):
            url = get_database_url()

        assert url == "postgresql+asyncpg://mynote:pw@db:5432/mynote"


def test_server_base_url():
    assert get_server_base_url() == "http://127.0.0.1:5000"
