"""
Unit tests for application settings.
"""

from app.core.config import DirectoryServiceConfig, Settings


class TestSettings:
    """Tests for Settings."""

    def test_cors_origins_list(self):
        settings = Settings(cors_origins="http://a.test, http://b.test ,")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_environment_flags(self):
        settings = Settings(python_env="Production")
        assert settings.is_production is True
        assert settings.is_development is False


class TestDirectoryServiceConfig:
    """Tests for DirectoryServiceConfig."""

    def test_from_settings(self):
        settings = Settings(
            directory_service_url="http://directory.test/",
            directory_service_timeout=3.5,
        )

        config = DirectoryServiceConfig.from_settings(settings)

        assert config.base_url == "http://directory.test"
        assert config.timeout == 3.5
        assert config.enabled is True

    def test_empty_url_disables_sync(self):
        assert DirectoryServiceConfig(base_url="").enabled is False
