"""
Tests for environment-driven settings.
"""

import pytest
from pydantic import ValidationError

from lottiekit.config.settings import Settings, get_settings


@pytest.fixture
def clean_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Test defaults and environment overrides."""

    def test_defaults(self, settings):
        assert settings.debug is False
        assert settings.parser.default_scale == 1.0
        assert settings.parser.image_layer_warning_threshold == 5
        assert settings.parser.min_supported_version == (4, 5, 0)
        assert settings.loader.max_workers == 2
        assert settings.loader.wait_timeout == 30.0

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("LOTTIEKIT_DEBUG", "true")
        monkeypatch.setenv("LOTTIEKIT_PARSER__DEFAULT_SCALE", "2.5")
        monkeypatch.setenv("LOTTIEKIT_LOADER__MAX_WORKERS", "4")
        settings = Settings(_env_file=None)
        assert settings.debug is True
        assert settings.parser.default_scale == 2.5
        assert settings.loader.max_workers == 4

    def test_env_file(self, temp_dir, monkeypatch):
        monkeypatch.delenv("LOTTIEKIT_PARSER__IMAGE_LAYER_WARNING_THRESHOLD", raising=False)
        env_file = f"{temp_dir}/.env"
        with open(env_file, "w") as f:
            f.write("LOTTIEKIT_PARSER__IMAGE_LAYER_WARNING_THRESHOLD=10\n")
        settings = Settings(_env_file=env_file)
        assert settings.parser.image_layer_warning_threshold == 10

    def test_rejects_non_positive_scale(self, monkeypatch):
        monkeypatch.setenv("LOTTIEKIT_PARSER__DEFAULT_SCALE", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_default_scale_used_by_parser(self, settings):
        from conftest import make_document
        from lottiekit.parser import parse_document

        settings.parser.default_scale = 3.0
        composition = parse_document(make_document(w=10, h=10), settings=settings)
        assert composition.scale == 3.0
        assert composition.bounds.width == 30


class TestGetSettings:
    """Test the cached accessor."""

    def test_cached(self, clean_cache):
        assert get_settings() is get_settings()

    def test_cache_clear_rereads_environment(self, clean_cache, monkeypatch):
        monkeypatch.setenv("LOTTIEKIT_LOADER__WAIT_TIMEOUT", "1.5")
        get_settings.cache_clear()
        assert get_settings().loader.wait_timeout == 1.5
