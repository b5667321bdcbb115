"""
Tests for settings and .env loading.
"""

import os
from pathlib import Path

import pytest

from jobboard.config import DEFAULT_RECOMMENDATION_LIMIT, load_settings
from jobboard.env import load_env


class TestLoadSettings:
    """Test environment-driven settings."""

    def test_defaults(self):
        settings = load_settings({})

        assert settings.db_path == Path("data/jobboard.db")
        assert settings.storage_url is None
        assert settings.storage_key is None
        assert settings.recommendation_limit == DEFAULT_RECOMMENDATION_LIMIT == 3
        assert settings.log_level == "INFO"
        assert settings.log_dir == Path("logs")

    def test_overrides(self):
        settings = load_settings({
            "JOBBOARD_DB_PATH": "/tmp/jb.db",
            "STORAGE_URL": "https://storage.example.com/",
            "STORAGE_KEY": "secret",
            "RECOMMENDATION_LIMIT": "5",
            "LOG_LEVEL": "debug",
        })

        assert settings.db_path == Path("/tmp/jb.db")
        assert settings.storage_url == "https://storage.example.com"
        assert settings.storage_key == "secret"
        assert settings.recommendation_limit == 5
        assert settings.log_level == "DEBUG"

    def test_blank_limit_uses_default(self):
        assert load_settings({"RECOMMENDATION_LIMIT": " "}).recommendation_limit == 3

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="LOG_LEVEL"):
            load_settings({"LOG_LEVEL": "verbose"})

    @pytest.mark.parametrize("raw", ["0", "-1", "three"])
    def test_invalid_limit(self, raw):
        with pytest.raises(ValueError, match="RECOMMENDATION_LIMIT"):
            load_settings({"RECOMMENDATION_LIMIT": raw})


class TestLoadEnv:
    """Test .env loading."""

    def test_loads_dotenv_from_cwd(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("JOBBOARD_TEST_VALUE=from-dotenv\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("JOBBOARD_TEST_VALUE", raising=False)

        load_env()

        assert os.environ["JOBBOARD_TEST_VALUE"] == "from-dotenv"
        monkeypatch.delenv("JOBBOARD_TEST_VALUE")

    def test_existing_environment_wins(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("JOBBOARD_TEST_VALUE=from-dotenv\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("JOBBOARD_TEST_VALUE", "from-env")

        load_env()

        assert os.environ["JOBBOARD_TEST_VALUE"] == "from-env"

    def test_missing_dotenv_is_ignored(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        load_env()
