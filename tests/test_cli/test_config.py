from datetime import timedelta
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from vibe_skills.config import LoggingConfig, Settings, load_config_file, load_settings


class TestSettings:
    def test_defaults(self, isolated_home: Path):
        settings = load_settings()

        assert settings.ref == "main"
        assert settings.registry_url.endswith("/vibe-skills")
        assert settings.cache_dir == isolated_home / "cache"
        assert settings.cache_ttl_delta == timedelta(hours=1)

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("VIBE_SKILLS_REF", "develop")
        monkeypatch.setenv("VIBE_SKILLS_CACHE_TTL", "60")

        settings = load_settings()

        assert settings.ref == "develop"
        assert settings.cache_ttl == 60

    def test_config_file_is_lowest_priority(self, isolated_home: Path, monkeypatch):
        isolated_home.mkdir(parents=True)
        (isolated_home / "config.yaml").write_text(
            yaml.safe_dump({"ref": "from-file", "cache_ttl": 10, "http_timeout": 5, "unknown": 1})
        )
        monkeypatch.setenv("VIBE_SKILLS_CACHE_TTL", "20")

        settings = load_settings(http_timeout=7)

        assert settings.ref == "from-file"
        assert settings.cache_ttl == 20
        assert settings.http_timeout == 7

    def test_none_overrides_are_ignored(self):
        assert load_settings(ref=None).ref == "main"

    def test_malformed_config_file_is_ignored(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("ref: [unclosed")

        assert load_config_file(path) == {}

    def test_non_mapping_config_file_is_ignored(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")

        assert load_config_file(path) == {}

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD")


class TestLoggingConfig:
    def test_level_is_normalized(self):
        assert LoggingConfig(level="debug").level == "DEBUG"
