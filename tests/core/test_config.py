"""
Tests for YAML configuration loading.
"""

import json
from pathlib import Path

import pytest

from core.config import DATA_DIR_ENV, load_app_config


def _write_config(base_dir: Path, text: str) -> None:
    config_dir = base_dir / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.yml").write_text(text, encoding="utf-8")


class TestLoadAppConfig:

    def test_defaults_without_file(self, tmp_path):
        config = load_app_config(tmp_path, environ={})

        assert config.data_dir == tmp_path / "data"
        assert config.logs_dir == tmp_path / "logs"
        assert config.db_path == tmp_path / "data" / "tabs.db"
        assert config.logging.level == "INFO"
        assert config.recovery.browser == "chrome"
        assert config.recovery.profile == "Default"
        assert config.dedup.strategy == "normalized_url"
        assert config.dedup.normalize_titles is False

    def test_overrides_from_yaml(self, tmp_path):
        _write_config(
            tmp_path,
            """
logging:
  level: debug
  log_max_mb: 2
recovery:
  browser: Edge
  profile: Profile 1
dedup:
  strategy: fuzzy_url
  fuzzy_threshold: 0.8
  normalize_titles: true
data_dir: /srv/tabs
""",
        )

        config = load_app_config(tmp_path, environ={})

        assert config.logging.level == "DEBUG"
        assert config.logging.log_max_mb == 2
        assert config.recovery.browser == "edge"
        assert config.recovery.profile == "Profile 1"
        assert config.dedup.strategy == "fuzzy_url"
        assert config.dedup.fuzzy_threshold == pytest.approx(0.8)
        assert config.dedup.normalize_titles is True
        assert config.data_dir == Path("/srv/tabs")

    def test_environment_overrides_data_dir(self, tmp_path):
        _write_config(tmp_path, "data_dir: /from/yaml\n")
        config = load_app_config(tmp_path, environ={DATA_DIR_ENV: str(tmp_path / "env")})
        assert config.data_dir == tmp_path / "env"

    def test_non_mapping_rejected(self, tmp_path):
        _write_config(tmp_path, "- just\n- a list\n")
        with pytest.raises(ValueError, match="mapping"):
            load_app_config(tmp_path, environ={})

    def test_threshold_out_of_range_rejected(self, tmp_path):
        _write_config(tmp_path, "dedup:\n  fuzzy_threshold: 1.5\n")
        with pytest.raises(ValueError, match="fuzzy_threshold"):
            load_app_config(tmp_path, environ={})

    def test_to_json(self, tmp_path):
        data = json.loads(load_app_config(tmp_path, environ={}).to_json())
        assert data["dedup"]["strategy"] == "normalized_url"
        assert data["data_dir"] == str(tmp_path / "data")
