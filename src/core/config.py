from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

DATA_DIR_ENV = "TABSALVAGE_DATA_DIR"


@dataclass(slots=True)
class LoggingConfig:
    """Logging configuration from config.yml."""

    level: str = "INFO"
    log_max_mb: int = 10
    log_backup_count: int = 5


@dataclass(slots=True)
class RecoveryConfig:
    """Default browser/profile used when recovering from a live store."""

    browser: str = "chrome"
    profile: str = "Default"


@dataclass(slots=True)
class DedupConfig:
    """Default dedup policy from config.yml."""

    strategy: str = "normalized_url"
    fuzzy_threshold: float = 0.9
    normalize_titles: bool = False


@dataclass(slots=True)
class AppConfig:
    """Top-level configuration resolved from disk."""

    base_dir: Path
    data_dir: Path
    logs_dir: Path
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    recovery: RecoveryConfig = field(default_factory=RecoveryConfig)
    dedup: DedupConfig = field(default_factory=DedupConfig)

    @property
    def db_path(self) -> Path:
        return self.data_dir / "tabs.db"

    def to_json(self) -> str:
        """Serialize the configuration into a JSON string for diagnostics."""
        data = {
            "data_dir": str(self.data_dir),
            "logs_dir": str(self.logs_dir),
            "logging": {
                "level": self.logging.level,
                "log_max_mb": self.logging.log_max_mb,
                "log_backup_count": self.logging.log_backup_count,
            },
            "recovery": {
                "browser": self.recovery.browser,
                "profile": self.recovery.profile,
            },
            "dedup": {
                "strategy": self.dedup.strategy,
                "fuzzy_threshold": self.dedup.fuzzy_threshold,
                "normalize_titles": self.dedup.normalize_titles,
            },
        }
        return json.dumps(data, indent=2, sort_keys=True)


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        content = yaml.safe_load(handle) or {}
        if not isinstance(content, dict):
            raise ValueError(f"Config file {path} must contain a mapping at the top level.")
        return content


def load_app_config(base_dir: Path, environ: Dict[str, str] | None = None) -> AppConfig:
    """Load application configuration from disk, providing sensible defaults."""

    env = os.environ if environ is None else environ
    config_yaml = base_dir / "config" / "config.yml"
    config_overrides = _load_yaml(config_yaml)

    if env.get(DATA_DIR_ENV):
        data_dir = Path(env[DATA_DIR_ENV])
    elif config_overrides.get("data_dir"):
        data_dir = Path(config_overrides["data_dir"])
    else:
        data_dir = base_dir / "data"

    logs_dir = Path(config_overrides["logs_dir"]) if config_overrides.get("logs_dir") else base_dir / "logs"

    logging_cfg = config_overrides.get("logging") or {}
    logging_config = LoggingConfig(
        level=str(logging_cfg.get("level", "INFO")).upper(),
        log_max_mb=int(logging_cfg.get("log_max_mb", 10)),
        log_backup_count=int(logging_cfg.get("log_backup_count", 5)),
    )

    recovery_cfg = config_overrides.get("recovery") or {}
    recovery_config = RecoveryConfig(
        browser=str(recovery_cfg.get("browser", "chrome")).lower(),
        profile=str(recovery_cfg.get("profile", "Default")),
    )

    dedup_cfg = config_overrides.get("dedup") or {}
    threshold = float(dedup_cfg.get("fuzzy_threshold", 0.9))
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"dedup.fuzzy_threshold must be within [0, 1], got {threshold}")
    dedup_config = DedupConfig(
        strategy=str(dedup_cfg.get("strategy", "normalized_url")).lower(),
        fuzzy_threshold=threshold,
        normalize_titles=bool(dedup_cfg.get("normalize_titles", False)),
    )

    return AppConfig(
        base_dir=base_dir,
        data_dir=data_dir,
        logs_dir=logs_dir,
        logging=logging_config,
        recovery=recovery_config,
        dedup=dedup_config,
    )
